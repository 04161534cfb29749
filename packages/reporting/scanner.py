"""Line-by-line security scan of a whole document."""
from __future__ import annotations

from typing import Dict, List, Tuple

from packages.analysis.context import split_lines
from packages.schema.models import SecurityIssue, SecurityReport
from packages.security.catalogue import SecurityCatalogue, SecurityCategory

VULNERABILITY_PENALTY = 0.2
WARNING_PENALTY = 0.1
LINES_PER_PENALTY_UNIT = 10

# path_traversal is catalogued for candidate scoring but not reported here.
REPORTED_CATEGORIES: Dict[SecurityCategory, Tuple[str, str]] = {
    SecurityCategory.SQL_INJECTION: (
        "Potential SQL Injection",
        "This line may be vulnerable to SQL injection attacks. Use parameterized queries.",
    ),
    SecurityCategory.XSS: (
        "Potential XSS Vulnerability",
        "This line may be vulnerable to cross-site scripting attacks. Sanitize user input.",
    ),
    SecurityCategory.CODE_INJECTION: (
        "Potential Code Injection",
        "This line may be vulnerable to code injection attacks. Validate and sanitize input.",
    ),
}


def scan(document: str, language: str, catalogue: SecurityCatalogue) -> SecurityReport:
    """Report one issue per matching pattern per line."""

    _ = language
    lines = split_lines(document)
    issues: List[SecurityIssue] = []
    for number, line in enumerate(lines, start=1):
        for category, (title, description) in REPORTED_CATEGORIES.items():
            for pattern in catalogue.get(category):
                if pattern.search(line):
                    issues.append(
                        SecurityIssue(
                            title=title,
                            description=description,
                            severity="vulnerability",
                            line=number,
                        )
                    )

    return SecurityReport(overall_score=overall_score(issues, len(lines)), issues=issues)


def overall_score(issues: List[SecurityIssue], total_lines: int) -> float:
    vulnerabilities = sum(1 for issue in issues if issue.severity == "vulnerability")
    warnings = sum(1 for issue in issues if issue.severity == "warning")
    penalty = vulnerabilities * VULNERABILITY_PENALTY + warnings * WARNING_PENALTY
    return max(0.0, 1 - penalty / max(1, total_lines / LINES_PER_PENALTY_UNIT))


__all__ = ["REPORTED_CATEGORIES", "overall_score", "scan"]
