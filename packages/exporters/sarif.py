# SARIF v2.1.0 mapping for document security reports.
import re
from typing import Any, Dict, List

from packages.schema.models import SecurityReport

_LEVELS = {"vulnerability": "error", "warning": "warning", "safe": "note"}


def rule_id(title: str) -> str:
    """'Potential SQL Injection' -> 'POTENTIAL_SQL_INJECTION'."""
    return re.sub(r"[^A-Za-z0-9]+", "_", title).strip("_").upper()


def to_sarif(
    report: SecurityReport,
    artifact_uri: str,
    tool_name: str = "litecoder",
    tool_version: str = "0.0.0",
) -> Dict[str, Any]:
    rules: List[Dict[str, Any]] = []
    seen: Dict[str, int] = {}
    results: List[Dict[str, Any]] = []

    for issue in report.issues:
        rid = rule_id(issue.title)
        if rid not in seen:
            seen[rid] = len(rules)
            rules.append(
                {
                    "id": rid,
                    "name": issue.title,
                    "shortDescription": {"text": issue.title},
                    "fullDescription": {"text": issue.description},
                }
            )
        results.append(
            {
                "ruleId": rid,
                "ruleIndex": seen[rid],
                "level": _LEVELS[issue.severity],
                "message": {"text": issue.description},
                "locations": [
                    {
                        "physicalLocation": {
                            "artifactLocation": {"uri": artifact_uri},
                            "region": {"startLine": issue.line},
                        }
                    }
                ],
            }
        )

    return {
        "version": "2.1.0",
        "$schema": "https://json.schemastore.org/sarif-2.1.0.json",
        "runs": [
            {
                "tool": {
                    "driver": {"name": tool_name, "version": tool_version, "rules": rules}
                },
                "results": results,
                "properties": {"overallScore": report.overall_score},
            }
        ],
    }
