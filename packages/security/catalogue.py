"""Security pattern catalogue shared by the ranker and the document scanner."""
from __future__ import annotations

import re
from enum import Enum
from functools import lru_cache
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple


class SecurityCategory(str, Enum):
    """Catalogue category with the penalty it costs a candidate."""

    SQL_INJECTION = "sql_injection"
    XSS = "xss"
    CODE_INJECTION = "code_injection"
    PATH_TRAVERSAL = "path_traversal"

    @property
    def penalty(self) -> float:
        return _PENALTIES[self]


_PENALTIES: Dict[SecurityCategory, float] = {
    SecurityCategory.SQL_INJECTION: 0.4,
    SecurityCategory.XSS: 0.3,
    SecurityCategory.CODE_INJECTION: 0.4,
    SecurityCategory.PATH_TRAVERSAL: 0.3,
}


_DEFAULT_PATTERNS: Dict[SecurityCategory, List[str]] = {
    SecurityCategory.SQL_INJECTION: [
        r"SELECT.*FROM.*WHERE.*=.*\$|%s",
        r"INSERT.*INTO.*VALUES.*\$|%s",
        r"UPDATE.*SET.*WHERE.*=.*\$|%s",
        r"DELETE.*FROM.*WHERE.*=.*\$|%s",
    ],
    SecurityCategory.XSS: [
        r"<script.*?>.*?</script>",
        r"javascript:",
        r"on\w+\s*=\s*[\"'][^\"']*[\"']",
        r"eval\s*\(",
        r"innerHTML\s*=",
    ],
    SecurityCategory.CODE_INJECTION: [
        r"exec\s*\(",
        r"system\s*\(",
        r"shell_exec\s*\(",
        r"passthru\s*\(",
        r"eval\s*\(",
    ],
    SecurityCategory.PATH_TRAVERSAL: [
        r"\.\./|\.\.\\|%2e%2e%2f|%2e%2e%5c",
        r"/etc/passwd|/etc/shadow",
        r"\.\..*/.*/|\.\..*\\.*\\",
    ],
}


class SecurityCatalogue:
    def __init__(self, patterns: Mapping[SecurityCategory, Sequence[str]]) -> None:
        self._patterns: Mapping[SecurityCategory, Tuple["re.Pattern[str]", ...]] = MappingProxyType(
            {
                category: tuple(re.compile(src, re.IGNORECASE) for src in sources)
                for category, sources in patterns.items()
            }
        )

    def get(self, category: str) -> Tuple["re.Pattern[str]", ...]:
        try:
            key = SecurityCategory(category)
        except ValueError:
            return ()
        return self._patterns.get(key, ())

    def categories(self) -> List[SecurityCategory]:
        return list(self._patterns)

    def matching_categories(self, text: str) -> List[SecurityCategory]:
        return [
            category
            for category, patterns in self._patterns.items()
            if any(pattern.search(text) for pattern in patterns)
        ]

    def score(self, text: str) -> float:
        """1.0 minus one penalty per matching category, floored at zero."""

        return _penalised(self.matching_categories(text))


def _penalised(categories: Iterable[SecurityCategory]) -> float:
    score = 1.0
    for category in categories:
        score -= category.penalty
    return max(0.0, score)


@lru_cache(maxsize=1)
def default_catalogue() -> SecurityCatalogue:
    return SecurityCatalogue(_DEFAULT_PATTERNS)


__all__ = ["SecurityCatalogue", "SecurityCategory", "default_catalogue"]
