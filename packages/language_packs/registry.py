"""Read-only registry of per-language keyword and template packs."""
from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

import yaml

_PACKS_PATH = Path(__file__).resolve().with_name("packs.yaml")


@dataclass(frozen=True)
class LanguagePack:
    """Static completion data for one language."""

    language: str
    keywords: Tuple[str, ...]
    completions: Mapping[str, str]
    patterns: Mapping[str, "re.Pattern[str]"]


class LanguagePackRegistry:
    def __init__(self, packs: List[LanguagePack]) -> None:
        self._packs: Mapping[str, LanguagePack] = MappingProxyType(
            {pack.language: pack for pack in packs}
        )

    def get(self, language: str) -> Optional[LanguagePack]:
        return self._packs.get(language)

    def languages(self) -> List[str]:
        return list(self._packs)

    def __contains__(self, language: object) -> bool:
        return language in self._packs

    def __len__(self) -> int:
        return len(self._packs)


def load_registry(path: Path = _PACKS_PATH) -> LanguagePackRegistry:
    """Parse a packs YAML file into a registry."""

    if not path.exists():
        raise FileNotFoundError(f"Language pack file missing: {path}")
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    packs: List[LanguagePack] = []
    seen: Dict[str, int] = {}
    for index, entry in enumerate(data.get("packs", [])):
        pack = _parse_pack(entry, index)
        if pack.language in seen:
            raise ValueError(
                f"Duplicate language pack '{pack.language}' in {path} "
                f"(entries {seen[pack.language]} and {index})"
            )
        seen[pack.language] = index
        packs.append(pack)
    return LanguagePackRegistry(packs)


@lru_cache(maxsize=1)
def default_registry() -> LanguagePackRegistry:
    """Process-wide registry built from the bundled packs."""

    return load_registry()


def _parse_pack(entry: Dict[str, object], index: int) -> LanguagePack:
    language = entry.get("language")
    if not isinstance(language, str) or not language:
        raise ValueError(f"Language pack entry {index} has no language tag")

    keywords = entry.get("keywords") or []
    completions = entry.get("completions") or {}
    patterns = entry.get("patterns") or {}
    if not isinstance(keywords, list) or not isinstance(completions, dict) or not isinstance(patterns, dict):
        raise ValueError(f"Language pack '{language}' is malformed")

    try:
        compiled = {str(label): re.compile(str(src)) for label, src in patterns.items()}
    except re.error as exc:
        raise ValueError(f"Language pack '{language}' has an invalid pattern: {exc}") from exc

    return LanguagePack(
        language=language,
        keywords=tuple(str(keyword) for keyword in keywords),
        completions=MappingProxyType(
            {str(trigger): str(template) for trigger, template in completions.items()}
        ),
        patterns=MappingProxyType(compiled),
    )


__all__ = ["LanguagePack", "LanguagePackRegistry", "default_registry", "load_registry"]
