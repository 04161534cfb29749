# JSONL writer for ranked suggestions, one record per candidate.
from pathlib import Path
from typing import Any, Dict, List, TextIO
import json

from packages.schema.models import Suggestion


def suggestion_record(rank: int, suggestion: Suggestion, language: str) -> Dict[str, Any]:
    return {
        "rank": rank,
        "language": language,
        "suggestion": suggestion.model_dump(mode="json"),
        "composite_score": round(suggestion.composite_score, 6),
    }


def dump_jsonl(handle: TextIO, suggestions: List[Suggestion], language: str) -> None:
    for rank, suggestion in enumerate(suggestions, start=1):
        rec = suggestion_record(rank, suggestion, language)
        handle.write(json.dumps(rec, ensure_ascii=False) + "\n")


def write_jsonl(path: Path, suggestions: List[Suggestion], language: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        dump_jsonl(f, suggestions, language)
