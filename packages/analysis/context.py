"""Coarse scope detection from the lines just above the cursor."""
from __future__ import annotations

from typing import Dict, List, Tuple

from packages.schema.models import CodeContext, Position

LOOKBACK_LINES = 10

# language -> (function markers, class markers)
_MARKERS: Dict[str, Tuple[Tuple[str, ...], Tuple[str, ...]]] = {
    "python": (("def ",), ("class ",)),
    "javascript": (("function", "=>"), ("class ",)),
    "typescript": (("function", "=>"), ("class ",)),
}


def split_lines(document: str) -> List[str]:
    return document.split("\n")


def line_at(lines: List[str], index: int) -> str:
    """Line at ``index`` or an empty string outside the document."""

    if 0 <= index < len(lines):
        return lines[index]
    return ""


def analyze_context(document: str, position: Position, language: str) -> CodeContext:
    markers = _MARKERS.get(language)
    if markers is None:
        return CodeContext()

    function_markers, class_markers = markers
    lines = split_lines(document)
    in_function = False
    in_class = False
    for index in range(max(0, position.line - LOOKBACK_LINES), position.line):
        line = line_at(lines, index)
        if any(marker in line for marker in function_markers):
            in_function = True
        if any(marker in line for marker in class_markers):
            in_class = True
    return CodeContext(in_function=in_function, in_class=in_class)
