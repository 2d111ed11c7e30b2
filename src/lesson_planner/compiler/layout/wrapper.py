"""
Module: compiler.layout.wrapper

Purpose:
    Break free text into display lines that fit a maximum width.
    Widths come from the rendering backend's text measurement, so the
    same wrapper works for any font the backend knows.

Key Functions:
    - wrap_text(): Greedy word wrap
    - fit_text(): Truncate one line with an ellipsis

Algorithm:
    Words are accumulated onto the current line while the measured width
    of the candidate line stays within max_width. A word that alone is
    wider than max_width is emitted on its own line, unsplit.
    Explicit newlines always start a new line.

Used By:
    - compiler.layout.assembler: Section bodies and TOC rows
"""

from __future__ import annotations

import logging
from typing import Callable, List

from .models import FontSpec

logger = logging.getLogger(__name__)

# (text, font) -> width in mm
MeasureFn = Callable[[str, FontSpec], float]

ELLIPSIS = "..."


def wrap_text(
    text: str,
    max_width: float,
    font: FontSpec,
    measure: MeasureFn,
) -> List[str]:
    """
    Wrap text into lines no wider than max_width.

    Rules:
    1. Empty string -> no lines
    2. Whitespace-only string -> one empty line
    3. Each newline-separated paragraph wraps independently; an empty
       paragraph becomes an empty line
    4. Words are never split; an overlong word gets a line of its own

    Args:
        text: Text to wrap
        max_width: Maximum line width in mm
        font: Font used for measurement
        measure: Backend width function

    Returns:
        List of display lines

    Example:
        >>> wrap_text("uno dos tres", 20, font, measure)
        ['uno dos', 'tres']
    """
    if max_width <= 0:
        raise ValueError(f"max_width must be positive: {max_width}")
    if text == "":
        return []
    if not text.strip():
        return [""]

    lines: List[str] = []
    overlong = 0
    for paragraph in text.splitlines():
        words = paragraph.split()
        if not words:
            lines.append("")
            continue

        current = words[0]
        if measure(current, font) > max_width:
            overlong += 1
        for word in words[1:]:
            candidate = f"{current} {word}"
            if measure(candidate, font) <= max_width:
                current = candidate
            else:
                lines.append(current)
                current = word
                if measure(word, font) > max_width:
                    overlong += 1
        lines.append(current)

    if overlong:
        logger.warning(f"{overlong} word(s) wider than {max_width:.1f}mm left unsplit")

    return lines


def fit_text(
    text: str,
    max_width: float,
    font: FontSpec,
    measure: MeasureFn,
) -> str:
    """
    Shorten a single line to max_width, appending an ellipsis if cut.

    Args:
        text: Line to fit
        max_width: Maximum width in mm
        font: Font used for measurement
        measure: Backend width function

    Returns:
        The original text if it fits, otherwise the longest prefix plus
        "..." that fits (just "..." if nothing else does)
    """
    if measure(text, font) <= max_width:
        return text

    # Binary search on prefix length
    lo, hi = 0, len(text)
    while lo < hi:
        mid = (lo + hi + 1) // 2
        if measure(text[:mid].rstrip() + ELLIPSIS, font) <= max_width:
            lo = mid
        else:
            hi = mid - 1
    return text[:lo].rstrip() + ELLIPSIS
