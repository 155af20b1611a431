"""
Text utility functions for the Page Search engine.

Provides cleaning of extracted PDF text, truncation, and snippet
building around phrase matches for display.
"""

import re
import unicodedata


def clean_text(text: str) -> str:
    """
    Normalize and clean extracted text.

    Removes control characters, normalizes whitespace, and handles
    common PDF extraction artifacts.

    Args:
        text: Raw text from PDF extraction.

    Returns:
        Cleaned text string.
    """
    if not text:
        return ""

    text = unicodedata.normalize("NFKC", text)

    # Keep newlines and tabs, drop other control/format characters
    text = "".join(
        char for char in text
        if char in "\n\t" or not unicodedata.category(char).startswith("C")
    )

    text = re.sub(r"[ \t]+", " ", text)
    text = re.sub(r"\n{3,}", "\n\n", text)

    return "\n".join(line.strip() for line in text.split("\n")).strip()


def truncate_text(text: str, max_length: int, suffix: str = "...") -> str:
    """
    Truncate text to maximum length with ellipsis.

    Args:
        text: Text to truncate.
        max_length: Maximum length including suffix.
        suffix: String to append when truncated.

    Returns:
        Truncated text or original if within limit.
    """
    if not text or len(text) <= max_length:
        return text

    truncate_at = max_length - len(suffix)
    if truncate_at <= 0:
        return suffix[:max_length]

    truncated = text[:truncate_at]
    last_space = truncated.rfind(" ")

    if last_space > truncate_at * 0.7:
        truncated = truncated[:last_space]

    return truncated + suffix


def _collapse_whitespace(text: str):
    """Collapse whitespace runs to single spaces, mapping raw offsets to the result."""
    chars = []
    offsets = []
    pending_space = False

    for char in text:
        if char.isspace():
            pending_space = bool(chars)
            offsets.append(len(chars))
            continue
        if pending_space:
            chars.append(" ")
            pending_space = False
        offsets.append(len(chars))
        chars.append(char)

    offsets.append(len(chars))
    return "".join(chars), offsets


def make_snippet(text: str, pattern: str, length: int = 200, ellipsis: str = "...") -> str:
    """
    Cut a window of text centered on the first match of a pattern.

    Args:
        text: Full page text.
        pattern: Regular expression to locate (e.g. a whole-word matcher).
        length: Approximate snippet length in characters.
        ellipsis: Marker added where text was cut.

    Returns:
        Snippet around the first match, or the truncated start of the text
        when the pattern does not occur.
    """
    if not text:
        return ""

    flat, offsets = _collapse_whitespace(text)
    match = re.search(pattern, text)

    if match is None:
        return truncate_text(flat, length, ellipsis)

    if len(flat) <= length:
        return flat

    match_start, match_end = offsets[match.start()], offsets[match.end()]
    center = (match_start + match_end) // 2
    start = max(0, center - length // 2)
    end = min(len(flat), start + length)
    start = max(0, end - length)

    # Avoid cutting words at the edges
    if start > 0:
        space = flat.find(" ", start, match_start)
        if space != -1:
            start = space + 1
    if end < len(flat):
        space = flat.rfind(" ", match_end, end)
        if space != -1:
            end = space

    snippet = flat[start:end]
    if start > 0:
        snippet = ellipsis + snippet
    if end < len(flat):
        snippet = snippet + ellipsis

    return snippet


def highlight_matches(text: str, pattern: str, before: str = "**", after: str = "**") -> str:
    """
    Wrap every match of a pattern with markers.

    Args:
        text: Text to decorate.
        pattern: Regular expression to highlight.
        before: Marker inserted before each match.
        after: Marker inserted after each match.

    Returns:
        Decorated text.
    """
    if not text:
        return ""
    return re.sub(pattern, lambda m: f"{before}{m.group(0)}{after}", text)
