"""Issue title normalization for deduplication."""

import re

_PUNCT_RE = re.compile(r"[^\w\s]|_")
_SPACE_RE = re.compile(r"\s+")


def normalize_title(title: str) -> str:
    """
    Canonicalize an issue title for matching.

    Lower-cases, strips punctuation (anything that is not alphanumeric or
    whitespace), collapses whitespace runs and trims. Never raises; empty or
    symbol-only input normalizes to "".

    Two titles refer to the same issue iff their normalized forms are equal.
    There is no fuzzy or synonym matching.
    """
    if not isinstance(title, str):
        return ""
    text = _PUNCT_RE.sub("", title.lower())
    return _SPACE_RE.sub(" ", text).strip()


def same_issue(a: str, b: str) -> bool:
    return normalize_title(a) == normalize_title(b)
