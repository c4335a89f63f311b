"""Text normalization for matching keys and searchable titles.

Strips diacritics by decomposing to NFD and dropping combining marks, so
"Montréal" and "Montreal" produce the same key.
"""

import unicodedata


def normalize_text(text: str | None) -> str:
    """Normalize text for matching purposes.

    Steps:
        1. Return empty string for None/empty input
        2. Decompose to NFD and drop combining marks
        3. Lowercase the text
        4. Strip leading/trailing whitespace

    Args:
        text: Input text to normalize.

    Returns:
        Normalized text string.
    """
    if not text:
        return ""

    decomposed = unicodedata.normalize("NFD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.lower().strip()
