"""Word segmentation for the folder classifier."""

import regex

# A run of word characters, combining marks included; a single apostrophe,
# period or colon between two word characters does not end the word
# ("don't", "example.com").
_WORD_RE = regex.compile(r"\w+(?:['’.:]\w+)*")
_DIGIT_RE = regex.compile(r"\d")


def extract_words(text: str) -> list[str]:
    """Split text into distinct lower-cased candidate words.

    Words shorter than two characters and words containing a digit are
    dropped. Each word is returned once, in order of first occurrence.

    Args:
        text: Plain text to segment

    Returns:
        List of unique words
    """
    words: list[str] = []
    seen: set[str] = set()
    for match in _WORD_RE.finditer(text):
        word = match.group(0).lower()
        if len(word) <= 1 or word in seen or _DIGIT_RE.search(word):
            continue
        seen.add(word)
        words.append(word)
    return words
