"""
Keyword extraction for relevance scoring.

Turns free text into an unordered, de-duplicated set of lower-cased tokens. Short
tokens and a small set of stop words are dropped.
"""

import re
from typing import FrozenSet

KeywordSet = FrozenSet[str]

STOP_WORDS: FrozenSet[str] = frozenset(
    {"and", "the", "in", "on", "at", "to", "for", "of", "with"}
)

# Tokens of this length or shorter are discarded
MIN_TOKEN_LENGTH = 2

_NON_WORD = re.compile(r"\W+")


def extract_keywords(text: str) -> KeywordSet:
    """
    Extract the keyword set of a text.

    Lower-cases the text, splits on runs of non-word characters, and keeps tokens
    longer than two characters that are not stop words.

    Args:
        text: Any text, including the empty string

    Returns:
        Frozen set of keywords (empty for empty input)

    Example:
        >>> sorted(extract_keywords("Built APIs in Go and Python for the team"))
        ['apis', 'built', 'python', 'team']
    """
    return frozenset(
        token
        for token in _NON_WORD.split(text.lower())
        if len(token) > MIN_TOKEN_LENGTH and token not in STOP_WORDS
    )
