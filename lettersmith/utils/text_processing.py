"""
Text processing utilities for comparing and displaying letters.
"""

import difflib
import re
from dataclasses import dataclass
from typing import List

# Words plus the whitespace that follows them, so segments re-join losslessly
_WORD_WITH_SPACE = re.compile(r"\S+\s*|\s+")


@dataclass(frozen=True)
class DiffSegment:
    """
    One run of a word-level diff.

    Attributes:
        value: Text of the run, including trailing whitespace
        added: True if the run only exists in the edited text
        removed: True if the run only exists in the original text
    """

    value: str
    added: bool = False
    removed: bool = False


def tokenize_words(text: str) -> List[str]:
    """
    Split text into word tokens that keep their trailing whitespace.

    Example:
        >>> tokenize_words("Dear  team,\\nthanks")
        ['Dear  ', 'team,\\n', 'thanks']
    """
    return _WORD_WITH_SPACE.findall(text)


def word_diff(original: str, edited: str) -> List[DiffSegment]:
    """
    Compute a word-level diff between two texts.

    Unchanged runs come out with added=removed=False. A replaced run produces a
    removed segment followed by an added segment.

    Args:
        original: Text before editing (e.g., the selected draft)
        edited: Text after editing (e.g., the final letter)

    Returns:
        Ordered list of DiffSegment. Joining the non-added segments gives back
        `original`; joining the non-removed segments gives back `edited`.

    Example:
        >>> [(s.value, s.added, s.removed) for s in word_diff("a b c", "a x c")]
        [('a ', False, False), ('b ', False, True), ('x ', True, False), ('c', False, False)]
    """
    before = tokenize_words(original)
    after = tokenize_words(edited)

    matcher = difflib.SequenceMatcher(a=before, b=after, autojunk=False)
    segments: List[DiffSegment] = []

    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            segments.append(DiffSegment("".join(before[i1:i2])))
            continue
        if tag in ("delete", "replace"):
            segments.append(DiffSegment("".join(before[i1:i2]), removed=True))
        if tag in ("insert", "replace"):
            segments.append(DiffSegment("".join(after[j1:j2]), added=True))

    return segments


def count_changed_words(segments: List[DiffSegment]) -> int:
    """Count words that were added or removed across diff segments."""
    return sum(len(s.value.split()) for s in segments if s.added or s.removed)


def truncate_display(text: str, max_len: int) -> str:
    """
    Truncate text for display with ellipsis if needed.

    Example:
        >>> truncate_display("this is a very long string", 10)
        'this is...'
    """
    return text if len(text) <= max_len else text[: max_len - 3] + "..."
