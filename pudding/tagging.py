#!/usr/bin/env python3
"""Tagging and recognition of lines appended by pudding.

A tagged line looks like a trailing comment::

    original content # pudding|1A2B3C4D,00FF00FF,1AD43CB2

The three hex fields (p, q, r) satisfy ``p ^ q == r``, which lets a tagged
line be recognized later without any state beyond the comment separator.
"""

import random
import re
from typing import NamedTuple

MARKER = "pudding"

_TAG_PATTERN = re.compile(rf"{MARKER}\|([0-9A-F]+),([0-9A-F]+),([0-9A-F]+)")

# Characters that can appear in the suffix written after the separator.
_MARKER_ALPHABET = frozenset(f"{MARKER}|,0123456789ABCDEF")


class Tag(NamedTuple):
    """The self-checking (p, q, r) triple carried by a tagged line."""

    p: int
    q: int
    r: int

    def is_valid(self) -> bool:
        return self.p ^ self.q == self.r

    def __str__(self) -> str:
        return f"{MARKER}|{self.p:08X},{self.q:08X},{self.r:08X}"


class Recognition(NamedTuple):
    """Outcome of checking a single line for a tag."""

    is_patched: bool
    original: str | None = None


NOT_PATCHED = Recognition(False, None)


def check_separator(sep: str) -> None:
    """Reject separators that cannot be told apart from the tag suffix.

    Raises:
        ValueError: If the separator is empty, contains whitespace, or is made
            up only of characters that can occur inside a tag.
    """
    if not sep:
        raise ValueError("Comment separator must not be empty")
    if any(ch.isspace() for ch in sep):
        raise ValueError(f"Comment separator {sep!r} must not contain whitespace")
    if set(sep) <= _MARKER_ALPHABET:
        raise ValueError(
            f"Comment separator {sep!r} only uses characters found in the "
            f"'{MARKER}|' tag and would be matched inside it"
        )


def new_tag(rng: random.Random) -> Tag:
    p = rng.getrandbits(32)
    q = rng.getrandbits(32)
    return Tag(p, q, p ^ q)


def tag_line(raw_line: str, sep: str, rng: random.Random) -> str:
    """Append a freshly drawn tag to ``raw_line`` as a trailing comment."""
    return f"{raw_line} {sep} {new_tag(rng)}"


def parse_tag(text: str) -> Tag | None:
    """Parse a serialized tag, e.g. ``pudding|0000000F,000000F0,000000FF``.

    Only uppercase hex digits are accepted. The XOR relation is not checked
    here; see ``Tag.is_valid``.
    """
    match = _TAG_PATTERN.fullmatch(text)
    if not match:
        return None
    p, q, r = (int(group, 16) for group in match.groups())
    return Tag(p, q, r)


def recognize(line: str, sep: str) -> Recognition:
    """Decide whether ``line`` was produced by ``tag_line``.

    Only the last occurrence of ``sep`` is considered, so content that already
    contains the separator (an existing comment, say) is left alone. Returns
    the untagged content when recognized; never raises.
    """
    if not sep:
        return NOT_PATCHED

    idx = line.rfind(sep)
    tail_start = idx + len(sep) + 1
    if idx < 1 or tail_start >= len(line):
        return NOT_PATCHED

    # the tagger puts exactly one space on each side of the separator
    if line[idx - 1] != " " or line[idx + len(sep)] != " ":
        return NOT_PATCHED

    tag = parse_tag(line[tail_start:])
    if tag is None or not tag.is_valid():
        return NOT_PATCHED

    return Recognition(True, line[: idx - 1])


def is_patched_line(line: str, sep: str) -> bool:
    return recognize(line, sep).is_patched
