#!/usr/bin/env python3
"""Append tagged lines to a text file and take them back out again."""

import logging
import random
from collections import Counter
from pathlib import Path

from pudding.tagging import check_separator, recognize, tag_line

logger = logging.getLogger(__name__)

# surrogateescape keeps bytes that are not valid UTF-8 intact on rewrite
ENCODING = "utf-8"
ERRORS = "surrogateescape"


def split_lines(text: str) -> list[str]:
    """Split text on \\n, \\r\\n or \\r; a final terminator adds no empty line."""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    if not text:
        return []
    lines = text.split("\n")
    if text.endswith("\n"):
        lines.pop()
    return lines


def detect_eol(raw: bytes) -> str:
    return "\r\n" if b"\r\n" in raw else "\n"


def read_lines(path: Path) -> list[str]:
    return split_lines(path.read_bytes().decode(ENCODING, ERRORS))


def write_lines(path: Path, lines: list[str], eol: str = "\n") -> None:
    """Replace the whole file with ``lines``, each followed by ``eol``."""
    data = "".join(line + eol for line in lines)
    path.write_bytes(data.encode(ENCODING, ERRORS))


class LinePatcher:
    """Patch, unpatch and unpatch-all operations for one comment separator.

    The ``*_lines`` methods are pure transformations over line lists; the
    file-level methods read, transform and rewrite the target wholesale.
    """

    def __init__(self, sep: str = "#", rng: random.Random | None = None):
        check_separator(sep)
        self.sep = sep
        self.rng = rng if rng is not None else random.Random()

    def tag_lines(self, payload: list[str]) -> list[str]:
        """Tag every payload line with its own freshly drawn tag, keeping order."""
        return [tag_line(line, self.sep, self.rng) for line in payload]

    def unpatch_lines(self, payload: list[str], lines: list[str]) -> list[str]:
        """Drop tagged lines whose content matches an entry of ``payload``.

        Each payload entry cancels at most one tagged line, so a line listed
        twice removes two matching tagged lines and no more.
        """
        remaining = Counter(payload)
        kept = []

        for line in lines:
            recognition = recognize(line, self.sep)
            if recognition.is_patched and remaining[recognition.original] > 0:
                remaining[recognition.original] -= 1
                continue
            kept.append(line)

        leftover = sum(remaining.values())
        if leftover:
            logger.debug("%d patch line(s) had no tagged counterpart", leftover)
        return kept

    def unpatch_all_lines(self, lines: list[str]) -> list[str]:
        return [line for line in lines if not recognize(line, self.sep).is_patched]

    def patch(self, patch_file: Path, target_file: Path) -> int:
        """Append the tagged payload of ``patch_file`` to ``target_file``.

        If the target does not end with a newline, a terminator and one blank
        line go in first so the tagged lines start on a line of their own.

        Returns:
            Number of tagged lines appended
        """
        tagged = self.tag_lines(read_lines(patch_file))

        raw = target_file.read_bytes()
        eol = detect_eol(raw)
        # an empty target has nothing to separate from
        has_eol = not raw or raw.endswith(b"\n")

        chunks = [] if has_eol else [eol, eol]
        chunks.extend(line + eol for line in tagged)

        with open(target_file, "ab") as f:
            f.write("".join(chunks).encode(ENCODING, ERRORS))

        logger.debug("Appended %d tagged line(s) to %s", len(tagged), target_file)
        return len(tagged)

    def unpatch(self, patch_file: Path, target_file: Path) -> int:
        """Remove the tagged lines of ``target_file`` listed in ``patch_file``.

        Returns:
            Number of lines removed
        """
        payload = read_lines(patch_file)
        raw = target_file.read_bytes()
        lines = split_lines(raw.decode(ENCODING, ERRORS))

        kept = self.unpatch_lines(payload, lines)
        write_lines(target_file, kept, detect_eol(raw))

        removed = len(lines) - len(kept)
        logger.debug("Removed %d tagged line(s) from %s", removed, target_file)
        return removed

    def unpatch_all(self, target_file: Path) -> int:
        """Remove every tagged line from ``target_file``.

        Returns:
            Number of lines removed
        """
        raw = target_file.read_bytes()
        lines = split_lines(raw.decode(ENCODING, ERRORS))

        kept = self.unpatch_all_lines(lines)
        write_lines(target_file, kept, detect_eol(raw))

        removed = len(lines) - len(kept)
        logger.debug("Removed %d tagged line(s) from %s", removed, target_file)
        return removed
