"""pudding - append tagged lines to a text file and remove them again."""

from pudding.config import Operation, PatchConfig
from pudding.patch import LinePatcher
from pudding.tagging import Recognition, Tag, check_separator, recognize, tag_line

__all__ = [
    "LinePatcher",
    "Operation",
    "PatchConfig",
    "Recognition",
    "Tag",
    "check_separator",
    "recognize",
    "tag_line",
]
