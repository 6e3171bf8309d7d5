#!/usr/bin/env python3

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, field_validator

from pudding.tagging import check_separator

DEFAULT_SEPARATOR = "#"
DEFAULT_PATCH_FILE = "patch.patch"
PATCH_SUFFIX = ".patch"
BACKUP_SUFFIX = ".bak"


class Operation(str, Enum):
    PATCH = "patch"
    UNPATCH = "unpatch"
    UNPATCH_ALL = "unpatch-all"


class PatchConfig(BaseModel):
    """Settings for a single pudding run."""

    operation: Operation = Operation.PATCH
    safe: bool = False
    sep: str = DEFAULT_SEPARATOR
    patch_file: Path = Path(DEFAULT_PATCH_FILE)
    target_file: Path | None = None

    @field_validator("sep")
    @classmethod
    def _check_sep(cls, value: str) -> str:
        check_separator(value)
        return value

    def needs_patch_file(self) -> bool:
        return self.operation != Operation.UNPATCH_ALL

    def validate_paths(self) -> list[str]:
        """Check the referenced files before anything is touched.

        Returns:
            Usage errors, empty when the run may proceed
        """
        errors = []
        if self.target_file is None:
            errors.append("You must specify the target file")
        elif not self.target_file.is_file():
            errors.append(f"Target file {self.target_file} doesn't exist")

        if self.needs_patch_file() and not self.patch_file.is_file():
            errors.append(f"Patch file {self.patch_file} doesn't exist")
        return errors
