#!/usr/bin/env python3

import logging
import shutil
from pathlib import Path

from pydantic import BaseModel

from pudding.config import BACKUP_SUFFIX

logger = logging.getLogger(__name__)


class TargetBackup(BaseModel):
    """Safe-mode copy of a target file kept next to it as ``<target>.bak``.

    Used as a context manager the backup is taken on entry, and the target is
    put back if the wrapped block raises. The backup file is left in place
    either way.
    """

    target: Path
    saved: bool = False

    @property
    def backup_path(self) -> Path:
        return self.target.with_name(self.target.name + BACKUP_SUFFIX)

    def save(self) -> Path:
        """Copy the target over any existing backup."""
        shutil.copy2(self.target, self.backup_path)
        self.saved = True
        return self.backup_path

    def restore(self) -> None:
        """Restore the target from the backup."""
        if not self.saved:
            raise RuntimeError("Target file not backed up before restore.")
        shutil.copy2(self.backup_path, self.target)

    def __enter__(self):
        self.save()
        return self

    def __exit__(self, exc_type, _exc_val, _exc_tb):
        if exc_type is not None:
            logger.warning("Restoring %s from %s", self.target, self.backup_path)
            self.restore()
