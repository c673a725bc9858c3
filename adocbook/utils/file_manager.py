"""
Scratch Workspace Management

Owns the temporary directory tree that holds staged code listings, images
and the merged document for a single run.
"""

import os
import shutil
from pathlib import Path
from typing import Union
import logging

from ..core.errors import FilesystemError
from .validators import is_safe_filename


class Workspace:
    """
    Temporary directory tree for one build.

    Created at the start of a run and removed after the PDF is written.
    Every OS-level failure is logged and re-raised as FilesystemError.
    """

    def __init__(self, root: Union[str, Path]):
        """
        Args:
            root: Scratch root directory (created on demand)
        """
        self.root = Path(root)
        self.logger = logging.getLogger(__name__)

    def create(self) -> Path:
        """Create the scratch root."""
        return self.ensure_dir()

    def ensure_dir(self, subfolder: str = "") -> Path:
        """
        Ensure root/subfolder exists.

        Returns:
            Path to the directory
        """
        target = self.root / subfolder if subfolder else self.root
        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            self.logger.error(f"Failed to create directory {target}: {e}")
            raise FilesystemError(f"Cannot create directory: {e}", path=str(target)) from e
        return target

    def path_for(self, subfolder: str, name: str) -> Path:
        if not is_safe_filename(name):
            self.logger.error(f"Refusing to stage unsafe file name: {name!r}")
            raise FilesystemError(f"Unsafe file name: {name!r}", path=str(self.root / subfolder))
        return self.root / subfolder / name if subfolder else self.root / name

    def write_text(self, path: Union[str, Path], content: str) -> Path:
        return self._write(Path(path), content.encode('utf-8'))

    def write_bytes(self, path: Union[str, Path], content: bytes) -> Path:
        return self._write(Path(path), content)

    def _write(self, path: Path, data: bytes) -> Path:
        try:
            os.makedirs(path.parent, exist_ok=True)
            with open(path, 'wb') as f:
                f.write(data)
        except OSError as e:
            self.logger.error(f"Failed to write {path}: {e}")
            raise FilesystemError(f"Cannot write file: {e}", path=str(path)) from e
        self.logger.debug(f"Wrote {len(data)} bytes: {path}")
        return path

    def exists(self) -> bool:
        return self.root.exists()

    def remove(self):
        """Delete the whole scratch tree. Missing trees are ignored."""
        if not self.root.exists():
            return
        try:
            shutil.rmtree(self.root)
        except OSError as e:
            self.logger.error(f"Failed to remove {self.root}: {e}")
            raise FilesystemError(f"Cannot remove directory: {e}", path=str(self.root)) from e
        self.logger.info(f"Removed temporary directory: {self.root}")
