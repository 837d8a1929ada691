"""Filesystem-backed storage of scratch files."""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from ..domain.result import MoveError, Result
from ..domain.value_objects import Answer
from ..exceptions import FileOperationError
from ..models.config import default_scratches_folder
from .mover import move_scratches

logger = logging.getLogger(__name__)

# Older releases wrote UTF-8, keep it independent of the locale.
CHARSET = "utf-8"

_MAX_FILE_NAME_BYTES = 255
_WINDOWS_RESERVED_NAMES = frozenset(
    ["CON", "PRN", "AUX", "NUL"]
    + [f"COM{i}" for i in range(1, 10)]
    + [f"LPT{i}" for i in range(1, 10)]
)
_WINDOWS_INVALID_CHARS = set('<>:"|')


def is_hidden(file_name: str) -> bool:
    return file_name.startswith(".")


def is_valid_os_file_name(file_name: str) -> bool:
    """Check a leaf name against the naming rules of the host filesystem."""
    if not file_name or file_name in (".", ".."):
        return False
    if "\0" in file_name or os.sep in file_name or (os.altsep and os.altsep in file_name):
        return False
    try:
        if len(file_name.encode(CHARSET)) > _MAX_FILE_NAME_BYTES:
            return False
    except UnicodeEncodeError:
        return False
    if os.name == "nt":
        if any(c in _WINDOWS_INVALID_CHARS or ord(c) < 32 for c in file_name):
            return False
        if file_name.rstrip(" .") != file_name:
            return False
        if file_name.split(".")[0].upper() in _WINDOWS_RESERVED_NAMES:
            return False
    return True


def _ensure_exists(folder: Path) -> None:
    try:
        folder.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FileOperationError(f"Directory {folder} can not be created: {e}") from e
    if not folder.is_dir():
        raise FileOperationError(f"Directory {folder} can not be created")


class ScratchFileSystem:
    """
    Scratch files stored as plain files directly under one root folder.

    A valid scratch file is an existing, non-hidden regular file in the
    root folder; subdirectories and dot-files are ignored. Mutating
    operations are serialized with a per-instance lock and report
    failures as ``False`` instead of raising.
    """

    def __init__(self, scratches_folder_path: Optional[Union[str, Path]] = None):
        if scratches_folder_path is None or str(scratches_folder_path) == "":
            folder = default_scratches_folder()
        else:
            folder = Path(scratches_folder_path)
        self.root = folder.expanduser().absolute()
        self._lock = threading.RLock()

    @property
    def scratches_path(self) -> str:
        """Root folder as a string ending with a path separator."""
        return os.path.join(str(self.root), "")

    def file_by(self, file_name: str) -> Path:
        return self.root / file_name

    def list_scratch_files(self) -> List[str]:
        """Names of all valid scratch files in directory order."""
        return [path.name for path in self._scratch_files()]

    def scratch_file_exists(self, file_name: str) -> bool:
        return self._is_valid_scratch(self.file_by(file_name))

    def is_scratch(self, path: Union[str, Path]) -> bool:
        """Check whether path is one of the current scratch files."""
        path = Path(path).expanduser().absolute()
        return path in self._scratch_files()

    def is_valid_scratch_name(self, file_name: str) -> Answer:
        has_path_chars = "/" in file_name or "\\" in file_name
        has_wildcards = "*" in file_name or "?" in file_name
        if has_path_chars or has_wildcards or is_hidden(file_name) or not is_valid_os_file_name(file_name):
            return Answer.no("Not a valid file name")
        elif os.path.lexists(self.file_by(file_name)):
            return Answer.no("There is existing file with this name")
        return Answer.yes()

    def create_empty_file(self, file_name: str) -> bool:
        return self.create_file(file_name, "")

    def create_file(self, file_name: str, text: str) -> bool:
        with self._lock:
            try:
                _ensure_exists(self.root)
                # "x" refuses to overwrite a file created since validation
                with open(self.file_by(file_name), "x", encoding=CHARSET, newline="") as f:
                    f.write(text)
                logger.debug(f"Created scratch file {file_name}")
                return True
            except (OSError, FileOperationError) as e:
                logger.warning(f"Failed to create scratch file {file_name}: {e}")
                return False

    def remove_file(self, file_name: str) -> bool:
        with self._lock:
            path = self.file_by(file_name)
            if not self._is_valid_scratch(path):
                return False
            try:
                path.unlink()
                logger.debug(f"Removed scratch file {file_name}")
                return True
            except OSError as e:
                logger.warning(f"Failed to remove scratch file {file_name}: {e}")
                return False

    def rename_file(self, old_file_name: str, new_file_name: str) -> bool:
        with self._lock:
            path = self.file_by(old_file_name)
            if not self._is_valid_scratch(path):
                return False
            target = self.file_by(new_file_name)
            try:
                if os.path.lexists(target) and not _is_same_file(path, target):
                    raise FileExistsError(f"File already exists: {target}")
                path.rename(target)
                logger.debug(f"Renamed scratch file {old_file_name} to {new_file_name}")
                return True
            except OSError as e:
                logger.warning(f"Failed to rename scratch file {old_file_name}: {e}")
                return False

    def read_file(self, file_name: str) -> Optional[str]:
        path = self.file_by(file_name)
        if not self._is_valid_scratch(path):
            return None
        try:
            with open(path, "r", encoding=CHARSET, newline="") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Failed to read scratch file {file_name}: {e}")
            return None

    def write_file(self, file_name: str, text: str) -> bool:
        """Replace the content of an existing scratch file."""
        with self._lock:
            path = self.file_by(file_name)
            if not self._is_valid_scratch(path):
                return False
            try:
                with open(path, "w", encoding=CHARSET, newline="") as f:
                    f.write(text)
                return True
            except OSError as e:
                logger.warning(f"Failed to write scratch file {file_name}: {e}")
                return False

    def move_files_to(self, file_names: Iterable[str], folder: Union[str, Path]) -> Result[Dict[str, str], MoveError]:
        """Move scratch files out of this store, see move_scratches."""
        with self._lock:
            return move_scratches(file_names, self.root, folder)

    def _scratch_files(self) -> List[Path]:
        if not self.root.is_dir():
            return []
        try:
            return [path for path in self.root.iterdir() if self._is_valid_scratch(path)]
        except OSError as e:
            logger.warning(f"Failed to list {self.root}: {e}")
            return []

    @staticmethod
    def _is_valid_scratch(path: Path) -> bool:
        return path.is_file() and not is_hidden(path.name)

    def __repr__(self) -> str:
        return f"ScratchFileSystem({self.scratches_path!r})"


def _is_same_file(path: Path, other: Path) -> bool:
    # Case-only renames on case-insensitive filesystems
    try:
        return os.path.samefile(path, other)
    except OSError:
        return False
