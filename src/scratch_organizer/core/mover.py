"""Moving scratch files between folders when the scratches folder changes."""

import logging
import shutil
from pathlib import Path
from typing import Dict, Iterable, List, Union

from ..domain.result import MoveError, Result, failure, success

logger = logging.getLogger(__name__)

CONFLICT_PREFIX = "_"


def renamed_if_exists(target_path: Path, prefix: str = CONFLICT_PREFIX) -> Path:
    """Prefix the file name until it no longer collides with an existing file."""
    while target_path.exists() or target_path.is_symlink():
        target_path = target_path.with_name(prefix + target_path.name)
    return target_path


def move_scratches(
    scratch_file_names: Iterable[str],
    from_folder: Union[str, Path],
    to_folder: Union[str, Path],
) -> Result[Dict[str, str], MoveError]:
    """
    Move scratch files from one folder to another.

    Each file is moved on its own; a file whose name is taken in the
    target folder gets "_" prepended until the name is free. Files that
    were moved stay moved even if others fail.

    Returns:
        Success with a mapping of renamed files to their new names, or
        Failure(MoveError) naming the missing target folder or every file
        that could not be moved.
    """
    folder = Path(to_folder)
    if not folder.exists():
        logger.warning(f"Target folder doesn't exist: {folder}")
        return failure(MoveError(f"Target folder doesn't exist: {folder}"))

    renamed: Dict[str, str] = {}
    try:
        failed_to_move: List[str] = []
        for file_name in scratch_file_names:
            source = Path(from_folder) / file_name
            target = renamed_if_exists(folder.absolute() / source.name)
            try:
                shutil.move(str(source), str(target))
                logger.debug(f"Moved {source} to {target}")
                if target.name != source.name:
                    renamed[source.name] = target.name
            except OSError as e:
                logger.warning(f"Failed to move {source} to {target}: {e}")
                failed_to_move.append(source.name)

        if not failed_to_move:
            return success(renamed)
        return failure(MoveError(f"Failed to move files: {', '.join(failed_to_move)}", renamed))

    except Exception as e:
        logger.warning(f"Failed to move scratches to {folder}: {e}")
        return failure(MoveError(str(e), renamed))
