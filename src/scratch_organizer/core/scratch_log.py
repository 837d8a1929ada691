"""User-visible reporting of scratch operation failures."""

import logging
from typing import Optional, Sequence

from ..domain.value_objects import Scratch
from .ports import IdePort

logger = logging.getLogger(__name__)


class ScratchLog:
    """Logs failures and shows them to the user through the host."""

    def __init__(self, ide: Optional[IdePort] = None):
        self.ide = ide

    def failed_to_rename(self, scratch: Scratch) -> None:
        self._warn(f"Failed to rename scratch: {scratch.file_name}")

    def failed_to_create(self, scratch: Scratch) -> None:
        self._warn(f"Failed to create scratch: {scratch.file_name}")

    def failed_to_delete(self, scratch: Scratch) -> None:
        self._warn(f"Failed to delete scratch: {scratch.file_name}")

    def failed_to_open(self, scratch: Scratch) -> None:
        self._warn(f"Failed to open scratch: '{scratch.file_name}'")

    def failed_to_open_default_scratch(self) -> None:
        self._warn("Failed to open default scratch")

    def failed_to_migrate(self, missing_names: Sequence[str]) -> None:
        self._warn(f"Failed to migrate scratches, missing files: {', '.join(missing_names)}")

    def failed_to_move_scratches(self, reason: str) -> None:
        self._warn(f"Failed to move scratches: {reason}")

    def listening_to_clipboard(self, is_on: bool) -> None:
        message = "Started listening to clipboard" if is_on else "Stopped listening to clipboard"
        logger.info(message)
        self._show(message)

    def _warn(self, message: str) -> None:
        logger.warning(message)
        self._show(message)

    def _show(self, message: str) -> None:
        if self.ide is not None:
            self.ide.show_message(message)
