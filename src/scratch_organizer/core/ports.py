"""
Ports between the scratch core and a host user interface.

The core only talks to these abstractions. Each host (the terminal CLI,
an editor plugin, tests) provides its own IdePort and forwards clipboard
and editor events to ClipboardListener and OpenEditorTracker.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Optional, Sequence, Union

from ..domain.value_objects import AppendType, Scratch
from ..exceptions import InvariantViolation, ScratchOrganizerError

if TYPE_CHECKING:
    from ..models.config import ScratchConfig
    from .filesystem import ScratchFileSystem
    from .manager import ScratchManager

logger = logging.getLogger(__name__)


class IdePort(ABC):
    """User interface operations the scratch manager relies on."""

    @abstractmethod
    def persist_config(self, config: ScratchConfig) -> None:
        """Push the new config to durable storage."""
        pass

    @abstractmethod
    def display_scratches_list(self, scratches: Sequence[Scratch], context: Any = None) -> None:
        pass

    @abstractmethod
    def open_scratch(self, scratch: Scratch, context: Any = None) -> None:
        pass

    @abstractmethod
    def open_new_scratch_dialog(self, suggested_scratch_name: str, context: Any = None) -> None:
        """Ask the user for a name and call back user_wants_to_add_new_scratch."""
        pass

    @abstractmethod
    def show_rename_dialog_for(self, scratch: Scratch) -> None:
        pass

    @abstractmethod
    def show_delete_dialog_for(self, scratch: Scratch, context: Any = None) -> None:
        """Ask for confirmation and call back user_wants_to_delete_scratch."""
        pass

    @abstractmethod
    def add_text_to(self, scratch: Scratch, text: str, append_type: AppendType) -> None:
        pass

    @abstractmethod
    def show_message(self, message: str) -> None:
        pass


def add_text(existing: str, text: str, append_type: AppendType) -> str:
    """Combine scratch content with new text, one per line."""
    if append_type is AppendType.APPEND:
        if existing and not existing.endswith("\n"):
            existing += "\n"
        return existing + text
    elif append_type is AppendType.PREPEND:
        return text + "\n" + existing
    raise InvariantViolation(f"Unknown append type: {append_type!r}")


class ClipboardListener:
    """
    Appends copied text to the default scratch while listening is enabled.

    It is easy to turn listening on and forget about it, so hosts should
    remind the user on startup when it is still on.
    """

    def __init__(self, manager: ScratchManager):
        self.manager = manager

    def on_clipboard_changed(self, old_text: Optional[str], new_text: Optional[str]) -> bool:
        """Handle a clipboard change. Returns True if text was forwarded."""
        if not self.manager.should_listen_to_clipboard():
            return False
        if new_text is None or new_text == old_text:
            return False
        try:
            self.manager.clipboard_listener_wants_to_add_text_to_scratch(new_text)
            return True
        except ScratchOrganizerError as e:
            logger.info(f"Skipped clipboard text: {e}")
            return False


class OpenEditorTracker:
    """
    Tracks which scratch was opened last, per host project.

    Projects are registered by a stable id and must be deregistered
    explicitly with project_closed or stop_tracking.
    """

    def __init__(self, manager: ScratchManager, file_system: Optional[ScratchFileSystem] = None):
        self.manager = manager
        self._file_system = file_system
        self._projects: Dict[str, Any] = {}

    @property
    def file_system(self) -> ScratchFileSystem:
        return self._file_system or self.manager.file_system

    @property
    def tracked_projects(self) -> Sequence[str]:
        return tuple(self._projects)

    def project_opened(self, project_id: str, project: Any = None) -> None:
        self._projects[project_id] = project

    def project_closed(self, project_id: str) -> None:
        self._projects.pop(project_id, None)

    def selection_changed(self, project_id: str, path: Optional[Union[str, Path]]) -> None:
        if project_id not in self._projects or path is None:
            return
        if self.file_system.is_scratch(path):
            self.manager.user_opened_scratch(Path(path).name)

    def stop_tracking(self) -> None:
        self._projects.clear()
