"""Shared fixtures for scratch organizer tests."""

from typing import Any, List, Optional, Sequence, Tuple

import pytest

from scratch_organizer.core.filesystem import ScratchFileSystem
from scratch_organizer.core.manager import ScratchManager
from scratch_organizer.core.ports import IdePort, add_text
from scratch_organizer.domain.value_objects import AppendType, Scratch
from scratch_organizer.exceptions import FileOperationError
from scratch_organizer.models.config import DEFAULT_CONFIG, ScratchConfig


class RecordingIde(IdePort):
    """IdePort that records calls and answers dialogs from preset values."""

    def __init__(self):
        self.persisted: List[ScratchConfig] = []
        self.displayed: List[Tuple[Scratch, ...]] = []
        self.opened: List[Scratch] = []
        self.messages: List[str] = []
        self.suggested_names: List[str] = []
        self.renames_requested: List[Scratch] = []
        self.deletes_requested: List[Scratch] = []
        self.added_text: List[Tuple[Scratch, str, AppendType]] = []
        self.manager: Optional[ScratchManager] = None
        self.file_system: Optional[ScratchFileSystem] = None
        self.confirm_delete = False

    def persist_config(self, config: ScratchConfig) -> None:
        self.persisted.append(config)

    def display_scratches_list(self, scratches: Sequence[Scratch], context: Any = None) -> None:
        self.displayed.append(tuple(scratches))

    def open_scratch(self, scratch: Scratch, context: Any = None) -> None:
        self.opened.append(scratch)

    def open_new_scratch_dialog(self, suggested_scratch_name: str, context: Any = None) -> None:
        self.suggested_names.append(suggested_scratch_name)

    def show_rename_dialog_for(self, scratch: Scratch) -> None:
        self.renames_requested.append(scratch)

    def show_delete_dialog_for(self, scratch: Scratch, context: Any = None) -> None:
        self.deletes_requested.append(scratch)
        if self.confirm_delete and self.manager is not None:
            self.manager.user_wants_to_delete_scratch(scratch)

    def add_text_to(self, scratch: Scratch, text: str, append_type: AppendType) -> None:
        self.added_text.append((scratch, text, append_type))
        if self.file_system is not None:
            existing = self.file_system.read_file(scratch.file_name)
            if existing is None:
                raise FileOperationError(f"Cannot find scratch file: {scratch.file_name}")
            self.file_system.write_file(scratch.file_name, add_text(existing, text, append_type))

    def show_message(self, message: str) -> None:
        self.messages.append(message)


@pytest.fixture
def scratches_dir(tmp_path):
    """Folder for scratch files."""
    folder = tmp_path / "scratches"
    folder.mkdir()
    return folder


@pytest.fixture
def file_system(scratches_dir):
    return ScratchFileSystem(scratches_dir)


@pytest.fixture
def ide(file_system):
    recording_ide = RecordingIde()
    recording_ide.file_system = file_system
    return recording_ide


@pytest.fixture
def manager(ide, file_system):
    scratch_manager = ScratchManager(ide, file_system, DEFAULT_CONFIG.with_needs_migration(False))
    ide.manager = scratch_manager
    return scratch_manager
