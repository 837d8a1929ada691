"""
Scratch manager - reacts to user actions on scratches.

Every user action follows the same path: validate the name, change the
files on disk, then swap in a new config snapshot and push it to the
host for persistence.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Optional, Union

from ..domain.result import MoveError, Result, success
from ..domain.value_objects import Answer, DefaultScratchMeaning, Scratch
from ..exceptions import InvariantViolation
from ..models.config import DEFAULT_CONFIG, ScratchConfig, unique_by_file_name
from .filesystem import ScratchFileSystem
from .ports import IdePort
from .scratch_log import ScratchLog
from .state import ConfigHolder
from .validator import ScratchNameValidator

logger = logging.getLogger(__name__)

DEFAULT_SCRATCH_NAME = "scratch"
DEFAULT_SCRATCH_EXTENSION = "txt"
_MAX_SUGGESTED_NAME_INDEX = 99


class ScratchManager:
    """Coordinates the scratch list, the scratch files and the host UI."""

    def __init__(
        self,
        ide: IdePort,
        file_system: ScratchFileSystem,
        config: ScratchConfig = DEFAULT_CONFIG,
        log: Optional[ScratchLog] = None,
        config_holder: Optional[ConfigHolder] = None,
    ):
        self.ide = ide
        self.file_system = file_system
        self.config_holder = config_holder or ConfigHolder(config)
        self.log = log or ScratchLog(ide)
        self.validator = ScratchNameValidator(file_system, self.config_holder)

    @property
    def config(self) -> ScratchConfig:
        return self.config_holder.get()

    def update_config(self, transform: Callable[[ScratchConfig], ScratchConfig]) -> ScratchConfig:
        old, new = self.config_holder.update(transform)
        if new != old:
            self.ide.persist_config(new)
        return new

    def needs_migration(self) -> bool:
        return self.config.need_migration

    def migrate(self, scratch_names: Iterable[str]) -> bool:
        """Adopt scratches kept by an older release, in their old order."""
        scratches = [Scratch.create(name) for name in scratch_names]
        file_names = set(self.file_system.list_scratch_files())
        missing = [s.file_name for s in scratches if s.file_name not in file_names]
        if missing:
            self.log.failed_to_migrate(missing)
            return False

        self.update_config(lambda config: config.with_scratches(scratches).with_needs_migration(False))
        return True

    def sync_scratches_with_file_system(self) -> ScratchConfig:
        """Drop scratches whose files are gone and add files not listed yet."""
        file_names = self.file_system.list_scratch_files()
        on_disk = set(file_names)

        def sync(config: ScratchConfig) -> ScratchConfig:
            old_scratches = unique_by_file_name(s for s in config.scratches if s.file_name in on_disk)
            known = {s.file_name for s in old_scratches}
            new_scratches = [Scratch.create(name) for name in file_names if name not in known]
            return config.with_scratches(old_scratches + new_scratches)

        return self.update_config(sync)

    def user_wants_to_see_scratches_list(self, context: Any = None) -> None:
        config = self.sync_scratches_with_file_system()
        self.ide.display_scratches_list(config.scratches, context)

    def user_wants_to_open_scratch(self, scratch: Scratch, context: Any = None) -> bool:
        if not self.file_system.scratch_file_exists(scratch.file_name):
            self.log.failed_to_open(scratch)
            return False
        self.ide.open_scratch(scratch, context)
        return True

    def user_opened_scratch(self, scratch_file_name: str) -> None:
        scratch = self.config.find_by_file_name(scratch_file_name)
        if scratch is None:
            return
        self.update_config(lambda config: config.with_last_opened_scratch(scratch))

    def default_scratch(self, config: Optional[ScratchConfig] = None) -> Optional[Scratch]:
        """The scratch opened by default, or None if there are no scratches."""
        config = config or self.config
        if not config.scratches:
            return None
        if config.default_scratch_meaning is DefaultScratchMeaning.TOPMOST:
            return config.scratches[0]
        elif config.default_scratch_meaning is DefaultScratchMeaning.LAST_OPENED:
            last_opened = config.last_opened_scratch
            return last_opened if last_opened in config.scratches else config.scratches[0]
        raise InvariantViolation(f"Unknown default scratch meaning: {config.default_scratch_meaning!r}")

    def user_wants_to_open_default_scratch(self, context: Any = None) -> bool:
        config = self.sync_scratches_with_file_system()
        if not config.scratches:
            scratch = Scratch.create(f"{DEFAULT_SCRATCH_NAME}.{DEFAULT_SCRATCH_EXTENSION}")
            if not self.file_system.create_empty_file(scratch.file_name):
                self.log.failed_to_create(scratch)
                return False
            self.update_config(lambda c: c if scratch in c.scratches else c.add(scratch))
            self.ide.open_scratch(scratch, context)
            return True

        scratch = self.default_scratch(config)
        if not self.file_system.scratch_file_exists(scratch.file_name):
            self.log.failed_to_open_default_scratch()
            return False
        self.ide.open_scratch(scratch, context)
        return True

    def suggest_new_scratch_name(self) -> str:
        for i in range(_MAX_SUGGESTED_NAME_INDEX + 1):
            suffix = "" if i == 0 else str(i)
            name = f"{DEFAULT_SCRATCH_NAME}{suffix}.{DEFAULT_SCRATCH_EXTENSION}"
            if self.validator.can_create(name).is_yes:
                return name
        raise InvariantViolation("Couldn't find a free name for a new scratch")

    def user_wants_to_enter_new_scratch_name(self, context: Any = None) -> None:
        self.ide.open_new_scratch_dialog(self.suggest_new_scratch_name(), context)

    def check_if_user_can_create_scratch_with_name(self, full_name_with_mnemonics: str) -> Answer:
        return self.validator.can_create(full_name_with_mnemonics)

    def user_wants_to_add_new_scratch(self, full_name_with_mnemonics: str, context: Any = None,
                                      text: str = "") -> bool:
        scratch = Scratch.create(full_name_with_mnemonics)
        if not self.file_system.create_file(scratch.file_name, text):
            self.log.failed_to_create(scratch)
            return False
        self.update_config(lambda config: config if scratch in config.scratches else config.add(scratch))
        self.ide.open_scratch(scratch, context)
        return True

    def user_wants_to_edit_scratch_name(self, scratch: Scratch) -> None:
        self.ide.show_rename_dialog_for(scratch)

    def check_if_user_can_rename_scratch(self, scratch: Scratch, full_name_with_mnemonics: str) -> Answer:
        return self.validator.can_rename(scratch, full_name_with_mnemonics)

    def user_wants_to_rename(self, scratch: Scratch, full_name_with_mnemonics: str) -> bool:
        if scratch.full_name_with_mnemonics == full_name_with_mnemonics:
            return True

        new_scratch = Scratch.create(full_name_with_mnemonics)
        was_renamed = (
            scratch.file_name == new_scratch.file_name
            or self.file_system.rename_file(scratch.file_name, new_scratch.file_name)
        )
        if not was_renamed:
            self.log.failed_to_rename(scratch)
            return False
        self.update_config(lambda config: config.replace(scratch, new_scratch))
        return True

    def user_attempted_to_delete_scratch(self, scratch: Scratch, context: Any = None) -> None:
        self.ide.show_delete_dialog_for(scratch, context)

    def user_wants_to_delete_scratch(self, scratch: Scratch) -> bool:
        if not self.file_system.remove_file(scratch.file_name):
            self.log.failed_to_delete(scratch)
            return False
        self.update_config(lambda config: config.without(scratch))
        return True

    def user_moved_scratch(self, scratch: Scratch, shift: int) -> None:
        self.update_config(lambda config: config.move(scratch, shift))

    def should_listen_to_clipboard(self) -> bool:
        return self.config.listen_to_clipboard

    def user_wants_to_listen_to_clipboard(self, value: bool) -> None:
        self.update_config(lambda config: config.with_listen_to_clipboard(value))
        self.log.listening_to_clipboard(value)

    def clipboard_listener_wants_to_add_text_to_scratch(self, clipboard_text: str) -> None:
        config = self.config
        scratch = self.default_scratch(config)
        if scratch is None:
            logger.debug("No scratch to add clipboard text to")
            return
        self.ide.add_text_to(scratch, clipboard_text, config.clipboard_append_type)

    def user_wants_to_change_scratches_folder(
        self, new_folder: Union[str, Path]
    ) -> Result[Dict[str, str], MoveError]:
        """Move scratch files to a new folder and switch to it.

        The switch happens unless the new folder does not exist; files
        that could not be moved are reported and left behind. Files moved
        under a prefixed name keep their place in the list.
        """
        new_file_system = ScratchFileSystem(new_folder)
        if new_file_system.root == self.file_system.root:
            return success({})

        file_names = [
            s.file_name for s in self.config.scratches
            if self.file_system.scratch_file_exists(s.file_name)
        ]
        result = self.file_system.move_files_to(file_names, new_file_system.root)
        renamed = result.match(success=lambda moved: moved, failure=lambda error: error.renamed)
        result.match(failure=lambda error: self.log.failed_to_move_scratches(error.reason))

        if new_file_system.root.is_dir():
            logger.info(f"Scratches folder changed from {self.file_system.root} to {new_file_system.root}")
            self.file_system = new_file_system
            self.validator.file_system = new_file_system
            if renamed:
                self.update_config(lambda config: _follow_renamed(config, renamed))
            self.sync_scratches_with_file_system()
        return result


def _follow_renamed(config: ScratchConfig, renamed: Dict[str, str]) -> ScratchConfig:
    for scratch in config.scratches:
        new_file_name = renamed.get(scratch.file_name)
        if new_file_name is not None:
            prefix = new_file_name[:len(new_file_name) - len(scratch.file_name)]
            config = config.replace(scratch, Scratch.create(prefix + scratch.full_name_with_mnemonics))
    return config
