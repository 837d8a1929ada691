"""Checks whether a scratch name can be used."""

from ..domain.value_objects import Answer, Scratch
from .filesystem import ScratchFileSystem
from .state import ConfigHolder


class ScratchNameValidator:
    """
    Combines filesystem name rules with scratch list rules.

    The filesystem check runs first so that its explanation wins for
    names that are invalid on disk; the scratch list is checked second
    to catch names that are still listed but whose file is gone.
    """

    def __init__(self, file_system: ScratchFileSystem, config_holder: ConfigHolder):
        self.file_system = file_system
        self.config_holder = config_holder

    def can_create(self, full_name_with_mnemonics: str) -> Answer:
        scratch = Scratch.create(full_name_with_mnemonics)
        answer = self.file_system.is_valid_scratch_name(scratch.file_name)
        if answer.is_no:
            return answer
        if not self.is_unique_file_name(scratch.file_name):
            return Answer.no("There is already a scratch with this name")
        return Answer.yes()

    def can_rename(self, scratch: Scratch, full_name_with_mnemonics: str) -> Answer:
        new_scratch = Scratch.create(full_name_with_mnemonics)
        if new_scratch.file_name == scratch.file_name:
            # only mnemonics changed, the file keeps its name
            return Answer.yes()
        return self.can_create(full_name_with_mnemonics)

    def is_unique_file_name(self, file_name: str) -> bool:
        return self.config_holder.get().find_by_file_name(file_name) is None
