"""Scratch list configuration and its persistence."""

from __future__ import annotations

import json
import logging
import os
import dataclasses
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .config_schema import validate_settings_json
from ..domain.result import Result, try_catch
from ..domain.value_objects import AppendType, DefaultScratchMeaning, Scratch
from ..exceptions import ConfigurationError, InvariantViolation

logger = logging.getLogger(__name__)

UP = -1
DOWN = 1


@dataclass(frozen=True, slots=True)
class ScratchConfig:
    """
    Immutable snapshot of the scratch list and its behaviour flags.

    Every operation returns a new ScratchConfig and leaves the receiver
    untouched, so a snapshot can be shared between threads and kept for
    undo by collaborators.

    The scratch order is meaningful: it is the display order, and the
    first scratch is the "topmost" one. ``last_opened_scratch`` may refer to
    a scratch that is no longer in the list; readers treat that as no
    selection.
    """

    scratches: Tuple[Scratch, ...] = ()
    last_opened_scratch: Optional[Scratch] = None
    listen_to_clipboard: bool = False
    need_migration: bool = True
    clipboard_append_type: AppendType = AppendType.APPEND
    new_scratch_append_type: AppendType = field(default=AppendType.APPEND, repr=False)
    default_scratch_meaning: DefaultScratchMeaning = DefaultScratchMeaning.TOPMOST

    def __post_init__(self) -> None:
        if self.scratches is None:
            raise InvariantViolation("Scratch list cannot be None")
        object.__setattr__(self, 'scratches', tuple(self.scratches))

    def with_scratches(self, scratches: Sequence[Scratch]) -> ScratchConfig:
        return dataclasses.replace(self, scratches=tuple(scratches))

    def add(self, scratch: Scratch) -> ScratchConfig:
        """Place a new scratch at the top or bottom depending on the append type."""
        if self.new_scratch_append_type is AppendType.APPEND:
            return self.with_scratches(self.scratches + (scratch,))
        elif self.new_scratch_append_type is AppendType.PREPEND:
            return self.with_scratches((scratch,) + self.scratches)
        raise InvariantViolation(f"Unknown append type: {self.new_scratch_append_type!r}")

    def without(self, scratch: Scratch) -> ScratchConfig:
        """Remove the first occurrence of scratch, if any."""
        if scratch not in self.scratches:
            return self
        scratches = list(self.scratches)
        scratches.remove(scratch)
        return self.with_scratches(scratches)

    def replace(self, scratch: Scratch, new_scratch: Scratch) -> ScratchConfig:
        scratches = tuple(new_scratch if it == scratch else it for it in self.scratches)
        last_opened = new_scratch if self.last_opened_scratch == scratch else self.last_opened_scratch
        return dataclasses.replace(self, scratches=scratches, last_opened_scratch=last_opened)

    def move(self, scratch: Scratch, shift: int) -> ScratchConfig:
        """Shift a scratch up (negative) or down (positive), wrapping around once.

        Wrapping is only correct for ``abs(shift) <= len(scratches)``.
        """
        try:
            old_index = self.scratches.index(scratch)
        except ValueError:
            raise InvariantViolation(f"Cannot move scratch which is not in the list: {scratch}") from None

        size = len(self.scratches)
        new_index = old_index + shift
        if new_index < 0:
            new_index += size
        if new_index >= size:
            new_index -= size

        scratches = list(self.scratches)
        del scratches[old_index]
        scratches.insert(new_index, scratch)
        return self.with_scratches(scratches)

    def with_listen_to_clipboard(self, value: bool) -> ScratchConfig:
        return dataclasses.replace(self, listen_to_clipboard=value)

    def with_needs_migration(self, value: bool) -> ScratchConfig:
        return dataclasses.replace(self, need_migration=value)

    # The setters below ignore None so that partially filled settings
    # can be applied on top of defaults.

    def with_clipboard_append_type(self, value: Optional[AppendType]) -> ScratchConfig:
        if value is None:
            return self
        return dataclasses.replace(self, clipboard_append_type=value)

    def with_new_scratch_append_type(self, value: Optional[AppendType]) -> ScratchConfig:
        if value is None:
            return self
        return dataclasses.replace(self, new_scratch_append_type=value)

    def with_default_scratch_meaning(self, value: Optional[DefaultScratchMeaning]) -> ScratchConfig:
        if value is None:
            return self
        return dataclasses.replace(self, default_scratch_meaning=value)

    def with_last_opened_scratch(self, value: Optional[Scratch]) -> ScratchConfig:
        return dataclasses.replace(self, last_opened_scratch=value)

    def find_by_file_name(self, file_name: str) -> Optional[Scratch]:
        for scratch in self.scratches:
            if scratch.file_name == file_name:
                return scratch
        return None


DEFAULT_CONFIG = ScratchConfig()


def unique_by_file_name(scratches: Iterable[Scratch]) -> List[Scratch]:
    """Keep the first scratch for each file name, in order."""
    seen = set()
    unique = []
    for scratch in scratches:
        if scratch.file_name not in seen:
            seen.add(scratch.file_name)
            unique.append(scratch)
    return unique


def default_home() -> Path:
    """Base directory for settings and scratches."""
    return Path(os.environ.get("SCRATCH_ORGANIZER_HOME", Path.home() / ".scratch-organizer"))


def default_settings_path() -> Path:
    return default_home() / "settings.json"


def default_scratches_folder() -> Path:
    return default_home() / "scratches"


def config_to_dict(config: ScratchConfig, scratches_folder: Optional[Path] = None) -> Dict[str, Any]:
    """Convert config to a JSON-compatible dict."""
    last_opened = config.last_opened_scratch
    return {
        "scratches_folder_path": str(scratches_folder) if scratches_folder else None,
        "scratches": [s.full_name_with_mnemonics for s in config.scratches],
        "last_opened_scratch": last_opened.full_name_with_mnemonics if last_opened else None,
        "listen_to_clipboard": config.listen_to_clipboard,
        "need_migration": config.need_migration,
        "clipboard_append_type": config.clipboard_append_type.value,
        "new_scratch_append_type": config.new_scratch_append_type.value,
        "default_scratch_meaning": config.default_scratch_meaning.value,
    }


def config_from_dict(data: Dict[str, Any]) -> ScratchConfig:
    """Build a config from a dict, keeping defaults for absent keys."""
    config = DEFAULT_CONFIG
    if "scratches" in data:
        scratches = [Scratch.create(name) for name in data["scratches"]]
        config = config.with_scratches(unique_by_file_name(scratches))
    if data.get("last_opened_scratch"):
        config = config.with_last_opened_scratch(Scratch.create(data["last_opened_scratch"]))
    if "listen_to_clipboard" in data:
        config = config.with_listen_to_clipboard(data["listen_to_clipboard"])
    if "need_migration" in data:
        config = config.with_needs_migration(data["need_migration"])

    return (
        config
        .with_clipboard_append_type(AppendType.parse(data.get("clipboard_append_type")))
        .with_new_scratch_append_type(AppendType.parse(data.get("new_scratch_append_type")))
        .with_default_scratch_meaning(DefaultScratchMeaning.parse(data.get("default_scratch_meaning")))
    )


def load_settings(settings_path: Path) -> Tuple[ScratchConfig, Optional[Path]]:
    """Load config and scratches folder from a JSON settings file.

    A missing file yields the default config and no folder.

    Raises:
        ConfigurationError: If the file is unreadable or not a valid settings document.
    """
    if not settings_path.exists():
        logger.debug(f"No settings at {settings_path}, using defaults")
        return DEFAULT_CONFIG, None

    try:
        with open(settings_path, 'r', encoding='utf-8') as f:
            settings_data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Cannot parse {settings_path}: {e.msg} at line {e.lineno}, column {e.colno}"
        ) from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read {settings_path}: {e}") from e

    errors = validate_settings_json(settings_data)
    if errors:
        raise ConfigurationError(f"Invalid settings in {settings_path}: {'; '.join(errors)}")

    folder = settings_data.get("scratches_folder_path")
    return config_from_dict(settings_data), Path(folder) if folder else None


def load_config(settings_path: Path) -> ScratchConfig:
    """Load only the scratch config from a JSON settings file."""
    return load_settings(settings_path)[0]


def save_config(config: ScratchConfig, settings_path: Path,
                scratches_folder: Optional[Path] = None) -> None:
    """Save config to a JSON settings file."""
    settings_path.parent.mkdir(parents=True, exist_ok=True)
    with open(settings_path, 'w', encoding='utf-8') as f:
        json.dump(config_to_dict(config, scratches_folder), f, indent=2)


class ScratchConfigPersistence:
    """Stores the current config and scratches folder across restarts."""

    def __init__(self, settings_path: Optional[Path] = None):
        self.settings_path = settings_path or default_settings_path()
        self.scratches_folder: Optional[Path] = None

    def load(self) -> ScratchConfig:
        config, self.scratches_folder = load_settings(self.settings_path)
        return config

    def try_load(self) -> Result[ScratchConfig, ConfigurationError]:
        """Load settings, returning a Failure instead of raising on a broken file."""
        return try_catch(self.load, ConfigurationError)

    def persist(self, config: ScratchConfig) -> None:
        save_config(config, self.settings_path, self.scratches_folder)

    def update_scratches_folder(self, folder: Path, config: ScratchConfig) -> None:
        self.scratches_folder = folder
        self.persist(config)
