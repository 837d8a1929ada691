"""Scratch Organizer

Keeps an ordered list of text scratch files in a folder on disk.
"""

__version__ = "0.1.0"

from .core.filesystem import ScratchFileSystem
from .core.manager import ScratchManager
from .core.mover import move_scratches
from .core.ports import ClipboardListener, IdePort, OpenEditorTracker
from .domain.value_objects import Answer, AppendType, DefaultScratchMeaning, Scratch
from .models.config import DEFAULT_CONFIG, DOWN, UP, ScratchConfig, ScratchConfigPersistence

__all__ = [
    # Core components
    "ScratchFileSystem",
    "ScratchManager",
    "move_scratches",

    # Host ports
    "ClipboardListener",
    "IdePort",
    "OpenEditorTracker",

    # Types and enums
    "Answer",
    "AppendType",
    "DefaultScratchMeaning",
    "Scratch",
    "ScratchConfig",
    "ScratchConfigPersistence",
    "DEFAULT_CONFIG",
    "UP",
    "DOWN",
]
