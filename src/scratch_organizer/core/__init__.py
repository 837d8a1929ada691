"""Core scratch organizer modules."""

from .filesystem import ScratchFileSystem
from .manager import ScratchManager
from .mover import move_scratches
from .ports import ClipboardListener, IdePort, OpenEditorTracker, add_text
from .scratch_log import ScratchLog
from .state import ConfigHolder
from .validator import ScratchNameValidator

__all__ = [
    'ScratchFileSystem',
    'ScratchManager',
    'move_scratches',
    'ClipboardListener',
    'IdePort',
    'OpenEditorTracker',
    'add_text',
    'ScratchLog',
    'ConfigHolder',
    'ScratchNameValidator',
]
