"""Process-wide holder of the current scratch config."""

import logging
import threading
from typing import Callable, Tuple

from ..models.config import DEFAULT_CONFIG, ScratchConfig

logger = logging.getLogger(__name__)


class ConfigHolder:
    """
    Single owner of the current ScratchConfig.

    Reads return the current immutable snapshot without locking. Writes
    swap in a whole new snapshot with compare_and_set, so readers never
    see a partially updated config and concurrent writers never lose an
    update.
    """

    def __init__(self, config: ScratchConfig = DEFAULT_CONFIG):
        self._config = config
        self._lock = threading.Lock()

    def get(self) -> ScratchConfig:
        return self._config

    def compare_and_set(self, expected: ScratchConfig, config: ScratchConfig) -> bool:
        """Swap in config only if the current value is still expected."""
        with self._lock:
            if self._config is not expected:
                return False
            self._config = config
            return True

    def update(self, transform: Callable[[ScratchConfig], ScratchConfig]) -> Tuple[ScratchConfig, ScratchConfig]:
        """Apply a pure transformation atomically.

        The transformation is applied again to the newer snapshot whenever
        another writer got in first, so it must not have side effects.

        Returns:
            The (old, new) pair of snapshots.
        """
        while True:
            old = self._config
            new = transform(old)
            if self.compare_and_set(old, new):
                break
        if new != old:
            logger.debug(f"Config updated: {new!r}")
        return old, new
