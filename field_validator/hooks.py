"""
Lifecycle hook lists.

Two kinds, with different clearing contracts:

- PersistentHooks (before-validation): part of how the validator is set up,
  so they run on every pass and are never cleared.
- OneShotHooks (failed / passed): reactions to one outcome, so they are
  cleared the moment they have fired. A second ``validate()`` does not
  re-fire them unless they are registered again.

Exceptions raised by a hook are not caught.
"""

from typing import Any, Callable, List

Hook = Callable[[Any], Any]


class PersistentHooks:
    """Hooks that run on every pass."""

    def __init__(self):
        self._callbacks: List[Hook] = []

    def add(self, callback: Hook) -> None:
        self._callbacks.append(callback)

    def run(self, validator) -> None:
        for callback in list(self._callbacks):
            callback(validator)

    def __len__(self) -> int:
        return len(self._callbacks)


class OneShotHooks(PersistentHooks):
    """Hooks that are consumed by the pass that fires them."""

    def run(self, validator) -> None:
        # Cleared only after every callback has run; a raising hook leaves the list intact
        super().run(validator)
        self._callbacks = []
