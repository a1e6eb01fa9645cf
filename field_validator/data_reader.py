"""
Data Reader - field access into the raw input record.

Shields the engine and the rules from the physical layout of the input. Rules
and the parser only ever ask for a field by path:

- ``name`` → ``data["name"]``
- ``address.city`` → ``data["address"]["city"]``
- ``items.0.sku`` → ``data["items"][0]["sku"]``
- ``items.*.sku`` → ``[item["sku"] for item in data["items"]]``

A missing segment anywhere along the path yields ``None``, which is how
"field absent" is signalled to the rules.
"""

import copy
from collections.abc import Mapping, Sequence
from typing import Any, List, Optional

from .exceptions import ConfigurationError

WILDCARD = "*"


class DataReader:
    """Normalizes raw input and reads values by dotted path."""

    def __init__(self, path_separator: str = "."):
        self.path_separator = path_separator

    def normalize(self, data: Optional[Mapping]) -> dict:
        """
        Take a private deep copy of the raw input.

        Args:
            data: The raw input mapping (``None`` is treated as empty)

        Returns:
            A plain dict detached from the caller's object, so later mutation of
            the caller's data cannot leak into a validation pass

        Raises:
            ConfigurationError: If data is not a mapping
        """
        if data is None:
            return {}
        if not isinstance(data, Mapping):
            raise ConfigurationError(
                f"Data must be a mapping, got {type(data).__name__}"
            )
        return copy.deepcopy(dict(data))

    def read(self, data: Any, path: str) -> Any:
        """
        Read the value at ``path``.

        Returns a list when the path contains a wildcard segment, ``None`` when
        the field is absent.
        """
        segments = path.split(self.path_separator) if path else []
        return self._walk(data, segments)

    def _walk(self, current: Any, segments: List[str]) -> Any:
        if not segments:
            return current

        key, rest = segments[0], segments[1:]

        if key == WILDCARD:
            return [self._walk(item, rest) for item in self._children(current)]

        child = self._child(current, key)
        if child is None:
            return None
        return self._walk(child, rest)

    def _child(self, current: Any, key: str) -> Any:
        if isinstance(current, Mapping):
            return current.get(key)
        if _is_sequence(current):
            try:
                return current[int(key)]
            except (ValueError, IndexError):
                return None
        return None

    def _children(self, current: Any) -> List[Any]:
        if isinstance(current, Mapping):
            return list(current.values())
        if _is_sequence(current):
            return list(current)
        return []


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))
