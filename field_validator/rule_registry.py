"""Per-validator registry of rule predicates and their message templates."""

import logging
from collections.abc import Mapping
from typing import Callable, Dict, List, Optional, Tuple

from .exceptions import ConfigurationError
from .messages import MessageTemplate
from .rules import DEFAULT_MESSAGES, DEFAULT_PARAMETERS, DEFAULT_RULES, NO_PARAMETERS, ParameterSpec

logger = logging.getLogger(__name__)


class RuleRegistry:
    """
    Maps rule name to ``(predicate, message_template)``, plus the
    :class:`~field_validator.rules.ParameterSpec` the rule's parameters must meet.

    Every registry starts from a copy of the built-in defaults. Extending one
    registry never touches the defaults or any other registry.
    """

    def __init__(
        self,
        rules: Mapping = DEFAULT_RULES,
        messages: Mapping = DEFAULT_MESSAGES,
        parameters: Mapping = DEFAULT_PARAMETERS,
    ):
        """
        Initialize from a rule table and a message table.

        Args:
            rules: Rule name → predicate
            messages: Rule name → default message template
            parameters: Rule name → ParameterSpec; rules not listed take none

        Raises:
            ConfigurationError: If a rule has no message or an entry has the wrong type
        """
        self._entries: Dict[str, Tuple[Callable, MessageTemplate]] = {}
        self._parameters: Dict[str, ParameterSpec] = {}
        for name, predicate in rules.items():
            if name not in messages:
                raise ConfigurationError(f"Rule '{name}' has no default message")
            self.register(name, messages[name], predicate, parameters.get(name))

    def register(
        self,
        name: str,
        message: MessageTemplate,
        predicate: Callable,
        parameters: Optional[ParameterSpec] = None,
    ) -> None:
        """
        Add or replace a rule. Predicate, message and parameter spec are
        swapped in together.

        Raises:
            ConfigurationError: If name is not a non-empty string, predicate is not
                callable, message is neither a string nor callable, or parameters
                is not a ParameterSpec
        """
        self._check_entry(name, message, predicate, parameters)

        if name in self._entries:
            logger.debug("Overriding rule", extra={"rule": name})
        self._entries[name] = (predicate, message)
        self._parameters[name] = parameters or NO_PARAMETERS

    def _check_entry(self, name, message, predicate, parameters=None) -> None:
        if not isinstance(name, str) or not name:
            raise ConfigurationError(f"Rule name must be a non-empty string, got {name!r}")
        if not callable(predicate):
            raise ConfigurationError(
                f"Predicate for rule '{name}' must be callable, got {type(predicate).__name__}"
            )
        if not (isinstance(message, str) or callable(message)):
            raise ConfigurationError(
                f"Message for rule '{name}' must be a string or callable, "
                f"got {type(message).__name__}"
            )
        if parameters is not None and not isinstance(parameters, ParameterSpec):
            raise ConfigurationError(
                f"Parameters for rule '{name}' must be a ParameterSpec, "
                f"got {type(parameters).__name__}"
            )

    def extend(self, rules: Mapping) -> None:
        """
        Register several rules at once.

        Args:
            rules: Rule name → ``(message, predicate)`` or
                ``(message, predicate, ParameterSpec)``

        Raises:
            ConfigurationError: If an entry is not such a tuple
        """
        # Nothing is registered unless every entry is well formed
        for name, entry in rules.items():
            if not isinstance(entry, (list, tuple)) or len(entry) not in (2, 3):
                raise ConfigurationError(
                    f"Rule '{name}' must be given as a (message, predicate) pair"
                )
            self._check_entry(name, *entry)

        for name, entry in rules.items():
            self.register(name, *entry)

    def get(self, name: str) -> Tuple[Callable, MessageTemplate]:
        """
        Look up a rule.

        Raises:
            ConfigurationError: If no rule is registered under name
        """
        try:
            return self._entries[name]
        except KeyError:
            raise ConfigurationError(f"Unknown validation rule: '{name}'") from None

    def parameters(self, name: str) -> ParameterSpec:
        """What the named rule requires of its parameters."""
        self.get(name)
        return self._parameters[name]

    def copy(self) -> "RuleRegistry":
        clone = RuleRegistry.__new__(RuleRegistry)
        clone._entries = dict(self._entries)
        clone._parameters = dict(self._parameters)
        return clone

    def names(self) -> List[str]:
        return sorted(self._entries)

    def __contains__(self, name) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)


_DEFAULT_REGISTRY = RuleRegistry()


def default_registry() -> RuleRegistry:
    """A fresh registry holding the built-in rules, safe to extend."""
    return _DEFAULT_REGISTRY.copy()
