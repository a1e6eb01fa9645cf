import logging
from collections.abc import Mapping
from typing import Any, Callable, Dict, List, Optional

from .check import Check
from .config_loader import ConfigLoader, get_default_config
from .data_reader import DataReader
from .exceptions import ConfigurationError
from .hooks import OneShotHooks, PersistentHooks
from .rule_parser import RuleParser
from .rule_registry import default_registry
from .rules import ParameterSpec

logger = logging.getLogger(__name__)


class Validator:
    """
    Validates one input record against per-field rule declarations.

    Example:
        validator = Validator(
            {"name": "Al", "email": "al@example.com"},
            {"name": "required|min:3", "email": "required|email"},
        )
        if validator.validate().has_errors():
            print(validator.get_errors())
            # {'name': ['The name must be at least 3.'], 'email': []}

    Every ``validate()`` call is a full pass:

    1. Prepare: parse every field's rules into Checks, run ``prepare`` hooks
    2. Execute: run every Check in order, collecting failure messages per field
    3. Finalize: fire the ``failed`` or ``passed`` hooks once, then drop them
    """

    def __init__(
        self,
        data: Optional[Mapping] = None,
        rules: Optional[Mapping] = None,
        messages: Optional[Mapping] = None,
        translator: Any = None,
        config: Optional[ConfigLoader] = None,
    ):
        """
        Initialize validator.

        Args:
            data: The record to validate
            rules: Field name (or dotted path) → rule declaration
            messages: ``"field.rule"`` or ``"rule"`` → message template override
            translator: Attribute-name translator used when rendering messages
            config: ConfigLoader supplying the rule grammar; defaults to the bundled config
        """
        config = config or get_default_config()

        self.registry = default_registry()
        self.reader = DataReader()
        self.parser = RuleParser(config.get_grammar())

        self.data: dict = {}
        self.rules: dict = {}
        self.custom_messages: dict = {}
        self.translator = None

        self.checks: List[Check] = []
        self.errors: Dict[str, List[str]] = {}

        self._before_hooks = PersistentHooks()
        self._failed_hooks = OneShotHooks()
        self._passed_hooks = OneShotHooks()

        self.make(data, rules, messages, translator)

    @classmethod
    def from_ruleset(
        cls,
        name: str,
        data: Optional[Mapping] = None,
        config: Optional[ConfigLoader] = None,
        translator: Any = None,
    ) -> "Validator":
        """
        Build a validator from a named ruleset in the configuration.

        Raises:
            ConfigurationError: If the ruleset does not exist
        """
        config = config or get_default_config()
        ruleset = config.get_ruleset(name)
        return cls(data, ruleset["rules"], ruleset["messages"], translator, config=config)

    def make(
        self,
        data: Optional[Mapping] = None,
        rules: Optional[Mapping] = None,
        messages: Optional[Mapping] = None,
        translator: Any = None,
    ) -> "Validator":
        """
        Replace the data, rules, message overrides and translator.

        Does not validate. Results of an earlier pass stay readable until the
        next ``validate()``.

        Raises:
            ConfigurationError: If data, rules or messages are not mappings, or a
                message override is neither a string nor callable
        """
        rules = {} if rules is None else rules
        messages = {} if messages is None else messages

        if not isinstance(rules, Mapping):
            raise ConfigurationError(f"Rules must be a mapping, got {type(rules).__name__}")
        if not isinstance(messages, Mapping):
            raise ConfigurationError(
                f"Messages must be a mapping, got {type(messages).__name__}"
            )
        for key, message in messages.items():
            if not (isinstance(message, str) or callable(message)):
                raise ConfigurationError(
                    f"Message '{key}' must be a string or callable, got {type(message).__name__}"
                )

        self.data = self.reader.normalize(data)
        self.rules = dict(rules)
        self.custom_messages = dict(messages)
        self.translator = translator

        return self

    def extend(
        self,
        name_or_rules,
        message=None,
        predicate: Optional[Callable] = None,
        parameters: Optional[ParameterSpec] = None,
    ) -> "Validator":
        """
        Add or override rules on this validator only.

        Either ``extend(name, message, predicate, parameters=None)`` or
        ``extend({name: (message, predicate), ...})``. A ParameterSpec makes
        the parser reject declarations whose parameters the rule cannot use.

        Raises:
            ConfigurationError: If a predicate is not callable or a message is
                neither a string nor callable
        """
        if isinstance(name_or_rules, Mapping):
            self.registry.extend(name_or_rules)
        else:
            self.registry.register(name_or_rules, message, predicate, parameters)
        return self

    def prepare(self, callback: Callable[["Validator"], Any]) -> "Validator":
        """Register a hook that runs before every pass."""
        self._before_hooks.add(callback)
        return self

    def failed(self, callback: Callable[["Validator"], Any]) -> "Validator":
        """Register a hook for the next failing pass."""
        self._failed_hooks.add(callback)
        return self

    def passed(self, callback: Callable[["Validator"], Any]) -> "Validator":
        """Register a hook for the next passing pass."""
        self._passed_hooks.add(callback)
        return self

    def read(self, path: str) -> Any:
        """Read a field from the current data."""
        return self.reader.read(self.data, path)

    def validate(self) -> "Validator":
        """
        Run a full validation pass.

        Returns:
            self, for chained queries

        Raises:
            ConfigurationError: If a rule declaration is malformed or names an
                unknown rule. No predicate has run and the error map is empty.
        """
        self.prepare_to_validate()

        for check in self.checks:
            messages = self.errors.setdefault(check.attribute, [])
            if not check.rule():
                messages.append(check.message())

        self.after_validation()

        return self

    def prepare_to_validate(self) -> None:
        """Build this pass's Checks and run the before-validation hooks."""
        self.errors = {}
        self.checks = []

        checks = []
        for attribute, declaration in self.rules.items():
            checks.extend(self.parser.parse(self, attribute, declaration))
        self.checks = checks
        self.errors = {attribute: [] for attribute in self.rules}

        self._before_hooks.run(self)

    def after_validation(self) -> None:
        """Fire the one-shot hooks matching this pass's outcome."""
        failed = self.has_errors()

        logger.debug(
            "Validation pass complete",
            extra={
                "checks": len(self.checks),
                "failed_fields": [field for field, messages in self.errors.items() if messages],
            },
        )

        if failed:
            self._failed_hooks.run(self)
        else:
            self._passed_hooks.run(self)

    def passes(self) -> bool:
        """Validate and return True if every check passed."""
        return not self.validate().has_errors()

    def fails(self) -> bool:
        """Validate and return True if any check failed."""
        return self.validate().has_errors()

    def has_errors(self) -> bool:
        return any(self.errors.values())

    def get_errors(self) -> Dict[str, List[str]]:
        """
        Error messages per field, e.g.
        ``{"name": ["The name field is required."], "email": []}``.

        Every validated field has a key; an empty list means it passed.
        """
        return {field: list(messages) for field, messages in self.errors.items()}

    def get_errors_list(self) -> List[str]:
        """All error messages, field by field in declaration order."""
        return [message for messages in self.errors.values() for message in messages]

    def first_error(self, field: str) -> Optional[str]:
        messages = self.errors.get(field)
        return messages[0] if messages else None

    def rule_names(self) -> List[str]:
        return self.registry.names()


def make_validator(
    data: Optional[Mapping] = None,
    rules: Optional[Mapping] = None,
    messages: Optional[Mapping] = None,
    translator: Any = None,
) -> Validator:
    """Create a Validator for data and rules."""
    return Validator(data, rules, messages, translator)
