"""
Rule Parser - turns rule declarations into Checks.

A field's rules may be declared in any of three shapes, all of which mean the
same thing to the engine:

    "required|min:3|between:3,8"                  # string
    ["required", "min:3", ("between", 3, 8)]      # sequence
    {"required": None, "min": 3, "between": [3, 8]}  # mapping

Each shape has its own normalizer producing ``(rule_name, parameters)`` pairs.
From there on, Check construction is identical whatever shape was supplied.
The string shape always splits on the rule separator first, so a parameter
that contains it (a ``regex`` alternation) needs one of the other shapes.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Iterable, List, Tuple

from .check import Check
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

RuleSpec = Tuple[str, Tuple[str, ...]]


@dataclass(frozen=True)
class Grammar:
    """Separators of the string declaration shape."""

    rule_separator: str = "|"
    parameter_separator: str = ":"
    parameter_list_separator: str = ","


DEFAULT_GRAMMAR = Grammar()


class RuleParser:
    """Expands one field's declaration into an ordered list of Checks."""

    def __init__(self, grammar: Grammar = DEFAULT_GRAMMAR):
        self.grammar = grammar

    def parse(self, validator, attribute: str, declaration: Any) -> List[Check]:
        """
        Build the Checks for one field.

        Args:
            validator: The owning Validator (registry, data, messages, translator)
            attribute: Field name or dotted path
            declaration: The field's rules in any accepted shape

        Returns:
            Checks in declaration order

        Raises:
            ConfigurationError: On a malformed declaration, an unknown rule, or
                parameters the rule cannot use
        """
        specs = self.normalize(attribute, declaration)
        value = validator.read(attribute)

        checks = []
        for rule_name, parameters in specs:
            predicate, default_template = validator.registry.get(rule_name)
            validator.registry.parameters(rule_name).check(rule_name, attribute, parameters)
            checks.append(
                Check(
                    attribute=attribute,
                    value=value,
                    parameters=parameters,
                    rule_name=rule_name,
                    predicate=predicate,
                    template=self._template(validator, attribute, rule_name, default_template),
                    validator=validator,
                    translator=validator.translator,
                )
            )

        logger.debug(
            "Parsed field rules",
            extra={"attribute": attribute, "rules": [name for name, _ in specs]},
        )
        return checks

    def normalize(self, attribute: str, declaration: Any) -> List[RuleSpec]:
        """Reduce any declaration shape to ``(rule_name, parameters)`` pairs."""
        if isinstance(declaration, str):
            return self._from_string(attribute, declaration)
        if isinstance(declaration, Mapping):
            return self._from_mapping(attribute, declaration)
        if isinstance(declaration, (list, tuple)):
            return self._from_sequence(attribute, declaration)

        raise ConfigurationError(
            f"Rules for '{attribute}' must be a string, sequence or mapping, "
            f"got {type(declaration).__name__}"
        )

    def _from_string(self, attribute: str, declaration: str) -> List[RuleSpec]:
        return [
            self._parse_segment(attribute, segment)
            for segment in declaration.split(self.grammar.rule_separator)
        ]

    def _from_sequence(self, attribute: str, declaration: Iterable) -> List[RuleSpec]:
        specs = []
        for item in declaration:
            if isinstance(item, str):
                specs.append(self._parse_segment(attribute, item))
            elif isinstance(item, (list, tuple)) and item:
                name, *parameters = item
                specs.append(self._spec(attribute, name, parameters))
            else:
                raise ConfigurationError(
                    f"Invalid rule {item!r} for '{attribute}': expected a rule string "
                    f"or a (name, *parameters) tuple"
                )
        return specs

    def _from_mapping(self, attribute: str, declaration: Mapping) -> List[RuleSpec]:
        specs = []
        for name, parameters in declaration.items():
            if parameters is None or parameters is True:
                parameters = []
            elif not isinstance(parameters, (list, tuple)):
                parameters = [parameters]
            specs.append(self._spec(attribute, name, parameters))
        return specs

    def _parse_segment(self, attribute: str, segment: str) -> RuleSpec:
        name, separator, raw_parameters = segment.strip().partition(
            self.grammar.parameter_separator
        )
        parameters = (
            raw_parameters.split(self.grammar.parameter_list_separator) if separator else []
        )
        return self._spec(attribute, name.strip(), parameters)

    def _spec(self, attribute: str, name: Any, parameters: Iterable) -> RuleSpec:
        if not isinstance(name, str) or not name:
            raise ConfigurationError(f"Invalid rule name {name!r} for '{attribute}'")
        return name, tuple(str(p) for p in parameters)

    def _template(self, validator, attribute: str, rule_name: str, default_template):
        custom = validator.custom_messages
        for key in (f"{attribute}.{rule_name}", rule_name):
            if key in custom:
                return custom[key]
        return default_template
