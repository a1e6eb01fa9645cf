"""
Built-in validation rules.

Each rule is a predicate taking a :class:`~field_validator.check.Check` and
returning truthy when the value is valid, paired with a default message
template. Together they form the default snapshot every rule registry starts
from. Rules that take parameters also declare a :class:`ParameterSpec`, which
the parser checks before any predicate runs.

Absent values (``None``) pass every rule except ``required``, so optional
fields can carry format rules without also being mandatory.

Multi-valued fields (wildcard paths): ``required`` fails if any item is
empty; ``array`` checks the list itself; size rules (``min``, ``max``,
``between``, ``size``) measure the list length; all other rules see the list
as a single value.

``regex`` patterns: in the string shape the rule separator (``|``) always
splits rules, so a pattern that contains it must be declared in the sequence
or mapping shape::

    {"code": ["required", "regex:^(a|b)$"]}
    {"code": {"required": None, "regex": "^(a|b)$"}}
"""

import re
from dataclasses import dataclass
from numbers import Number
from types import MappingProxyType
from typing import Any, Optional, Tuple

from .exceptions import ConfigurationError

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
URL_PATTERN = re.compile(r"^https?://[^\s/$.?#].[^\s]*$", re.IGNORECASE)
ALPHA_PATTERN = re.compile(r"^[^\W\d_]+$")
ALPHA_NUM_PATTERN = re.compile(r"^[^\W_]+$")


@dataclass(frozen=True)
class ParameterSpec:
    """
    What a rule requires of its parameters.

    Attributes:
        count: Minimum number of parameters
        numeric: The first ``count`` parameters must parse as numbers
        pattern: The parameters, rejoined with commas, must compile as a regex
    """

    count: int = 0
    numeric: bool = False
    pattern: bool = False

    def check(self, rule_name: str, attribute: str, parameters: Tuple[str, ...]) -> None:
        """
        Raises:
            ConfigurationError: If parameters do not satisfy this spec
        """
        if len(parameters) < self.count:
            raise ConfigurationError(
                f"Rule '{rule_name}' on '{attribute}' needs {self.count} "
                f"parameter(s), got {len(parameters)}"
            )

        if self.numeric:
            for parameter in parameters[:self.count]:
                try:
                    float(parameter)
                except ValueError:
                    raise ConfigurationError(
                        f"Rule '{rule_name}' on '{attribute}' needs numeric "
                        f"parameters, got {parameter!r}"
                    ) from None

        if self.pattern:
            try:
                re.compile(",".join(parameters))
            except re.error as e:
                raise ConfigurationError(
                    f"Rule '{rule_name}' on '{attribute}' has an invalid pattern: {e}"
                ) from e


NO_PARAMETERS = ParameterSpec()


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) == 0
    return False


def _is_number(value: Any) -> bool:
    return isinstance(value, Number) and not isinstance(value, bool)


def _to_number(value: Any) -> Optional[float]:
    if _is_number(value):
        return value
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _size(value: Any) -> Optional[float]:
    """Numbers measure by value, strings and collections by length."""
    if _is_number(value):
        return value
    if isinstance(value, (str, list, tuple, dict, set)):
        return len(value)
    return None


def _parameter_number(check, index: int) -> float:
    return float(check.parameters[index])


# -- presence ---------------------------------------------------------------

def required(check) -> bool:
    value = check.value
    if isinstance(value, list) and value and any(_is_empty(v) for v in value):
        return False
    return not _is_empty(value)


def accepted(check) -> bool:
    if check.value is None:
        return True
    return check.value in (True, 1, "1", "yes", "on", "true")


# -- types ------------------------------------------------------------------

def string(check) -> bool:
    return check.value is None or isinstance(check.value, str)


def numeric(check) -> bool:
    return check.value is None or _to_number(check.value) is not None


def integer(check) -> bool:
    value = check.value
    if value is None:
        return True
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, str) and re.fullmatch(r"[-+]?\d+", value.strip()) is not None


def boolean(check) -> bool:
    return check.value is None or check.value in (True, False, 0, 1, "0", "1")


def array(check) -> bool:
    return check.value is None or isinstance(check.value, (list, tuple))


# -- size -------------------------------------------------------------------

def min_rule(check) -> bool:
    if check.value is None:
        return True
    size = _size(check.value)
    return size is not None and size >= _parameter_number(check, 0)


def max_rule(check) -> bool:
    if check.value is None:
        return True
    size = _size(check.value)
    return size is not None and size <= _parameter_number(check, 0)


def between(check) -> bool:
    if check.value is None:
        return True
    size = _size(check.value)
    return (
        size is not None
        and _parameter_number(check, 0) <= size <= _parameter_number(check, 1)
    )


def size(check) -> bool:
    if check.value is None:
        return True
    return _size(check.value) == _parameter_number(check, 0)


# -- format -----------------------------------------------------------------

def email(check) -> bool:
    value = check.value
    return value is None or (isinstance(value, str) and EMAIL_PATTERN.match(value) is not None)


def url(check) -> bool:
    value = check.value
    return value is None or (isinstance(value, str) and URL_PATTERN.match(value) is not None)


def alpha(check) -> bool:
    value = check.value
    return value is None or (isinstance(value, str) and ALPHA_PATTERN.match(value) is not None)


def alpha_num(check) -> bool:
    value = check.value
    return value is None or (isinstance(value, str) and ALPHA_NUM_PATTERN.match(value) is not None)


def regex(check) -> bool:
    # Parameters are split on commas, so a pattern containing commas is rejoined
    value = check.value
    if value is None:
        return True
    pattern = ",".join(check.parameters)
    return isinstance(value, str) and re.search(pattern, value) is not None


# -- membership -------------------------------------------------------------

def in_rule(check) -> bool:
    return check.value is None or str(check.value) in check.parameters


def not_in(check) -> bool:
    return check.value is None or str(check.value) not in check.parameters


# -- cross-field ------------------------------------------------------------

def confirmed(check) -> bool:
    """``password`` must equal ``password_confirmation``."""
    return check.value == check.read(f"{check.attribute}_confirmation")


def same(check) -> bool:
    return check.value == check.read(check.parameters[0])


def different(check) -> bool:
    return check.value is None or check.value != check.read(check.parameters[0])


DEFAULT_RULES = MappingProxyType({
    "required": required,
    "accepted": accepted,
    "string": string,
    "numeric": numeric,
    "integer": integer,
    "boolean": boolean,
    "array": array,
    "min": min_rule,
    "max": max_rule,
    "between": between,
    "size": size,
    "email": email,
    "url": url,
    "alpha": alpha,
    "alpha_num": alpha_num,
    "regex": regex,
    "in": in_rule,
    "not_in": not_in,
    "confirmed": confirmed,
    "same": same,
    "different": different,
})

DEFAULT_MESSAGES = MappingProxyType({
    "required": "The :attribute field is required.",
    "accepted": "The :attribute must be accepted.",
    "string": "The :attribute must be a string.",
    "numeric": "The :attribute must be a number.",
    "integer": "The :attribute must be an integer.",
    "boolean": "The :attribute field must be true or false.",
    "array": "The :attribute must be an array.",
    "min": "The :attribute must be at least :param0.",
    "max": "The :attribute may not be greater than :param0.",
    "between": "The :attribute must be between :param0 and :param1.",
    "size": "The :attribute must be :param0.",
    "email": "The :attribute must be a valid email address.",
    "url": "The :attribute format is invalid.",
    "alpha": "The :attribute may only contain letters.",
    "alpha_num": "The :attribute may only contain letters and numbers.",
    "regex": "The :attribute format is invalid.",
    "in": "The selected :attribute is invalid.",
    "not_in": "The selected :attribute is invalid.",
    "confirmed": "The :attribute confirmation does not match.",
    "same": "The :attribute and :param0 must match.",
    "different": "The :attribute and :param0 must be different.",
})

# Rules missing here take no parameters
DEFAULT_PARAMETERS = MappingProxyType({
    "min": ParameterSpec(count=1, numeric=True),
    "max": ParameterSpec(count=1, numeric=True),
    "size": ParameterSpec(count=1, numeric=True),
    "between": ParameterSpec(count=2, numeric=True),
    "same": ParameterSpec(count=1),
    "different": ParameterSpec(count=1),
    "in": ParameterSpec(count=1),
    "not_in": ParameterSpec(count=1),
    "regex": ParameterSpec(count=1, pattern=True),
})
