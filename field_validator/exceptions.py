"""Exceptions raised by field-validator.

Only programmer and configuration errors are raised. Data that fails a rule is
never an exception: it is recorded in the validator's error map.
"""


class FieldValidatorError(Exception):
    """Base error for field-validator exceptions."""


class ConfigurationError(FieldValidatorError, ValueError):
    """Raised when rules, messages, data or rulesets are misconfigured."""


class RulesetLoadError(FieldValidatorError, RuntimeError):
    """Raised when a rulesets document cannot be read or fetched."""
