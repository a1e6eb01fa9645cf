"""
field-validator: declarative per-field validation of structured input

This library validates a record against per-field rule declarations:
- Rules declared as strings, sequences or mappings ("required|min:3")
- Built-in rules with overridable message templates
- Custom rules per validator instance via extend()
- Dotted and wildcard field paths
- Before / failed / passed lifecycle hooks
- Named rulesets loaded from YAML

Example:
    from field_validator import make_validator

    validator = make_validator({"name": ""}, {"name": "required|min:3"})
    if validator.validate().has_errors():
        print(validator.get_errors())
"""

from .config_loader import ConfigLoader
from .exceptions import ConfigurationError, FieldValidatorError, RulesetLoadError
from .rules import ParameterSpec
from .validator import Validator, make_validator

__version__ = "0.1.0"
__all__ = [
    "Validator",
    "make_validator",
    "ParameterSpec",
    "ConfigLoader",
    "FieldValidatorError",
    "ConfigurationError",
    "RulesetLoadError",
]
