"""
Check - one bound application of a rule to one field.

Checks are built by the rule parser at the start of every validation pass and
thrown away when the pass ends. A predicate receives the Check itself and reads
whatever it needs from it:

    def predicate(check):
        return check.value is not None and len(check.value) >= int(check.parameters[0])

Cross-field rules (e.g. ``confirmed``) use ``check.read(path)`` to look up
other fields from the data being validated.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Tuple

from .messages import MessageTemplate, RenderContext, render_message


@dataclass(frozen=True)
class Check:
    """Immutable descriptor of a rule bound to a field, its value and parameters."""

    attribute: str
    value: Any
    parameters: Tuple[str, ...]
    rule_name: str
    predicate: Callable[["Check"], Any] = field(repr=False)
    template: MessageTemplate = field(repr=False)
    validator: Any = field(default=None, repr=False, compare=False)
    translator: Any = field(default=None, repr=False, compare=False)

    def rule(self) -> bool:
        """Run the predicate against this check."""
        return bool(self.predicate(self))

    def message(self) -> str:
        """Render the failure message for this check."""
        return render_message(self.template, self.render_context())

    def render_context(self) -> RenderContext:
        return RenderContext(
            attribute=self.attribute,
            value=self.value,
            parameters=self.parameters,
            translator=self.translator,
        )

    def read(self, path: str) -> Any:
        """Read another field from the data under validation."""
        if self.validator is None:
            return None
        return self.validator.read(path)
