"""Message template rendering."""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Dict, Tuple, Union

PLACEHOLDER = re.compile(r":([A-Za-z_][A-Za-z0-9_]*)")

MessageTemplate = Union[str, Callable[["RenderContext"], str]]


@dataclass(frozen=True)
class RenderContext:
    """Everything a template may refer to, captured by value."""

    attribute: str
    value: Any
    parameters: Tuple[str, ...]
    translator: Any = None

    def display_attribute(self) -> str:
        """Attribute name as it should appear to the user."""
        if isinstance(self.translator, Mapping):
            return str(self.translator.get(self.attribute, self.attribute))
        if callable(self.translator):
            return str(self.translator(self.attribute))
        return self.attribute

    def replacements(self) -> Dict[str, str]:
        values = {
            "attribute": self.display_attribute(),
            "value": "" if self.value is None else str(self.value),
            "params": ", ".join(self.parameters),
        }
        for index, parameter in enumerate(self.parameters):
            values[f"param{index}"] = parameter
        return values


def render_message(template: MessageTemplate, context: RenderContext) -> str:
    """
    Render ``template`` against ``context``.

    String templates have their ``:name`` placeholders substituted; a
    placeholder with no matching value is left as written. Callable templates
    receive the context and return the finished message.
    """
    if callable(template):
        return str(template(context))

    replacements = context.replacements()

    def substitute(match):
        return replacements.get(match.group(1), match.group(0))

    return PLACEHOLDER.sub(substitute, template)
