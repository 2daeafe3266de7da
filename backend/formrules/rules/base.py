"""Base rule: abstract class implementing the Strategy Pattern.

Each rule is a standalone, independently testable unit looked up by name
in the registry. New rules are added without modifying the session.
"""

from abc import ABC, abstractmethod
import re
from typing import Any, Callable, Optional

from formrules.inputs import InputSource
from formrules.models import DiagnosticCode
from formrules.rules.messages import RULE_MESSAGES

# Numeric text: optional whitespace, sign, digits with optional fraction, optional exponent
NUMERIC_RE = re.compile(r"[ \t\n\r\v\f]*[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?[ \t\n\r\v\f]*")

LEADING_INT_RE = re.compile(r"[ \t\n\r\v\f]*([+-]?[0-9]+)")


class BaseRule(ABC):
    """Abstract base for all built-in rules.

    Contract:
        - evaluate() is deterministic: same value and parameter -> same result
        - evaluate() returns True (pass) or False (fail), it does not raise
          for ordinary bad input
        - evaluate() reads the Input Source only through context.present()
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Rule name used in rule() calls."""
        ...

    @property
    def template(self) -> str:
        """Message template: first %s is the label, second the parameter.

        Rules added outside the built-in table override this.
        """
        return RULE_MESSAGES.get(self.name, "%s is invalid")

    @abstractmethod
    def evaluate(self, value: Any, param: Any, context: "RuleContext") -> bool:
        """Check one field value.

        Args:
            value: The field's value as fetched from the Input Source
            param: The parameter given to rule(), or None
            context: Evaluation context (Input Source access, diagnostics)

        Returns:
            True if the value satisfies the rule
        """
        ...

    def render(self, label: Optional[str], param: Any) -> str:
        """Render this rule's failure message for a field."""
        return render_message(self.template, label, param)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"

    # ── Helper Methods ──

    @staticmethod
    def _text(value: Any) -> str:
        """Text form of a value; None reads as empty."""
        if value is None:
            return ""
        return value if isinstance(value, str) else str(value)

    def _is_present(self, value: Any) -> bool:
        return value is not None and len(self._text(value)) > 0

    def _length(self, value: Any) -> int:
        return len(self._text(value))

    @staticmethod
    def _is_numeric(value: Any) -> bool:
        """Number, or text that reads as a number."""
        if isinstance(value, bool):
            return False
        if isinstance(value, (int, float)):
            return True
        if not isinstance(value, str):
            return False
        return NUMERIC_RE.fullmatch(value) is not None

    def _to_int(self, value: Any) -> int:
        """Integer interpretation, truncating toward zero. Non-numeric -> leading digits or 0."""
        if isinstance(value, bool):
            return int(value)
        if isinstance(value, int):
            return value
        if isinstance(value, float):
            try:
                return int(value)
            except (OverflowError, ValueError):
                return 0
        text = self._text(value)
        if self._is_numeric(text):
            try:
                return int(text.strip())
            except ValueError:
                pass
            try:
                return int(float(text))
            except (OverflowError, ValueError):
                return 0
        match = LEADING_INT_RE.match(text)
        return int(match.group(1)) if match else 0


def render_message(template: str, label: Optional[str], param: Any) -> str:
    """Fill a template's %s slots with (label, param), in order.

    Only as many arguments as the template has slots are used. None renders
    as the empty string. Slots are substituted positionally, so any other '%'
    in the template, label or parameter is left as-is.
    """
    pieces = template.split("%s")
    args = ["" if a is None else str(a) for a in (label, param)]
    rendered = pieces[0]
    for i, piece in enumerate(pieces[1:]):
        rendered += (args[i] if i < len(args) else "") + piece
    return rendered


class RuleContext:
    """What a rule may see besides its own value: other fields and the diagnostic channel."""

    def __init__(
        self,
        source: InputSource,
        field: str,
        rule: str,
        diagnose: Optional[Callable[[DiagnosticCode, str], None]] = None,
    ):
        self.source = source
        self.field = field
        self.rule = rule
        self._diagnose = diagnose

    def present(self, key: str) -> bool:
        """Whether the Input Source holds a non-empty value for key."""
        value = self.source.post(key)
        return value is not None and len(BaseRule._text(value)) > 0

    def diagnose(self, code: DiagnosticCode, message: str) -> None:
        if self._diagnose is not None:
            self._diagnose(code, message)
