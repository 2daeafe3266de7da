"""Numeric rules: bounds, numeric text, and runtime type checks."""

from typing import Any

from formrules.rules.base import BaseRule, RuleContext


class MinValRule(BaseRule):
    """Numeric value whose integer interpretation is >= param."""

    @property
    def name(self) -> str:
        return "min_val"

    def evaluate(self, value: Any, param: Any, context: RuleContext) -> bool:
        return self._is_numeric(value) and self._to_int(value) >= self._to_int(param)


class MaxValRule(BaseRule):
    """Numeric value whose integer interpretation is <= param."""

    @property
    def name(self) -> str:
        return "max_val"

    def evaluate(self, value: Any, param: Any, context: RuleContext) -> bool:
        return self._is_numeric(value) and self._to_int(value) <= self._to_int(param)


class IsNumericRule(BaseRule):

    @property
    def name(self) -> str:
        return "is_numeric"

    def evaluate(self, value: Any, param: Any, context: RuleContext) -> bool:
        return self._is_numeric(value)


class IsIntRule(BaseRule):
    """Runtime type check: the value itself must be an int.

    Values from a form or query string are always text, so this only passes
    for sources that hand over real ints.
    """

    @property
    def name(self) -> str:
        return "is_int"

    def evaluate(self, value: Any, param: Any, context: RuleContext) -> bool:
        return isinstance(value, int) and not isinstance(value, bool)


class IsFloatRule(BaseRule):
    """Runtime type check: the value itself must be a float (text never passes)."""

    @property
    def name(self) -> str:
        return "is_float"

    def evaluate(self, value: Any, param: Any, context: RuleContext) -> bool:
        return isinstance(value, float)
