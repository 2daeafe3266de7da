"""Length rules. Lengths count characters of the value's text form."""

import sys
from typing import Any

from formrules.rules.base import BaseRule, RuleContext


class MinLengthRule(BaseRule):

    @property
    def name(self) -> str:
        return "min_length"

    def evaluate(self, value: Any, param: Any, context: RuleContext) -> bool:
        minimum = 0 if param is None else self._to_int(param)
        return self._length(value) >= minimum


class MaxLengthRule(BaseRule):

    @property
    def name(self) -> str:
        return "max_length"

    def evaluate(self, value: Any, param: Any, context: RuleContext) -> bool:
        maximum = sys.maxsize if param is None else self._to_int(param)
        return self._length(value) <= maximum


class ExactLengthRule(BaseRule):

    @property
    def name(self) -> str:
        return "exact_length"

    def evaluate(self, value: Any, param: Any, context: RuleContext) -> bool:
        return self._length(value) == self._to_int(param)
