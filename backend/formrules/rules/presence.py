"""Presence rules: required and required_if."""

from typing import Any

from formrules.rules.base import BaseRule, RuleContext


class RequiredRule(BaseRule):
    """Value must be present and non-empty."""

    @property
    def name(self) -> str:
        return "required"

    def evaluate(self, value: Any, param: Any, context: RuleContext) -> bool:
        return self._is_present(value)


class RequiredIfRule(BaseRule):
    """Value is required only when the dependent field (param) is present.

    The dependent field is read straight from the Input Source, so it does not
    need to be registered itself.
    """

    @property
    def name(self) -> str:
        return "required_if"

    def evaluate(self, value: Any, param: Any, context: RuleContext) -> bool:
        if param is None or not context.present(str(param)):
            return True
        return self._is_present(value)
