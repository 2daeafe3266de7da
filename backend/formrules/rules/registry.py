"""Rule registry: the process-wide table mapping rule names to rule objects.

Built once at import time and read-only afterwards. The session checks rule
names against it at rule() time, so unknown names are rejected up front
instead of being probed at evaluation time.

Usage:
    from formrules.rules import rule_registry

    rule = rule_registry.get("min_length")
    rule.evaluate("hello", 3, context)
"""

from typing import Optional

from formrules.rules.base import BaseRule

from formrules.rules.presence import RequiredRule, RequiredIfRule
from formrules.rules.comparison import EqualsRule, MatchRegexRule
from formrules.rules.length import MinLengthRule, MaxLengthRule, ExactLengthRule
from formrules.rules.numeric import MinValRule, MaxValRule, IsNumericRule, IsIntRule, IsFloatRule
from formrules.rules.network import ValidIpRule, ValidUriRule, ValidEmailRule, ValidEmailsRule

# Reserved rule name routed to the custom callback bridge
CUSTOM_RULE = "custom"


class RuleRegistry:
    """Maps rule name -> BaseRule. The reserved name 'custom' is always known."""

    def __init__(self, rules: Optional[list[BaseRule]] = None):
        """Initialize with the built-in rules or a custom list.

        Args:
            rules: Optional list of rules. If None, uses all built-ins.
        """
        self._rules: dict[str, BaseRule] = {}
        for rule in rules if rules is not None else self._default_rules():
            self.add_rule(rule)

    @staticmethod
    def _default_rules() -> list[BaseRule]:
        """Create the built-in rule set."""
        return [
            RequiredRule(),
            RequiredIfRule(),
            EqualsRule(),
            MatchRegexRule(),
            MinLengthRule(),
            MaxLengthRule(),
            ExactLengthRule(),
            MinValRule(),
            MaxValRule(),
            IsNumericRule(),
            IsIntRule(),
            IsFloatRule(),
            ValidIpRule(),
            ValidUriRule(),
            ValidEmailRule(),
            ValidEmailsRule(),
        ]

    def get(self, name: str) -> Optional[BaseRule]:
        """Built-in rule for name, or None (including for 'custom')."""
        return self._rules.get(name)

    def names(self) -> list[str]:
        """All recognized rule names, built-ins first."""
        return list(self._rules) + [CUSTOM_RULE]

    def __contains__(self, name: object) -> bool:
        return name == CUSTOM_RULE or name in self._rules

    def add_rule(self, rule: BaseRule) -> None:
        """Add (or replace) a rule. Meant for startup-time extension only."""
        if rule.name == CUSTOM_RULE:
            raise ValueError(f"'{CUSTOM_RULE}' is reserved for callback rules")
        self._rules[rule.name] = rule

    def remove_rule(self, name: str) -> None:
        """Remove a rule by name."""
        self._rules.pop(name, None)


# Module-level singleton
rule_registry = RuleRegistry()
