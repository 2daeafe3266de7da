"""Built-in validation rules and the registry that dispatches to them.

Usage:
    from formrules.rules import rule_registry, CUSTOM_RULE

    "min_length" in rule_registry   # True
    "custom" in rule_registry       # True (routed to the callback bridge)
"""

from formrules.rules.base import BaseRule, RuleContext, render_message
from formrules.rules.messages import RULE_MESSAGES
from formrules.rules.registry import RuleRegistry, rule_registry, CUSTOM_RULE

__all__ = [
    "BaseRule",
    "RuleContext",
    "render_message",
    "RULE_MESSAGES",
    "RuleRegistry",
    "rule_registry",
    "CUSTOM_RULE",
]
