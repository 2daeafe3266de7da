"""Network-shaped value rules: IP addresses, URLs, and email addresses."""

import ipaddress
from typing import Any

from email_validator import EmailNotValidError, validate_email
from pydantic import AnyUrl, TypeAdapter, ValidationError

from formrules.rules.base import BaseRule, RuleContext

_URL_ADAPTER = TypeAdapter(AnyUrl)


def is_valid_email(value: Any) -> bool:
    """Syntax check only; no DNS or deliverability lookups."""
    if not isinstance(value, str) or not value:
        return False
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


class ValidIpRule(BaseRule):
    """IPv4 address, or IPv6 when the parameter is 'v6'."""

    @property
    def name(self) -> str:
        return "valid_ip"

    def evaluate(self, value: Any, param: Any, context: RuleContext) -> bool:
        if not isinstance(value, str):
            return False
        address_type = ipaddress.IPv6Address if param == "v6" else ipaddress.IPv4Address
        try:
            address_type(value)
        except ValueError:
            return False
        return True


class ValidUriRule(BaseRule):
    """Absolute URL with a scheme."""

    @property
    def name(self) -> str:
        return "valid_uri"

    def evaluate(self, value: Any, param: Any, context: RuleContext) -> bool:
        if not isinstance(value, str) or not value:
            return False
        try:
            _URL_ADAPTER.validate_python(value)
        except ValidationError:
            return False
        return True


class ValidEmailRule(BaseRule):

    @property
    def name(self) -> str:
        return "valid_email"

    def evaluate(self, value: Any, param: Any, context: RuleContext) -> bool:
        return is_valid_email(value)


class ValidEmailsRule(BaseRule):
    """A list of email addresses, newline-delimited if any newline exists, else comma-delimited.

    Every item must be a valid address on its own; an empty value is one empty
    item and fails.
    """

    @property
    def name(self) -> str:
        return "valid_emails"

    def evaluate(self, value: Any, param: Any, context: RuleContext) -> bool:
        text = self._text(value)
        delimiter = "\n" if "\n" in text else ","
        emails = [item.strip() for item in text.split(delimiter)]
        if not emails:
            return False
        return all(is_valid_email(email) for email in emails)
