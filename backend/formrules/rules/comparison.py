"""Comparison rules: loose equality and pattern matching."""

import re
from functools import lru_cache
from typing import Any, Union

from formrules.models import DiagnosticCode
from formrules.rules.base import BaseRule, RuleContext

# Characters recognized as pattern delimiters, e.g. /abc/i or #abc#
DELIMITERS = set("/#~@!%|;,`")

# Closing delimiter for bracket-style delimited patterns, e.g. {abc}i
BRACKET_DELIMITERS = {"{": "}"}

# Trailing modifiers accepted on delimited patterns
PATTERN_FLAGS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
    "u": re.UNICODE,
}


class EqualsRule(BaseRule):
    """Loose equality against the parameter.

    None reads as empty text; when both sides are numeric they compare as
    numbers ("5" == 5, "5.0" == "5"); otherwise their text forms compare.
    """

    @property
    def name(self) -> str:
        return "equals"

    def evaluate(self, value: Any, param: Any, context: RuleContext) -> bool:
        if self._is_numeric(value) and self._is_numeric(param):
            return float(value) == float(param)
        return self._text(value) == self._text(param)


class MatchRegexRule(BaseRule):
    """Value must contain a match for the pattern.

    The parameter may be a compiled pattern, a plain pattern string, or a
    delimited pattern with trailing flags such as '/^[a-z]+$/i'.
    """

    @property
    def name(self) -> str:
        return "match_regex"

    def evaluate(self, value: Any, param: Any, context: RuleContext) -> bool:
        try:
            pattern = param if isinstance(param, re.Pattern) else compile_pattern(self._text(param))
        except re.error as e:
            context.diagnose(
                DiagnosticCode.INVALID_PATTERN,
                f"Pattern {param!r} for field '{context.field}' does not compile: {e}",
            )
            return False
        return pattern.search(self._text(value)) is not None


@lru_cache(maxsize=256)
def compile_pattern(raw: str) -> "re.Pattern[str]":
    """Compile a plain or delimited pattern string."""
    body, flags = _split_delimited(raw)
    return re.compile(body, flags)


def _split_delimited(raw: str) -> tuple[str, Union[int, re.RegexFlag]]:
    """Split '/body/flags' into (body, re flags). Undelimited text is returned as-is.

    A delimited pattern with modifiers outside PATTERN_FLAGS raises re.error.
    """
    if len(raw) < 2:
        return raw, 0

    opener = raw[0]
    if opener not in DELIMITERS and opener not in BRACKET_DELIMITERS:
        return raw, 0

    closer = BRACKET_DELIMITERS.get(opener, opener)
    end = raw.rfind(closer)
    if end <= 0:
        return raw, 0

    modifiers = raw[end + 1:]
    if modifiers and not modifiers.isalpha():
        return raw, 0
    unknown = [m for m in modifiers if m not in PATTERN_FLAGS]
    if unknown:
        raise re.error(f"unknown modifier(s) {''.join(unknown)!r}")

    flags = 0
    for m in modifiers:
        flags |= PATTERN_FLAGS[m]
    return raw[1:end], flags
