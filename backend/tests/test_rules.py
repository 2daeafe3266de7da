"""Tests for the built-in rules and the rule registry."""

import re

import pytest

from formrules.models import DiagnosticCode
from formrules.rules import RULE_MESSAGES, RuleRegistry, render_message, rule_registry
from formrules.rules.comparison import compile_pattern


def check(rule_name, value, param=None, context=None):
    rule = rule_registry.get(rule_name)
    return rule.evaluate(value, param, context)


class TestRegistry:

    def test_every_builtin_has_a_template(self):
        names = [n for n in rule_registry.names() if n != "custom"]
        assert sorted(names) == sorted(RULE_MESSAGES)

    def test_custom_is_reserved_and_recognized(self):
        assert "custom" in rule_registry
        assert rule_registry.get("custom") is None

    def test_unknown_name_not_recognized(self):
        assert "is_palindrome" not in rule_registry

    def test_cannot_register_custom_name(self):
        from formrules.rules.presence import RequiredRule

        class Impostor(RequiredRule):
            @property
            def name(self):
                return "custom"

        with pytest.raises(ValueError):
            RuleRegistry().add_rule(Impostor())

    def test_remove_rule(self):
        registry = RuleRegistry()
        registry.remove_rule("valid_uri")
        assert "valid_uri" not in registry
        assert "valid_uri" in rule_registry


class TestRenderMessage:

    def test_label_and_param(self):
        assert render_message("%s must equal %s", "Password", "secret") == "Password must equal secret"

    def test_single_slot_ignores_param(self):
        assert render_message("%s is required", "Name", 5) == "Name is required"

    def test_none_renders_empty(self):
        assert render_message("%s must equal %s", None, None) == " must equal "

    def test_stray_percent_left_as_is(self):
        assert render_message("%s must be under 100%", "Rate", 5) == "Rate must be under 100%"
        assert render_message("%d%% of %s", "Total", None) == "%d%% of Total"


class TestPresence:

    def test_required(self, context):
        ctx = context()
        assert check("required", "x", context=ctx) is True
        assert check("required", "0", context=ctx) is True
        assert check("required", "", context=ctx) is False
        assert check("required", None, context=ctx) is False

    def test_required_if_dependent_present(self, context):
        ctx = context({"phone": "555-1234"})
        assert check("required_if", "", "phone", ctx) is False
        assert check("required_if", "sms", "phone", ctx) is True

    def test_required_if_dependent_absent(self, context):
        ctx = context({"phone": ""})
        assert check("required_if", "", "phone", ctx) is True
        assert check("required_if", None, "missing", ctx) is True


class TestComparison:

    @pytest.mark.parametrize("value,param,expected", [
        ("abc", "abc", True),
        ("abc", "abd", False),
        ("5", 5, True),
        ("5.0", "5", True),
        (" 7", 7, True),
        (None, "", True),
        ("", None, True),
        ("10", "1e1", True),
        ("abc", 0, False),
    ])
    def test_equals_loose(self, context, value, param, expected):
        assert check("equals", value, param, context()) is expected

    def test_match_regex_plain(self, context):
        assert check("match_regex", "12345", r"^\d+$", context()) is True
        assert check("match_regex", "12a45", r"^\d+$", context()) is False

    def test_match_regex_search_semantics(self, context):
        assert check("match_regex", "order-42-x", r"\d+", context()) is True

    def test_match_regex_delimited_with_flags(self, context):
        assert check("match_regex", "Hello", "/^[a-z]+$/i", context()) is True
        assert check("match_regex", "Hello", "/^[a-z]+$/", context()) is False
        assert check("match_regex", "a#b", "~a#b~", context()) is True

    def test_match_regex_compiled_pattern(self, context):
        assert check("match_regex", "ABC", re.compile("abc", re.I), context()) is True

    def test_character_class_is_not_a_delimiter(self):
        assert compile_pattern("[abc]").pattern == "[abc]"
        assert compile_pattern("{abc}i").flags & re.IGNORECASE

    def test_unknown_modifier_reports_diagnostic(self, context):
        reported = []
        ctx = context(diagnose=lambda code, message: reported.append(code))

        assert check("match_regex", "abc", "/abc/D", ctx) is False
        assert reported == [DiagnosticCode.INVALID_PATTERN]

    def test_known_modifier_still_compiles(self):
        assert compile_pattern("/abc/im").flags & re.MULTILINE

    def test_invalid_pattern_reports_diagnostic(self, context):
        reported = []
        ctx = context(diagnose=lambda code, message: reported.append(code))

        assert check("match_regex", "abc", "(unclosed", ctx) is False
        assert reported == [DiagnosticCode.INVALID_PATTERN]


class TestLength:

    def test_min_length(self, context):
        assert check("min_length", "abcde", 5, context()) is True
        assert check("min_length", "abcd", 5, context()) is False
        assert check("min_length", "", None, context()) is True

    def test_max_length(self, context):
        assert check("max_length", "abc", 3, context()) is True
        assert check("max_length", "abcd", "3", context()) is False
        assert check("max_length", "x" * 10000, None, context()) is True

    def test_exact_length(self, context):
        assert check("exact_length", "12345", 5, context()) is True
        assert check("exact_length", "1234", 5, context()) is False
        assert check("exact_length", "", None, context()) is True

    def test_length_counts_characters(self, context):
        assert check("exact_length", "café", 4, context()) is True

    def test_missing_value_has_zero_length(self, context):
        assert check("max_length", None, 0, context()) is True


class TestNumeric:

    @pytest.mark.parametrize("value,expected", [
        ("42", True),
        ("-3.5", True),
        ("+.5", True),
        ("1e3", True),
        (" 12 ", True),
        (7, True),
        (2.5, True),
        ("12abc", False),
        ("", False),
        ("0x1A", False),
        (None, False),
        (True, False),
        ("٣٤", False),
        ("１２", False),
    ])
    def test_is_numeric(self, context, value, expected):
        assert check("is_numeric", value, context=context()) is expected

    def test_min_val(self, context):
        assert check("min_val", "18", 18, context()) is True
        assert check("min_val", "17.9", 18, context()) is False
        assert check("min_val", "1e3", "999", context()) is True

    def test_max_val(self, context):
        assert check("max_val", "100", 100, context()) is True
        assert check("max_val", "100.9", 100, context()) is True
        assert check("max_val", "101", 100, context()) is False

    def test_bounds_reject_non_ascii_digits(self, context):
        assert check("min_val", "٣٤", 10, context()) is False
        assert check("max_val", "٣٤", 100, context()) is False

    def test_bounds_reject_non_numeric(self, context):
        assert check("min_val", "abc", -100, context()) is False
        assert check("max_val", "abc", 100, context()) is False
        assert check("max_val", None, 100, context()) is False

    def test_is_int_checks_runtime_type(self, context):
        assert check("is_int", 42, context=context()) is True
        assert check("is_int", "42", context=context()) is False
        assert check("is_int", True, context=context()) is False

    def test_is_float_checks_runtime_type(self, context):
        assert check("is_float", 4.2, context=context()) is True
        assert check("is_float", "4.2", context=context()) is False


class TestNetwork:

    def test_valid_ip_v4_default(self, context):
        assert check("valid_ip", "192.168.0.1", context=context()) is True
        assert check("valid_ip", "256.1.1.1", context=context()) is False
        assert check("valid_ip", "::1", context=context()) is False

    def test_valid_ip_v6(self, context):
        assert check("valid_ip", "2001:db8::1", "v6", context()) is True
        assert check("valid_ip", "192.168.0.1", "v6", context()) is False

    def test_valid_ip_rejects_non_text(self, context):
        assert check("valid_ip", 3232235521, context=context()) is False

    def test_valid_uri(self, context):
        assert check("valid_uri", "https://mail.com/path?q=1", context=context()) is True
        assert check("valid_uri", "ftp://files.mail.com/a.txt", context=context()) is True
        assert check("valid_uri", "mail.com/path", context=context()) is False
        assert check("valid_uri", "not a url", context=context()) is False
        assert check("valid_uri", "", context=context()) is False

    def test_valid_email(self, context):
        assert check("valid_email", "jane.doe@mail.com", context=context()) is True
        assert check("valid_email", "jane.doe@", context=context()) is False
        assert check("valid_email", "not-an-email", context=context()) is False
        assert check("valid_email", None, context=context()) is False

    def test_valid_emails_comma_delimited(self, context):
        assert check("valid_emails", "a@b.com,c@d.com", context=context()) is True
        assert check("valid_emails", "a@b.com, c@d.com", context=context()) is True
        assert check("valid_emails", "a@b.com,bad", context=context()) is False

    def test_valid_emails_newline_delimited(self, context):
        assert check("valid_emails", "a@b.com\nb@c.com", context=context()) is True
        assert check("valid_emails", "a@b.com\r\nb@c.com", context=context()) is True

    def test_valid_emails_newline_wins_over_comma(self, context):
        assert check("valid_emails", "a@b.com,c@d.com\ne@f.com", context=context()) is False

    def test_valid_emails_empty(self, context):
        assert check("valid_emails", "", context=context()) is False
        assert check("valid_emails", "a@b.com,", context=context()) is False
