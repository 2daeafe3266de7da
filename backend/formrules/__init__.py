"""formrules: rule-based input validation for submitted form data.

Usage:
    from formrules import ValidationSession, MappingInput

    session = ValidationSession(MappingInput({"email": "jane@mail.com"}))
    session.register("email", "Email").rule("required").rule("valid_email")
    if not session.validate():
        # Render session.message("email") next to the field
"""

from formrules.session import ValidationSession
from formrules.inputs import InputSource, MappingInput, RequestInput, request_input
from formrules.callbacks import CallbackRegistry, callback_registry
from formrules.diagnostics import DiagnosticSink, StructlogSink, configure_logging
from formrules.models import Diagnostic, DiagnosticCode, FieldSpec, Severity, ValidationReport
from formrules.rules import BaseRule, RuleRegistry, rule_registry

__all__ = [
    "ValidationSession",
    "InputSource",
    "MappingInput",
    "RequestInput",
    "request_input",
    "CallbackRegistry",
    "callback_registry",
    "DiagnosticSink",
    "StructlogSink",
    "configure_logging",
    "Diagnostic",
    "DiagnosticCode",
    "FieldSpec",
    "Severity",
    "ValidationReport",
    "BaseRule",
    "RuleRegistry",
    "rule_registry",
]
