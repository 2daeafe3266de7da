"""Validation models: diagnostic codes, field specs, and the per-run report.

Diagnostics are data, not exceptions. Nothing in the engine raises to the
caller; problems are recorded here and forwarded to the diagnostic sink.
"""

from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field


class Severity(str, Enum):
    """Diagnostic severity levels (also the structlog method names)."""

    WARNING = "warning"  # Registration problem, call ignored
    ERROR = "error"      # Evaluation problem, field forced invalid


class DiagnosticCode(str, Enum):
    """Deterministic codes for every non-fatal engine problem.

    Naming convention: SUBJECT_PROBLEM
    """

    # Registration
    DUPLICATE_FIELD = "DUPLICATE_FIELD"
    UNKNOWN_RULE = "UNKNOWN_RULE"
    RULE_WITHOUT_FIELD = "RULE_WITHOUT_FIELD"
    UNRESOLVED_CALLBACK = "UNRESOLVED_CALLBACK"

    # Evaluation
    MALFORMED_CALLBACK = "MALFORMED_CALLBACK"
    RULE_CRASHED = "RULE_CRASHED"
    INVALID_PATTERN = "INVALID_PATTERN"


# Severity each code is reported at
CODE_SEVERITY = {
    DiagnosticCode.DUPLICATE_FIELD: Severity.WARNING,
    DiagnosticCode.UNKNOWN_RULE: Severity.WARNING,
    DiagnosticCode.RULE_WITHOUT_FIELD: Severity.WARNING,
    DiagnosticCode.UNRESOLVED_CALLBACK: Severity.WARNING,
    DiagnosticCode.MALFORMED_CALLBACK: Severity.ERROR,
    DiagnosticCode.RULE_CRASHED: Severity.ERROR,
    DiagnosticCode.INVALID_PATTERN: Severity.ERROR,
}


class Diagnostic(BaseModel):
    """A single engine diagnostic."""

    code: DiagnosticCode
    severity: Severity
    message: str
    field: Optional[str] = None  # Field key the problem belongs to
    rule: Optional[str] = None   # Rule name involved, if any

    class Config:
        use_enum_values = True


class FieldSpec(BaseModel):
    """One registered validation target and its ordered rule chain."""

    key: str
    label: Optional[str] = None
    rules: dict[str, Any] = Field(
        default_factory=dict,
        description="Rule name -> parameter, in evaluation order",
    )

    def set_rule(self, name: str, param: Any = None) -> None:
        """Attach a rule. Re-adding a name overwrites its parameter in place."""
        self.rules[name] = param

    @property
    def chain(self) -> list[tuple[str, Any]]:
        return list(self.rules.items())


class ValidationReport(BaseModel):
    """Snapshot of one validate() run."""

    passed: bool
    values: dict[str, Any] = Field(default_factory=dict)
    messages: dict[str, str] = Field(default_factory=dict)
    failed_fields: list[str] = Field(default_factory=list)
    diagnostics: list[Diagnostic] = Field(default_factory=list)

    @classmethod
    def build(
        cls,
        passed: bool,
        values: dict[str, Any],
        messages: dict[str, str],
        failed_fields: list[str],
        diagnostics: list[Diagnostic],
    ) -> "ValidationReport":
        """Build a report from session state, copying every container."""
        return cls(
            passed=passed,
            values=dict(values),
            messages=dict(messages),
            failed_fields=list(failed_fields),
            diagnostics=list(diagnostics),
        )
