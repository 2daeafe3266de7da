"""Validation session: registers fields, attaches rule chains, evaluates a submission.

This is the main entry point. One session per validation task (typically one
per request); it is never shared between tasks.

Usage:
    session = ValidationSession(MappingInput(form))
    session.register("username", "Username") \\
        .rule("required") \\
        .rule("min_length", 5) \\
        .rule("max_length", 20) \\
        .rule("custom", "Accounts.unique_username")

    if not session.validate():
        print(session.message("username"))

Evaluation is fail-fast within a field (the first failing rule stops that
field's chain) but every registered field is evaluated. Nothing is raised to
the caller: registration problems and evaluation problems become diagnostics.
"""

import time
from types import MappingProxyType
from typing import Any, Mapping, Optional

import structlog

from formrules.callbacks import CallbackRegistry, callback_registry
from formrules.config import Settings, get_settings
from formrules.diagnostics import DiagnosticSink, StructlogSink
from formrules.inputs import InputSource
from formrules.models import CODE_SEVERITY, Diagnostic, DiagnosticCode, FieldSpec, ValidationReport
from formrules.rules import CUSTOM_RULE, BaseRule, RuleContext, RuleRegistry, render_message, rule_registry

logger = structlog.get_logger()

# Used when a rule's own template cannot be rendered
FALLBACK_TEMPLATE = "%s is invalid"

# Event names emitted to the sink for each diagnostic code
DIAGNOSTIC_EVENTS = {
    DiagnosticCode.DUPLICATE_FIELD: "field_already_registered",
    DiagnosticCode.UNKNOWN_RULE: "rule_unknown",
    DiagnosticCode.RULE_WITHOUT_FIELD: "rule_without_field",
    DiagnosticCode.UNRESOLVED_CALLBACK: "unresolved_callback",
    DiagnosticCode.MALFORMED_CALLBACK: "malformed_callback",
    DiagnosticCode.RULE_CRASHED: "rule_crashed",
    DiagnosticCode.INVALID_PATTERN: "invalid_pattern",
}


class ValidationSession:
    """Builder and evaluator for one submission.

    Design principles:
        - Chainable: register() and rule() return the session
        - Deterministic: same input -> same result, validate() is repeatable
        - Never raises: problems surface as diagnostics and failed fields
    """

    def __init__(
        self,
        source: InputSource,
        *,
        sink: Optional[DiagnosticSink] = None,
        registry: Optional[RuleRegistry] = None,
        callbacks: Optional[CallbackRegistry] = None,
        settings: Optional[Settings] = None,
    ):
        """Initialize an empty session.

        Args:
            source: Where submitted values are read from
            sink: Diagnostic sink. If None, diagnostics go to structlog.
            registry: Rule table. If None, uses the built-in registry.
            callbacks: Custom callback table. If None, uses the module singleton.
            settings: Engine settings. If None, uses get_settings().
        """
        self.source = source
        self.sink = sink or StructlogSink()
        self.registry = registry or rule_registry
        self.callbacks = callbacks or callback_registry
        self.settings = settings or get_settings()

        self._fields: dict[str, FieldSpec] = {}
        self._cursor: Optional[str] = None
        self._values: dict[str, Any] = {}
        self._messages: dict[str, str] = {}
        self._failed: list[str] = []
        self._passed = False
        self.diagnostics: list[Diagnostic] = []

    # ── Builder ──

    def register(self, key: str, label: Optional[str] = None) -> "ValidationSession":
        """Register a field and make it the target of subsequent rule() calls.

        Re-registering a key keeps the original field and does not move the
        cursor, so later rule() calls still attach to the last new field.
        """
        if key in self._fields:
            self._diagnose(
                DiagnosticCode.DUPLICATE_FIELD,
                f"{key} has already been registered for validation",
                field=key,
            )
            return self

        self._fields[key] = FieldSpec(key=key, label=label)
        self._cursor = key
        return self

    def rule(self, name: str, param: Any = None) -> "ValidationSession":
        """Attach a rule to the most recently registered field."""
        if name not in self.registry:
            self._diagnose(
                DiagnosticCode.UNKNOWN_RULE,
                f"Rule '{name}' does not exist, ignoring",
                field=self._cursor,
                rule=name,
            )
            return self

        if self._cursor is None:
            self._diagnose(
                DiagnosticCode.RULE_WITHOUT_FIELD,
                f"Rule '{name}' added before any field was registered, ignoring",
                rule=name,
            )
            return self

        if name == CUSTOM_RULE and self.callbacks.resolve(param) is None:
            # Kept anyway: evaluation fails closed for this field
            self._diagnose(
                DiagnosticCode.UNRESOLVED_CALLBACK,
                f"Validation callback {param!r} cannot be resolved",
                field=self._cursor,
                rule=name,
            )

        self._fields[self._cursor].set_rule(name, param)
        return self

    # ── Evaluation ──

    def validate(self) -> bool:
        """Evaluate every registered field against the Input Source.

        Returns:
            True only if a submission was made and every field passed
        """
        self._values = {}
        self._messages = {}
        self._failed = []
        self._passed = False

        if not self.source.submitted():
            return False

        start_time = time.perf_counter()
        valid = True

        for key, spec in self._fields.items():
            value = self.source.post(key)
            self._values[key] = value

            if not self._evaluate_field(spec, value):
                valid = False
                self._failed.append(key)

        self._passed = valid

        logger.info(
            "validation_complete",
            passed=valid,
            fields=len(self._fields),
            failed_fields=self._failed,
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )

        return valid

    def _evaluate_field(self, spec: FieldSpec, value: Any) -> bool:
        """Run one field's chain, stopping at the first failure."""
        for name, param in spec.chain:
            if name == CUSTOM_RULE:
                passed, message = self._run_custom(spec.key, value, param)
                if not passed:
                    if message is not None:
                        self._messages[spec.key] = message
                    return False
                continue

            rule = self.registry.get(name)
            context = RuleContext(
                self.source,
                spec.key,
                name,
                diagnose=lambda code, msg, key=spec.key, rule_name=name: self._diagnose(
                    code, msg, field=key, rule=rule_name
                ),
            )
            try:
                passed = rule is not None and rule.evaluate(value, param, context)
            except Exception as e:
                self._diagnose(
                    DiagnosticCode.RULE_CRASHED,
                    f"Rule '{name}' crashed on field '{spec.key}': {e}",
                    field=spec.key,
                    rule=name,
                )
                passed = False

            if not passed:
                if rule is not None:
                    self._messages[spec.key] = self._render(rule, spec, param)
                return False

        return True

    def _run_custom(self, key: str, value: Any, ref: Any) -> tuple[bool, Optional[str]]:
        """Resolve and run a custom callback. Fails closed with no message."""
        func = self.callbacks.resolve(ref)
        if func is None:
            self._diagnose(
                DiagnosticCode.MALFORMED_CALLBACK,
                f"Validation callback function {ref!r} was not found",
                field=key,
                rule=CUSTOM_RULE,
            )
            return False, None

        try:
            return self.callbacks.run(func, value)
        except Exception as e:
            self._diagnose(
                DiagnosticCode.RULE_CRASHED,
                f"Validation callback {ref!r} crashed on field '{key}': {e}",
                field=key,
                rule=CUSTOM_RULE,
            )
            return False, None

    def _render(self, rule: BaseRule, spec: FieldSpec, param: Any) -> str:
        """Failure message for a built-in rule, falling back to a generic one if rendering fails."""
        label = self._label(spec)
        try:
            return rule.render(label, param)
        except Exception as e:
            self._diagnose(
                DiagnosticCode.RULE_CRASHED,
                f"Message for rule '{rule.name}' on field '{spec.key}' could not be rendered: {e}",
                field=spec.key,
                rule=rule.name,
            )
            return render_message(FALLBACK_TEMPLATE, label, param)

    def _label(self, spec: FieldSpec) -> Optional[str]:
        if spec.label is None and self.settings.LABEL_FALLBACK_TO_KEY:
            return spec.key
        return spec.label

    # ── Results ──

    def message(self, key: str) -> str:
        """Failure message for key, or '' if the field passed or never ran."""
        return self._messages.get(key, "")

    def value(self, key: str) -> Any:
        """Value fetched for key during validate(), or None."""
        return self._values.get(key)

    @property
    def fields(self) -> Mapping[str, FieldSpec]:
        return MappingProxyType(self._fields)

    @property
    def values(self) -> Mapping[str, Any]:
        return MappingProxyType(self._values)

    @property
    def messages(self) -> Mapping[str, str]:
        return MappingProxyType(self._messages)

    @property
    def cursor(self) -> Optional[str]:
        """Key that rule() currently attaches to."""
        return self._cursor

    def report(self) -> ValidationReport:
        """Snapshot of the last validate() run."""
        return ValidationReport.build(
            passed=self._passed,
            values=self._values,
            messages=self._messages,
            failed_fields=self._failed,
            diagnostics=self.diagnostics,
        )

    # ── Diagnostics ──

    def _diagnose(
        self,
        code: DiagnosticCode,
        message: str,
        field: Optional[str] = None,
        rule: Optional[str] = None,
    ) -> None:
        severity = CODE_SEVERITY[code]
        self.diagnostics.append(Diagnostic(
            code=code,
            severity=severity,
            message=message,
            field=field,
            rule=rule,
        ))
        try:
            self.sink.log(
                DIAGNOSTIC_EVENTS[code],
                severity,
                detail=message,
                field=field,
                rule=rule,
            )
        except Exception:
            # Sink failures never reach the caller
            return
