"""Pytest configuration and fixtures for formrules tests."""

import pytest

from formrules import CallbackRegistry, DiagnosticSink, MappingInput, ValidationSession
from formrules.config import Settings
from formrules.rules import RuleContext


class RecordingSink(DiagnosticSink):
    """Sink that keeps every (event, level, context) it receives."""

    def __init__(self):
        self.records = []

    def log(self, message, level, **context):
        self.records.append((message, level, context))

    def events(self):
        return [r[0] for r in self.records]


class BrokenSink(DiagnosticSink):
    """Sink that fails on every call."""

    def log(self, message, level, **context):
        raise RuntimeError("sink is down")


@pytest.fixture
def settings():
    """Settings isolated from the environment and any .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def callbacks(settings):
    """Private callback table so tests never touch the module singleton."""
    return CallbackRegistry(settings=settings)


@pytest.fixture
def make_session(sink, callbacks, settings):
    """Factory: make_session({"field": "value"}) -> ValidationSession."""
    def factory(data=None, **overrides):
        options = {"sink": sink, "callbacks": callbacks, "settings": settings}
        options.update(overrides)
        return ValidationSession(MappingInput(data), **options)
    return factory


@pytest.fixture
def context():
    """Factory for rule contexts over a dict of submitted values."""
    def factory(data=None, field="field", rule="rule", diagnose=None):
        return RuleContext(MappingInput(data), field, rule, diagnose=diagnose)
    return factory
