"""
Shared pytest fixtures for the passcrypt test suite.

Autouse fixtures below isolate tests from process-wide state:
  - Audit logger -> fresh singleton per test (no file handler)
  - Environment  -> PASSCRYPT_* variables removed
"""

import pytest


@pytest.fixture(autouse=True)
def _isolate_audit_logger():
    """Reset the global AuditLogger singleton for every test.

    Without this, a logger configured with a log_dir in one test would keep
    writing into that test's temp directory for the rest of the session.
    """
    import passcrypt.core.audit_log as audit_mod

    old_logger = audit_mod._audit_logger
    audit_mod._audit_logger = None

    yield

    if audit_mod._audit_logger is not None:
        audit_mod._audit_logger.close()
    audit_mod._audit_logger = old_logger


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Drop PASSCRYPT_* variables so settings tests start from a clean slate."""
    from passcrypt.settings import ENV_ENCRYPTION_PASSWORD, ENV_MASTER_PASSWORD

    monkeypatch.delenv(ENV_ENCRYPTION_PASSWORD, raising=False)
    monkeypatch.delenv(ENV_MASTER_PASSWORD, raising=False)


@pytest.fixture
def audit_events(monkeypatch):
    """Record every audit event instead of emitting it.

    Returns a list of (event_type, severity, message, details) tuples.
    """
    from passcrypt.core.audit_log import AuditLogger

    events = []

    def recording_log_event(self, event_type, severity, message, details=None):
        events.append((event_type, severity, message, details or {}))
        return "test-event-id"

    monkeypatch.setattr(AuditLogger, "log_event", recording_log_event)
    return events
