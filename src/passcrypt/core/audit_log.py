# Audit logging for cipher operations.
#
# Every encrypt/decrypt outcome is emitted as a structured JSON event so a
# caller-side boundary can trace secret access without the core swallowing
# any failure. Events carry lengths and outcomes only: never passwords,
# derived keys or plaintext.

import logging
import os
import socket
import sys
import threading
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional
from uuid import uuid4

import structlog

AUDIT_LOGGER_NAME = "passcrypt.audit"


class CipherEventType(str, Enum):
    """Types of cipher events that can be logged."""
    ENCRYPTED = "cipher.encrypted"
    DECRYPTED = "cipher.decrypted"
    DECRYPT_FAILED = "cipher.decrypt.failed"
    MALFORMED_INPUT = "cipher.input.malformed"
    INVALID_ARGUMENT = "cipher.argument.invalid"

    CONVERSION_FAILED = "codec.conversion.failed"


class EventSeverity(str, Enum):
    """
    Severity levels for cipher events.

    - INFO: normal operation, logged only
    - WARNING: caller error (bad argument, malformed blob)
    - ALERT: decryption rejected, usually a wrong password or tampering
    """
    INFO = "info"
    WARNING = "warning"
    ALERT = "alert"

    def to_log_level(self) -> int:
        """Map severity to the stdlib logging level used when emitting."""
        level_map = {
            EventSeverity.INFO: logging.INFO,
            EventSeverity.WARNING: logging.WARNING,
            EventSeverity.ALERT: logging.ERROR,
        }
        return level_map[self]


_DEFAULT_SEVERITY = {
    CipherEventType.ENCRYPTED: EventSeverity.INFO,
    CipherEventType.DECRYPTED: EventSeverity.INFO,
    CipherEventType.DECRYPT_FAILED: EventSeverity.ALERT,
    CipherEventType.MALFORMED_INPUT: EventSeverity.WARNING,
    CipherEventType.INVALID_ARGUMENT: EventSeverity.WARNING,
    CipherEventType.CONVERSION_FAILED: EventSeverity.WARNING,
}


class AuditLogger:
    """
    Append-only audit logger for cipher events.

    Features:
    - Structured JSON logging through structlog
    - Automatic timestamp and event ID
    - Host/process context capture
    - Optional daily log file when ``log_dir`` is given
    """

    def __init__(self, log_dir: Optional[Path] = None):
        """
        Initialize audit logger.

        Args:
            log_dir: Directory for daily audit log files. When None, events
                only flow through the standard logging tree.
        """
        self.log_dir = Path(log_dir) if log_dir is not None else None
        self._file_handler: Optional[logging.Handler] = None

        # Processors are bound to this logger only; the host application's
        # structlog configuration is left untouched.
        self.logger = structlog.wrap_logger(
            logging.getLogger(AUDIT_LOGGER_NAME),
            processors=[
                structlog.stdlib.add_log_level,
                structlog.stdlib.add_logger_name,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer()
            ],
            wrapper_class=structlog.stdlib.BoundLogger,
            context_class=dict,
        )

        if self.log_dir is not None:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            self._setup_file_handler()

    def _setup_file_handler(self):
        """Attach a file handler for today's log to the audit logger."""
        today = datetime.now().strftime("%Y-%m-%d")
        log_file = self.log_dir / f"audit_{today}.log"

        file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(logging.Formatter('%(message)s'))  # structlog handles formatting

        std_logger = logging.getLogger(AUDIT_LOGGER_NAME)
        std_logger.addHandler(file_handler)
        if std_logger.level == logging.NOTSET or std_logger.level > logging.INFO:
            std_logger.setLevel(logging.INFO)
        self._file_handler = file_handler

    def close(self):
        """Detach and close the file handler, if any."""
        if self._file_handler is not None:
            logging.getLogger(AUDIT_LOGGER_NAME).removeHandler(self._file_handler)
            self._file_handler.close()
            self._file_handler = None

    def log_event(
        self,
        event_type: CipherEventType,
        severity: EventSeverity,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> str:
        """
        Log a cipher event.

        Args:
            event_type: Type of event (from CipherEventType enum)
            severity: Severity level (from EventSeverity enum)
            message: Human-readable event description
            details: Additional event details (never secrets)

        Returns:
            str: Event ID (UUID) for reference
        """
        event_id = str(uuid4())

        event_data = {
            "event_id": event_id,
            "event_type": event_type.value,
            "severity": severity.value,
            "message": message,
            "details": details or {},
            "context": self._get_default_context(),
        }

        self.logger.log(severity.to_log_level(), "cipher_event", **event_data)

        return event_id

    def log_cipher_event(
        self,
        event_type: CipherEventType,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Log a cipher event at the default severity for its type."""
        return self.log_event(
            event_type=event_type,
            severity=_DEFAULT_SEVERITY[event_type],
            message=message,
            details=details,
        )

    def _get_default_context(self) -> Dict[str, Any]:
        """Get default context (OS user, hostname, pid)."""
        return {
            "os_user": os.getenv("USERNAME") or os.getenv("USER"),
            "hostname": socket.gethostname(),
            "pid": os.getpid(),
            "platform": sys.platform,
        }


# Global logger instance
_audit_logger: Optional[AuditLogger] = None
_audit_logger_lock = threading.Lock()


def get_audit_logger() -> AuditLogger:
    """Get global audit logger (singleton pattern, safe across threads)."""
    global _audit_logger
    if _audit_logger is None:
        with _audit_logger_lock:
            if _audit_logger is None:
                _audit_logger = AuditLogger()
    return _audit_logger


def log_cipher_event(
    event_type: CipherEventType,
    message: str,
    **kwargs
) -> str:
    """
    Convenience function for logging cipher events.

    Usage:
        log_cipher_event(
            CipherEventType.DECRYPT_FAILED,
            "Padding check failed",
            details={"blob_length": 64}
        )
    """
    return get_audit_logger().log_cipher_event(event_type, message, **kwargs)
