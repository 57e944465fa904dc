"""
Tests that log and console output is redacted in redaction mode.
"""

import io
import logging
import sys
from rich.console import Console
from loadboard.logs import RedactingFilter, SafeConsole, configure_logging


def _record(msg, *args, exc_info=None):
    return logging.LogRecord("loadboard.test", logging.INFO, __file__, 1, msg, args, exc_info)


def test_filter_redacts_formatted_message():
    record = _record("Company %s, call %s", "Acme", "555-123-4567")
    assert RedactingFilter().filter(record) is True
    assert record.getMessage() == "Company Acme, call [FILTERED]"


def test_filter_redacts_exception_text():
    try:
        raise ValueError("bad contact a@b.com")
    except ValueError:
        record = _record("failed", exc_info=sys.exc_info())

    RedactingFilter().filter(record)
    assert "a@b.com" not in record.exc_text
    assert "[FILTERED]" in record.exc_text


def test_configure_logging_redacts_every_line():
    buf = io.StringIO()
    logger = configure_logging("DEBUG", redact_output=True, console=Console(file=buf, width=200))

    logging.getLogger("loadboard.pipeline").info("Acme 555-123-4567 Logistics")
    logger.warning("reach ops@acme.com")

    output = buf.getvalue()
    assert "555-123-4567" not in output
    assert "ops@acme.com" not in output
    assert output.count("[FILTERED]") == 2


def test_configure_logging_without_redaction():
    buf = io.StringIO()
    configure_logging("INFO", redact_output=False, console=Console(file=buf, width=200))
    logging.getLogger("loadboard.pipeline").info("call 555-123-4567")
    assert "555-123-4567" in buf.getvalue()


def test_safe_console_redacts_strings():
    buf = io.StringIO()
    console = SafeConsole(Console(file=buf, width=200), redact_output=True)
    console.print("call 555-123-4567 or email a@b.com")
    assert "555" not in buf.getvalue()
    assert "a@b.com" not in buf.getvalue()
    assert console.clean("a@b.com") == "[FILTERED]"


def test_safe_console_passthrough():
    console = SafeConsole(Console(file=io.StringIO()), redact_output=False)
    assert console.clean("a@b.com") == "a@b.com"
