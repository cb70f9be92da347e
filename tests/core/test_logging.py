"""Tests for structured logging."""

import json
import logging
import sys

from app.core.logging import (
    ContextFilter,
    JSONFormatter,
    LogContext,
    TextFormatter,
    configure_logging,
    get_logger,
)


def _record(msg: str = "Test message", level: int = logging.INFO) -> logging.LogRecord:
    return logging.LogRecord(
        name="test",
        level=level,
        pathname="test.py",
        lineno=10,
        msg=msg,
        args=(),
        exc_info=None,
    )


class TestJSONFormatter:
    """Tests for JSON log formatter."""
    
    def test_format_basic_message(self):
        """Basic message is formatted as JSON."""
        data = json.loads(JSONFormatter().format(_record()))
        
        assert data["level"] == "INFO"
        assert data["logger"] == "test"
        assert data["message"] == "Test message"
        assert "timestamp" in data
    
    def test_format_with_exception(self):
        """JSON includes exception info."""
        try:
            raise ValueError("Test error")
        except ValueError:
            exc_info = sys.exc_info()
        
        record = _record("Error occurred", logging.ERROR)
        record.exc_info = exc_info
        data = json.loads(JSONFormatter().format(record))
        
        assert "ValueError" in data["exception"]
    
    def test_format_with_extra_fields(self):
        """JSON includes extra fields."""
        record = _record()
        record.scope = "board:1"
        
        data = json.loads(JSONFormatter().format(record))
        
        assert data["scope"] == "board:1"


class TestTextFormatter:
    """Tests for text formatter."""
    
    def test_format_readable(self):
        """Text format is human-readable."""
        output = TextFormatter().format(_record("Hello world"))
        
        assert "INFO" in output
        assert "test" in output
        assert "Hello world" in output
    
    def test_appends_context(self):
        """Context fields are appended as key=value."""
        with LogContext(scope="board:1"):
            output = TextFormatter().format(_record())
        
        assert output.endswith("| scope=board:1")


class TestLogContext:
    """Tests for LogContext and ContextFilter."""
    
    def test_fields_scoped_to_block(self):
        """Fields exist only inside the context."""
        with LogContext(scope="a"):
            assert LogContext.current() == {"scope": "a"}
        
        assert LogContext.current() == {}
    
    def test_nested_contexts_restore(self):
        """Inner values are restored on exit."""
        with LogContext(scope="outer"):
            with LogContext(scope="inner"):
                assert LogContext.current()["scope"] == "inner"
            assert LogContext.current()["scope"] == "outer"
    
    def test_filter_copies_fields(self):
        """ContextFilter puts context fields on records."""
        record = _record()
        
        with LogContext(scope="board:7"):
            assert ContextFilter().filter(record) is True
        
        assert record.scope == "board:7"
    
    def test_filter_keeps_explicit_extras(self):
        """Explicit extras win over context fields."""
        record = _record()
        record.scope = "explicit"
        
        with LogContext(scope="context"):
            ContextFilter().filter(record)
        
        assert record.scope == "explicit"


class TestConfigureLogging:
    """Tests for configure_logging."""
    
    def test_configure_json(self):
        """JSON format installs a JSON formatter with the context filter."""
        configure_logging(level="DEBUG", format_type="json")
        
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[0].formatter, JSONFormatter)
        assert any(isinstance(f, ContextFilter) for f in root.handlers[0].filters)
    
    def test_configure_text(self):
        """Text format installs the text formatter."""
        configure_logging(level="WARNING", format_type="text")
        
        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert isinstance(root.handlers[0].formatter, TextFormatter)
    
    def test_get_logger(self):
        """get_logger returns a named logger."""
        assert get_logger("app.test").name == "app.test"
