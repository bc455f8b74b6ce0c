"""Unit tests for the diagnostic stream."""

import logging

import pytest

from mage import DiagnosticFormat, DiagnosticLogger, Grimoire, MageConfig


class TestDiagnosticLogger:
    """Test debug and alert output."""

    def test_disabled_by_default(self):
        """Test nothing is written while debugging is off."""
        diagnostics = DiagnosticLogger(to_stdout=False)
        diagnostics.debug("override", "something happened")
        assert diagnostics.stream.recent() == []

    def test_enable_is_one_way(self):
        """Test enabling writes the ON line and cannot be undone."""
        diagnostics = DiagnosticLogger(to_stdout=False)
        diagnostics.enable()
        diagnostics.enable()

        assert diagnostics.enabled is True
        assert diagnostics.lines() == ["[debug] Gnosis Mage debugging ON"]
        assert not hasattr(diagnostics, "disable")

    def test_lines_are_prefixed(self):
        """Test the debug marker prefix."""
        diagnostics = DiagnosticLogger(enabled=True, prefix="[mage]", to_stdout=False)
        diagnostics.debug("create", "Conjured new subroutine 'x' in 'app'")
        assert diagnostics.lines()[-1] == "[mage] Conjured new subroutine 'x' in 'app'"

    def test_stdout_output(self, capsys):
        """Test lines are written to stdout."""
        diagnostics = DiagnosticLogger(enabled=True)
        diagnostics.debug("restore", "Restores sub app.x")
        diagnostics.alert("app", "x called", function="x")

        out = capsys.readouterr().out.splitlines()
        assert out == [
            "[debug] Gnosis Mage debugging ON",
            "[debug] Restores sub app.x",
            "[app] x called",
        ]

    def test_caplog_sees_debug_lines(self, caplog):
        """Test lines propagate to standard logging."""
        diagnostics = DiagnosticLogger(enabled=True, to_stdout=False)
        with caplog.at_level(logging.DEBUG, logger="mage.debug"):
            diagnostics.debug("override", "Override called")
        assert "[debug] Override called" in caplog.messages

    def test_structured_format(self):
        """Test structured output as key=value pairs."""
        diagnostics = DiagnosticLogger(enabled=True, format="structured", to_stdout=False)
        entry = {"type": "debug", "event": "override", "message": "hi"}
        assert diagnostics._format(entry) == "[debug] type=debug event=override message=hi"
        assert diagnostics.format == DiagnosticFormat.STRUCTURED

    def test_alerts_always_written(self):
        """Test alerts do not depend on the debug flag."""
        diagnostics = DiagnosticLogger(to_stdout=False)
        diagnostics.alert("shop", "checkout called", function="checkout")
        assert diagnostics.lines("alert") == ["[shop] checkout called"]
        assert diagnostics.lines() == []

    def test_subscribers(self):
        """Test subscribers receive entries."""
        received = []
        diagnostics = DiagnosticLogger(to_stdout=False)
        diagnostics.stream.subscribe(received.append)
        diagnostics.alert("shop", "checkout called")
        diagnostics.stream.unsubscribe(received.append)
        diagnostics.alert("shop", "refund called")

        assert [e["message"] for e in received] == ["checkout called"]

    def test_buffer_is_bounded(self):
        """Test old entries drop out of the buffer."""
        diagnostics = DiagnosticLogger(to_stdout=False, buffer_size=2)
        for i in range(5):
            diagnostics.alert("app", f"call {i}")
        assert [e["message"] for e in diagnostics.stream.recent()] == ["call 3", "call 4"]

    def test_invalid_format(self):
        """Test an unknown format is rejected."""
        with pytest.raises(ValueError):
            DiagnosticLogger(format="xml")

    def test_invalid_level(self):
        """Test an unknown level name is rejected."""
        with pytest.raises(ValueError, match="Unknown log level"):
            DiagnosticLogger(level="LOUD", to_stdout=False)

    def test_loggers_are_independent(self, capsys):
        """Test a second logger does not silence the first."""
        first = DiagnosticLogger(enabled=True)
        second = DiagnosticLogger(enabled=True, to_stdout=False)

        first.debug("create", "Conjured new subroutine 'a' in 'app'")
        second.debug("create", "Conjured new subroutine 'b' in 'app'")

        out = capsys.readouterr().out
        assert "[debug] Conjured new subroutine 'a' in 'app'" in out
        assert "'b'" not in out
        assert first.logger is not second.logger


class TestGrimoireDiagnostics:
    """Test the events operations write."""

    def test_grimoires_keep_their_output(self, capsys):
        """Test creating another grimoire leaves the first one's output alone."""
        loud = Grimoire(config=MageConfig(debug=True))
        Grimoire(config=MageConfig(log_to_stdout=False))

        loud.create("app", "greet", lambda: "Hello")
        assert "Conjured" in capsys.readouterr().out

    def test_operation_events(self, debug_grimoire):
        """Test create, override, hooks and restore are logged."""
        debug_grimoire.create("app", "greet", lambda: "Hello")
        debug_grimoire.override("app", "greet", lambda: "Goodbye")
        debug_grimoire.before("app", "greet", lambda: None)
        debug_grimoire.restore("app", "greet")

        events = [e["event"] for e in debug_grimoire.diagnostics.stream.recent(type="debug")]
        assert events == ["debug_on", "create", "override", "capture", "before", "restore"]

    def test_nothing_logged_without_debug(self, grimoire):
        """Test a grimoire without debug records no debug entries."""
        grimoire.create("app", "greet", lambda: "Hello")
        grimoire.override("app", "greet", lambda: "Goodbye")
        assert grimoire.diagnostics.stream.recent(type="debug") == []
