import io

from dirlist.utils import logging
from dirlist.utils.logging import LogLevel, entry, formatData, parseLevel, send


def test_parse_level():
    assert parseLevel("debug") is LogLevel.Debug
    assert parseLevel(" WARNING ") is LogLevel.Warning
    assert parseLevel("chatty") is LogLevel.Info
    assert parseLevel(None, LogLevel.Error) is LogLevel.Error


def test_format_data():
    assert formatData(None) == "◌"
    assert formatData("with space") == "'with space'"
    assert formatData(True) == "✓"
    assert formatData(1.5) == "1.50"
    assert formatData([1, "a"]) == "1,a"


def test_send_context():
    out = io.StringIO()
    send(entry(message="Scanned directory", context={"Entries": 3}), out)
    line = out.getvalue()
    assert "[dirlist]" in line
    assert "Scanned directory" in line
    assert "Entries" in line and "=3" in line
    assert line.endswith("\n")


def test_send_respects_level(monkeypatch):
    monkeypatch.setattr(logging, "LEVEL", LogLevel.Warning)
    out = io.StringIO()
    send(entry(message="hidden", level=LogLevel.Info, context={}), out)
    send(entry(message="shown", level=LogLevel.Error, context={}), out)
    assert "hidden" not in out.getvalue()
    assert "shown" in out.getvalue()
    assert not logging.logged(LogLevel.Debug)


def test_error_code():
    res = logging.error("Unable to bind", "BINDERR", Reason="in use")
    assert res.level is LogLevel.Error
    assert res.context == {"Code": "BINDERR", "Reason": "in use"}


# EOF
