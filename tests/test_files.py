import pytest

from dirlist.utils.files import (
    BINARY_TYPE,
    TEXT_TYPE,
    MPEGTransportStream,
    contentType,
    isText,
)
from samples import BINARY, MKV, MP4, MPEG_TS, TEXT


@pytest.mark.parametrize(
    "name,data,expected",
    [
        ("clip.bin", MP4, "video/mp4"),
        ("movie", MKV, "video/x-matroska"),
        ("broadcast.dat", MPEG_TS, "video/mp2t"),
        ("notes.mp4", TEXT, "text/plain; charset=utf-8"),
        ("blob.txt", BINARY, BINARY_TYPE),
    ],
)
def test_content_type_ignores_extension(tmp_path, name, data, expected):
    path = tmp_path / name
    path.write_bytes(data)
    assert contentType(path) == expected


def test_text_type_has_charset(tmp_path):
    path = tmp_path / "notes"
    path.write_bytes(TEXT)
    assert "charset" in contentType(path)
    assert "video" not in contentType(path)


def test_empty_file_is_text(tmp_path):
    path = tmp_path / "empty"
    path.write_bytes(b"")
    assert contentType(path) == TEXT_TYPE


def test_unreadable_raises(tmp_path):
    with pytest.raises(OSError):
        contentType(tmp_path / "missing")
    # Directories can't be opened as files either
    with pytest.raises(OSError):
        contentType(tmp_path)


def test_mpeg_ts_needs_packets_in_sync():
    kind = MPEGTransportStream()
    assert kind.match(MPEG_TS)
    assert kind.match(MPEG_TS[: 188 * 2])
    # A single packet is not enough to tell
    assert not kind.match(MPEG_TS[:188])
    assert not kind.match(MPEG_TS[:188] + b"\x00" * 188)
    assert not kind.match(b"G" + b"\x00" * 1_000)


def test_is_text_tolerates_cut_sequence():
    data = "café".encode("utf8")
    assert isText(data)
    assert isText(data[:-1])
    assert not isText(b"\xff\xfe\xfa garbage")
    assert not isText(b"abc\x00def")


# EOF
