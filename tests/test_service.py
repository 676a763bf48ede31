import asyncio
import os
import re
from html import unescape
from urllib.parse import urlsplit

import pytest

from dirlist.http.model import HTTPRequest, HTTPResponse
from dirlist.http.parser import parseQuery
from dirlist.listing import Listing
from dirlist.model import Application
from dirlist.services import IndexService
from samples import MKV, MP4, TEXT


@pytest.fixture
def root(tmp_path):
    (tmp_path / "a.mp4").write_bytes(MP4)
    (tmp_path / "b.txt").write_bytes(TEXT)
    (tmp_path / "c d.mkv").write_bytes(MKV)
    return tmp_path


def get(app: Application, path: str, query: dict[str, str] | None = None, method: str = "GET") -> HTTPResponse:
    # Services receive the query already decoded by the parser
    return asyncio.run(app.process(HTTPRequest(method, path, query)))


def content(app: Application, path: str, method: str = "GET") -> HTTPResponse:
    return get(app, "/content/", {"path": path}, method)


def app_for(root, mimeFilter: str = "video", mode: str = "lexy") -> Application:
    return Application(IndexService(Listing.Make(root, mimeFilter, mode)))


def test_index_page(root):
    res = get(app_for(root), "/")
    assert res.status == 200
    assert res.header("Content-Type") == "text/html; charset=utf-8"
    page = res.payload.decode("utf8")
    assert page.startswith("<!DOCTYPE html>")
    assert f"<h3>{root}, with filter: video</h3>" in page
    assert "<tr><th>Name</th><th>Date</th></tr>" in page
    assert ">a.mp4</a>" in page
    assert ">c d.mkv</a>" in page
    assert "b.txt" not in page
    assert "color: hotpink" in page
    assert 'style="color:white;background:black"' in page
    assert int(res.header("Content-Length")) == len(res.payload)


def test_index_without_filter(root):
    page = get(app_for(root, ""), "/").payload.decode("utf8")
    assert f"<h3>{root}</h3>" in page
    assert "with filter" not in page
    assert ">b.txt</a>" in page


def test_index_is_a_snapshot(root):
    app = app_for(root)
    before = get(app, "/").payload
    (root / "e.mp4").write_bytes(MP4)
    assert get(app, "/").payload == before


@pytest.mark.parametrize("path", ["/index.html", "/some/where", "/content"])
def test_index_catch_all(root, path):
    app = app_for(root)
    assert get(app, path).payload == get(app, "/").payload


def test_head(root):
    app = app_for(root)
    res = get(app, "/", method="HEAD")
    assert res.status == 200
    assert res.headers == get(app, "/").headers
    res = content(app, str(root / "a.mp4"), method="HEAD")
    assert res.status == 200
    assert res.header("Content-Length") == str(len(MP4))


def test_content(root):
    app = app_for(root)
    for name in ("a.mp4", "b.txt", "c d.mkv"):
        res = content(app, os.path.join(str(root), name))
        assert res.status == 200
        assert res.payload == (root / name).read_bytes()
        assert res.header("Content-Type") is None
        assert res.header("Content-Length") == str(len(res.payload))


def test_content_outside_listing(root, tmp_path_factory):
    # Any readable file is served, listed or not
    other = tmp_path_factory.mktemp("other") / "secret.txt"
    other.write_bytes(b"not listed")
    assert content(app_for(root), str(other)).payload == b"not listed"


@pytest.mark.parametrize("name", ["missing.mp4", "", "."])
def test_content_not_found(root, name):
    res = content(app_for(root), os.path.join(str(root), name) if name else "")
    assert res.status == 404
    assert res.payload == b""
    assert res.header("Content-Type") is None
    assert res.header("Content-Length") == "0"


def test_content_without_path(root):
    app = app_for(root)
    for path, query in (("/content/", None), ("/content/whatever", None), ("/content/", {"other": "1"})):
        res = get(app, path, query)
        assert res.status == 404
        assert res.payload == b""


def test_content_nul_byte(root):
    res = content(app_for(root), f"{root}/a.mp4\x00")
    assert res.status == 404


def test_unsupported_method(root):
    res = get(app_for(root), "/", method="POST")
    assert res.status == 404


def test_undecodable_file_name(root):
    name = os.fsdecode(b"caf\xe9.mp4")
    (root / name).write_bytes(MP4)
    app = app_for(root)
    page = get(app, "/").payload.decode("utf8")
    assert ">caf\ufffd.mp4</a>" in page
    # The link leads back to the file
    (href,) = [
        unescape(_) for _ in re.findall(r'href="([^"]*)"', page) if "caf" in _
    ]
    url = urlsplit(href)
    path = parseQuery(url.query)["path"]
    assert os.fsencode(path) == os.path.join(os.fsencode(root), b"caf\xe9.mp4")
    res = get(app, url.path, parseQuery(url.query))
    assert res.status == 200
    assert res.payload == MP4


# EOF
