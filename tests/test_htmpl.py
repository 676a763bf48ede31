import pytest

from dirlist.utils.htmpl import H, html, raw


def test_text_is_escaped():
    assert str(H.td("<b>&co</b>")) == "<td>&lt;b&gt;&amp;co&lt;/b&gt;</td>"


def test_raw_is_kept():
    assert str(H.table(raw("<tr></tr>"))) == "<table><tr></tr></table>"


def test_attributes():
    assert str(H.a("x", href='/?q="a"&b', _="row")) == (
        '<a href="/?q=&quot;a&quot;&amp;b" class="row">x</a>'
    )
    assert str(H.meta(charset="utf-8")) == '<meta charset="utf-8">'
    assert str(H.td()) == "<td></td>"


def test_document():
    assert "".join(html(H.p("hi"), doctype="html")) == "<!DOCTYPE html>\n<p>hi</p>"


def test_unknown_tag():
    with pytest.raises(AttributeError):
        H.blink("nope")


# EOF
