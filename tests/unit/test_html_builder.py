"""
Unit tests for the standalone preview page.
"""
from mdtex.html_builder import build_error_page, build_page


class TestBuildPage:
    def test_fragment_embedded(self):
        page = build_page("<p>Hi</p>", "Doc")
        assert page.startswith("<!DOCTYPE html>")
        assert "<p>Hi</p>" in page
        assert "<title>Doc</title>" in page

    def test_title_escaped(self):
        assert "<title>a &lt;b&gt;</title>" in build_page("", "a <b>")


class TestBuildErrorPage:
    def test_message_escaped_above_previous(self):
        page = build_error_page("Unknown macro: <x>", "<p>Old</p>")
        assert "Error: Unknown macro: &lt;x&gt;" in page
        assert page.index("mdtex-error") < page.index("<p>Old</p>")

    def test_without_previous(self):
        assert "Error: boom" in build_error_page("boom")
