"""
Unit tests for the line-oriented block transformer.

Tests mdtex/encoder/blocks.py: heading levels, list grouping and
paragraph handling.
"""
import pytest

from mdtex.encoder.blocks import (
    LIST_CLOSE,
    LIST_OPEN,
    Blank,
    Heading,
    ListItem,
    Paragraph,
    classify_line,
    transform_blocks,
)


class TestClassifyLine:
    """Test classification of single lines."""

    def test_blank(self):
        assert classify_line("   ") == Blank()

    def test_heading_levels(self):
        assert classify_line("## Title ") == Heading(level=2, text="Title")

    def test_heading_without_space(self):
        assert classify_line("#Title") == Heading(level=1, text="Title")

    def test_list_item_indented(self):
        assert classify_line("   - item") == ListItem("item")

    def test_dash_without_space_is_paragraph(self):
        assert classify_line("-item") == Paragraph("-item")


class TestHeadings:
    """Test heading commands."""

    @pytest.mark.parametrize(
        "line, expected",
        [
            ("# One", r"\section*{One}"),
            ("## Two", r"\subsection*{Two}"),
            ("### Three", r"\subsubsection*{Three}"),
            ("###### Six", r"\subsubsection*{Six}"),
        ],
    )
    def test_heading_command(self, line, expected):
        assert transform_blocks(line) == expected

    def test_heading_text_formatted(self):
        assert transform_blocks("# **Big** & bold") == r"\section*{\textbf{Big} \& bold}"


class TestLists:
    """Test grouping of consecutive list items."""

    def test_consecutive_items_share_environment(self):
        result = transform_blocks("- a\n- b")
        assert result == f"{LIST_OPEN}\n  \\item a\n  \\item b\n{LIST_CLOSE}"

    def test_list_closed_at_end_of_input(self):
        result = transform_blocks("- only")
        assert result.endswith(LIST_CLOSE)
        assert result.count(LIST_OPEN) == 1

    def test_blank_line_splits_lists(self):
        result = transform_blocks("- a\n\n- b")
        assert result.count(LIST_OPEN) == 2
        assert result.count(LIST_CLOSE) == 2

    def test_paragraph_closes_list(self):
        result = transform_blocks("- a\ntext")
        assert result == f"{LIST_OPEN}\n  \\item a\n{LIST_CLOSE}\ntext\n"


class TestParagraphs:
    """Test paragraphs and blank lines."""

    def test_paragraph_gets_trailing_blank_line(self):
        assert transform_blocks("Hello") == "Hello\n"

    def test_blank_lines_preserved(self):
        assert transform_blocks("a\n\nb") == "a\n\n\nb\n"

    def test_empty_input(self):
        assert transform_blocks("") == ""

    def test_mixed_document(self):
        result = transform_blocks("# H\n\n- x\n- y\n\nP")
        assert result == (
            "\\section*{H}\n"
            "\n"
            "\\begin{itemize}\n"
            "  \\item x\n"
            "  \\item y\n"
            "\\end{itemize}\n"
            "\n"
            "P\n"
        )

    def test_paragraphs_only_emit_no_list_markers(self):
        result = transform_blocks("First line.\nSecond line.\n\nThird - with a dash.")
        assert LIST_OPEN not in result
        assert LIST_CLOSE not in result
        assert "\\section" not in result

    def test_contiguous_items_one_environment(self):
        result = transform_blocks("Intro\n- a\n- b\n- c\nOutro")
        assert result.count(LIST_OPEN) == 1
        assert result.count(LIST_CLOSE) == 1
        assert result.index(LIST_OPEN) < result.index(LIST_CLOSE)
