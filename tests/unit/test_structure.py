"""
Unit tests for structure classification and preview planning.

Tests mdtex/preview/structure.py: which of the three structures an input
maps to and what each render attempt receives.
"""
from mdtex.preview.rules import POLYFILL_COMMANDS
from mdtex.preview.structure import (
    BareFragment,
    ExtractedDocument,
    PreviewMode,
    RawDocument,
    classify,
    degrade_for_fallback,
    plan_preview,
    strip_packages,
    wrap_in_shell,
)


class TestClassify:
    """Test the three document structures."""

    def test_extracted_document(self):
        text = "\\documentclass{article}\\begin{document}Hi\\end{document}"
        assert classify(text) == ExtractedDocument("Hi")

    def test_missing_end_takes_rest(self):
        text = "\\documentclass{article}\\begin{document}Hi"
        assert classify(text) == ExtractedDocument("Hi")

    def test_spaced_begin_document(self):
        text = "\\begin {document}Hi\\end {document}"
        assert classify(text) == ExtractedDocument("Hi")

    def test_raw_document(self):
        text = "\\documentclass{article}\nHi"
        structure = classify(text)
        assert isinstance(structure, RawDocument)
        assert structure.body == text

    def test_bare_fragment(self):
        assert classify("Hello") == BareFragment("Hello")

    def test_modes(self):
        assert ExtractedDocument("").mode is PreviewMode.FULL_DOCUMENT
        assert BareFragment("").mode is PreviewMode.FULL_DOCUMENT
        assert RawDocument("").mode is PreviewMode.RAW_PASSTHROUGH


class TestStripPackages:
    def test_packages_removed_before_classification(self):
        text = "\\usepackage{amsmath}\n\\documentclass{article}\\begin{document}X\\end{document}"
        assert "usepackage" not in strip_packages(text)


class TestPlanPreview:
    """Test the candidate handed to the first attempt."""

    def test_full_document_wrapped_in_shell(self, full_document):
        plan = plan_preview(full_document)
        assert plan.mode is PreviewMode.FULL_DOCUMENT
        assert plan.candidate == wrap_in_shell(plan.sanitized_body)
        assert "\\usepackage" not in plan.candidate
        assert "\\section{Intro}" in plan.sanitized_body

    def test_fragment_wrapped_in_shell(self):
        plan = plan_preview("Just text")
        assert plan.candidate == wrap_in_shell("Just text")

    def test_shell_layout(self):
        shell = wrap_in_shell("B")
        assert shell == (
            "\n\\documentclass{article}\n"
            + POLYFILL_COMMANDS
            + "\n\\begin{document}\nB\n\\end{document}"
        )

    def test_raw_document_gets_polyfills(self):
        plan = plan_preview("\\documentclass{article}\nText")
        assert plan.mode is PreviewMode.RAW_PASSTHROUGH
        assert plan.candidate.count(POLYFILL_COMMANDS) == 1
        assert plan.candidate.endswith("\nText")

    def test_formatting_stripped_from_body(self):
        plan = plan_preview("\\pagestyle{fancy}\\fancyhf{}Body")
        assert plan.sanitized_body == "Body"

    def test_input_not_modified(self, full_document):
        before = str(full_document)
        plan_preview(full_document)
        assert full_document == before


class TestDegradeForFallback:
    """Test the fragment used by the second attempt."""

    def test_structure_and_links_removed(self):
        body = "\\title{T}\\maketitle See \\href{https://a.com}{the site}."
        assert degrade_for_fallback(body) == "See the site."

    def test_table_becomes_text(self):
        body = "\\begin{tabular}{ll}\nA & B \\\\\n\\end{tabular}"
        assert degrade_for_fallback(body) == "A  |  B"

    def test_result_trimmed(self):
        assert degrade_for_fallback("\n\n  X  \n") == "X"
