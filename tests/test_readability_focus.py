from app.parsers.focus import get_work_experience_focused_text
from app.parsers.readability import (
    IMAGE_BASED_SNIPPET,
    NO_TEXT_SNIPPET,
    create_readable_snippet,
    is_text_readable,
    mime_type_for,
)

CV_TEXT = (
    "Jane Doe - Senior Software Engineer with 8 years of experience building "
    "payment systems, leading teams and shipping reliable services at scale."
)


def test_short_text_is_never_readable():
    assert len("experience " * 9) < 100
    assert is_text_readable("experience " * 9) is False
    assert is_text_readable("") is False


def test_cv_like_text_is_readable():
    assert len(CV_TEXT) >= 100
    assert is_text_readable(CV_TEXT) is True


def test_text_without_cv_vocabulary_is_not_readable():
    text = "The quick brown fox jumps over the lazy dog. " * 4
    assert is_text_readable(text) is False


def test_binary_noise_is_not_readable():
    noise = "ÿþ\x01\x02{}[]<>~^`|" * 20 + " experience"
    assert is_text_readable(noise) is False


def test_readable_snippet():
    assert create_readable_snippet("") == NO_TEXT_SNIPPET
    assert create_readable_snippet("garbage") == IMAGE_BASED_SNIPPET
    assert create_readable_snippet(CV_TEXT * 10) == (CV_TEXT * 10)[:500]


def test_mime_types():
    assert mime_type_for("pdf") == "application/pdf"
    assert mime_type_for("docx").endswith("wordprocessingml.document")
    assert mime_type_for("doc") == "application/msword"


def test_focus_bounded_by_next_section():
    text = (
        "Jane Doe\nSummary\nBuilds things.\n"
        "Work Experience\nAcme Corp - Engineer\nBuilt billing and payments.\n"
        "Education\nMIT"
    )
    focused = get_work_experience_focused_text(text)
    assert focused == "Work Experience\nAcme Corp - Engineer\nBuilt billing and payments.\n"


def test_focus_prefers_marker_order_over_position():
    text = "Professional Experience summary\nWORK EXPERIENCE\nAcme Corp, 2019 to 2021, engineer\nSKILLS\nPython"
    assert get_work_experience_focused_text(text).startswith("WORK EXPERIENCE")


def test_focus_without_header_returns_prefix():
    text = "x" * 30000
    assert get_work_experience_focused_text(text) == "x" * 20000
    assert get_work_experience_focused_text(None) == ""


def test_focus_section_is_capped():
    text = "EXPERIENCE\n" + "a" * 30000
    assert len(get_work_experience_focused_text(text)) == 25000
