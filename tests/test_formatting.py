import pytest

from app.core.formatting import (
    compose_structured,
    extract_structured,
    normalize_response,
    normalize_spacing,
    StructuredReply,
)
from app.core.types import ResponseFormat

STRUCTURED = (
    "Heading: Kalvium Programs\n"
    "Content: Kalvium offers a work-integrated B.Tech.\n"
    "Follow-up Question: Would you like to know about admissions?\n"
)


def test_spacing_doubles_line_breaks():
    assert normalize_spacing("a\nb") == "a\n\nb"


def test_spacing_leaves_single_line_unchanged():
    assert normalize_spacing("no breaks here") == "no breaks here"
    assert normalize_spacing("") == ""


def test_spacing_expands_every_break():
    assert normalize_spacing("a\n\nb\n") == "a\n\n\n\nb\n\n"


def test_extract_all_three_markers():
    reply = extract_structured(STRUCTURED)
    assert reply == StructuredReply(
        heading="Kalvium Programs",
        content="Kalvium offers a work-integrated B.Tech.",
        follow_up="Would you like to know about admissions?",
    )


def test_extract_ignores_indentation_and_surrounding_text():
    raw = "Sure!\n  Heading:   Fees  \nContent: Varies by program.\n\nFollow-up Question: Anything else?\nBye"
    reply = extract_structured(raw)
    assert reply is not None
    assert reply.heading == "Fees"
    assert reply.follow_up == "Anything else?"


def test_extract_is_case_sensitive():
    raw = STRUCTURED.replace("Heading:", "heading:")
    assert extract_structured(raw) is None


def test_extract_first_occurrence_wins():
    raw = STRUCTURED + "Heading: Second heading\n"
    assert extract_structured(raw).heading == "Kalvium Programs"


@pytest.mark.parametrize("missing", ["Heading:", "Content:", "Follow-up Question:"])
def test_missing_marker_falls_back_to_spacing(missing):
    raw = "\n".join(line for line in STRUCTURED.splitlines() if not line.startswith(missing))
    assert normalize_response(raw, ResponseFormat.STRUCTURED) == normalize_spacing(raw)


def test_empty_marker_value_does_not_count():
    raw = STRUCTURED.replace("Heading: Kalvium Programs", "Heading:   ")
    assert extract_structured(raw) is None


def test_structured_policy_composes_three_parts():
    assert normalize_response(STRUCTURED, "structured") == (
        "**Kalvium Programs**\n\n"
        "Kalvium offers a work-integrated B.Tech.\n\n"
        "**Would you like to know about admissions?**"
    )


def test_compose_structured():
    assert compose_structured(StructuredReply("H", "C", "F")) == "**H**\n\nC\n\n**F**"


def test_spacing_policy_ignores_markers():
    assert normalize_response(STRUCTURED, ResponseFormat.SPACING) == normalize_spacing(STRUCTURED)
