"""
Tests for document graph validation.

Validation must fail iff a link points to an undeclared page or a page is
unreachable from the entry page.
"""

import pytest
from questmark.markup_parser import parse_markup_string
from questmark.model import Choice, Document, Page
from questmark.validation import DocumentValidationError, reachable_pages, validate_document


def test_valid_document():
    doc = parse_markup_string("-> Start\nA\n* Go -> Next\n-> Next\nB\n* Done -> end")
    validate_document(doc)


def test_unresolved_link_names_target():
    """A link to an undeclared page is reported with that page's name."""
    doc = parse_markup_string("-> Start\nA\n* Go -> Missing Room")
    with pytest.raises(DocumentValidationError, match='unknown "missing room"') as exc:
        validate_document(doc)
    assert exc.value.page == "start"
    assert exc.value.link == "missing room"


def test_end_link_always_resolves():
    validate_document(parse_markup_string("-> Start\nA\n* -> END"))


def test_orphan_page():
    doc = parse_markup_string("-> Start\nA\n* -> end\n-> Lonely\nB\n* -> start")
    with pytest.raises(DocumentValidationError, match='without references: "lonely"'):
        validate_document(doc)


def test_unreachable_cycle_is_orphaned():
    """Pages referencing only each other are still unreachable from the entry."""
    markup = (
        "-> Start\nA\n* -> end\n"
        "-> Left\nB\n* -> Right\n"
        "-> Right\nC\n* -> Left\n"
    )
    with pytest.raises(DocumentValidationError, match="left"):
        validate_document(parse_markup_string(markup))


def test_self_loop_entry_is_fine():
    validate_document(parse_markup_string("-> Start\nA\n* Again -> Start\n* Stop -> end"))


def test_unresolved_reported_before_orphans():
    markup = "-> Start\nA\n* -> end\n-> Lonely\nB\n* -> nowhere"
    with pytest.raises(DocumentValidationError, match="nowhere"):
        validate_document(parse_markup_string(markup))


def test_validation_does_not_mutate():
    doc = parse_markup_string("-> Start\nA\n* Go -> Next\n-> Next\nB\n* -> end")
    before = dict(doc.pages)
    validate_document(doc)
    validate_document(doc)
    assert dict(doc.pages) == before


def test_page_without_choices():
    """Documents built in code are checked for empty pages too."""
    doc = Document(entry="start", pages={"start": Page(texts=["A"], choices=[])})
    with pytest.raises(DocumentValidationError, match="no choices"):
        validate_document(doc)


def test_page_without_texts():
    doc = Document(entry="start", pages={"start": Page(texts=[], choices=[Choice(link="end")])})
    with pytest.raises(DocumentValidationError, match="no texts"):
        validate_document(doc)


def test_undeclared_entry():
    doc = Document(entry="ghost", pages={"start": Page(texts=["A"], choices=[Choice(link="end")])})
    with pytest.raises(DocumentValidationError, match="Entry page"):
        validate_document(doc)


def test_reachable_pages():
    doc = parse_markup_string(
        "-> Start\nA\n* X -> Middle\n* Y -> nowhere\n-> Middle\nB\n* -> end\n-> Island\nC\n* -> end"
    )
    assert reachable_pages(doc) == {"start", "middle"}
