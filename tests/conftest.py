"""Pytest fixtures for citemark tests."""

import pytest


def make_annotation(marker, start, end=None, file_id="file-1", quote="", kind="file_citation"):
    """Build a raw annotation dict shaped like the generation service output."""
    return {
        "type": kind,
        "text": marker,
        "start_index": start,
        "end_index": start + len(marker) if end is None else end,
        "file_citation": {"file_id": file_id, "quote": quote},
    }


@pytest.fixture
def annotate():
    """Factory for annotations whose offsets are computed from the text.

    Returns:
        Callable (text, marker, file_id, occurrence=0, quote="") -> dict
    """

    def _annotate(text, marker, file_id="file-1", occurrence=0, quote=""):
        start = -1
        for _ in range(occurrence + 1):
            start = text.index(marker, start + 1)
        return make_annotation(marker, start, file_id=file_id, quote=quote)

    return _annotate


@pytest.fixture
def two_source_text():
    """Response text with two distinct citation markers."""
    return "A 【source:x.pdf】 B 【source:y.pdf】 C"


@pytest.fixture
def two_source_annotations(two_source_text, annotate):
    """Correctly offset annotations for two_source_text."""
    return [
        annotate(two_source_text, "【source:x.pdf】", file_id="x.pdf", quote="quote x"),
        annotate(two_source_text, "【source:y.pdf】", file_id="y.pdf", quote="quote y"),
    ]
