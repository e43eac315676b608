"""Tests for annotation coercion and offset resolution."""

import logging
from types import SimpleNamespace

from citemark.models import (
    FileCitationAnnotation,
    OtherAnnotation,
    ResolutionStatus,
)
from citemark.normalize import (
    coerce_annotation,
    coerce_annotations,
    normalize_annotations,
    resolve_annotations,
)

from conftest import make_annotation


def test_coerce_file_citation_from_dict():
    annotation = coerce_annotation(make_annotation("【a】", 3, file_id="file-9", quote="q"))

    assert isinstance(annotation, FileCitationAnnotation)
    assert annotation.text == "【a】"
    assert annotation.start_index == 3
    assert annotation.end_index == 6
    assert annotation.file_citation.file_id == "file-9"
    assert annotation.file_citation.quote == "q"


def test_coerce_from_attribute_object():
    """SDK-style objects are read through their attributes."""
    raw = SimpleNamespace(
        type="file_citation",
        text="【a】",
        start_index=0,
        end_index=3,
        file_citation=SimpleNamespace(file_id="file-1", quote="quoted"),
    )

    annotation = coerce_annotation(raw)

    assert isinstance(annotation, FileCitationAnnotation)
    assert annotation.file_citation.quote == "quoted"


def test_coerce_missing_quote_defaults_to_empty():
    raw = make_annotation("【a】", 0)
    raw["file_citation"] = {"file_id": "file-1"}

    annotation = coerce_annotation(raw)

    assert annotation.file_citation.quote == ""


def test_coerce_null_quote_becomes_empty():
    raw = make_annotation("【a】", 0)
    raw["file_citation"] = {"file_id": "file-1", "quote": None}

    annotation = coerce_annotation(raw)

    assert isinstance(annotation, FileCitationAnnotation)
    assert annotation.file_citation.quote == ""


def test_coerce_other_kind_carries_no_payload():
    annotation = coerce_annotation({"type": "file_path", "text": "x", "file_path": {"file_id": "f"}})

    assert isinstance(annotation, OtherAnnotation)
    assert annotation.type == "file_path"


def test_coerce_missing_kind_is_other():
    annotation = coerce_annotation({"text": "【a】"})

    assert isinstance(annotation, OtherAnnotation)
    assert annotation.type == "unknown"


def test_coerce_malformed_file_citation_is_dropped(caplog):
    raw = {"type": "file_citation", "text": "【a】", "start_index": 0}

    with caplog.at_level(logging.WARNING, logger="citemark.normalize"):
        assert coerce_annotation(raw) is None

    assert "malformed" in caplog.text


def test_coerce_annotations_drops_only_malformed():
    raw = [
        make_annotation("【a】", 0),
        {"type": "file_citation"},
        {"type": "url_citation"},
    ]

    coerced = coerce_annotations(raw)

    assert len(coerced) == 2
    assert isinstance(coerced[0], FileCitationAnnotation)
    assert isinstance(coerced[1], OtherAnnotation)


def test_exact_offsets_accepted_as_is(two_source_text, two_source_annotations):
    spans = normalize_annotations(two_source_text, two_source_annotations)

    assert [(s.start, s.end) for s in spans] == [(2, 16), (19, 33)]
    assert all((s.start, s.end) == (s.annotation.start_index, s.annotation.end_index) for s in spans)
    for span in spans:
        assert two_source_text[span.start:span.end] == span.annotation.text


def test_non_citation_kinds_filtered(two_source_text, two_source_annotations):
    annotations = [two_source_annotations[0], {"type": "file_path", "text": "x"}]

    spans = normalize_annotations(two_source_text, annotations)

    assert len(spans) == 1
    assert spans[0].annotation.file_citation.file_id == "x.pdf"


def test_wrong_offsets_relocated_forward():
    """Offsets counted in other units still resolve to the actual marker."""
    text = "This is a response with citation 【source:test.pdf】 and another 【source:guide.pdf】."
    annotations = [
        make_annotation("【source:test.pdf】", 34, 54, file_id="file-1"),
        make_annotation("【source:guide.pdf】", 67, 88, file_id="file-2"),
    ]

    spans = normalize_annotations(text, annotations)

    assert len(spans) == 2
    assert text[spans[0].start:spans[0].end] == "【source:test.pdf】"
    assert text[spans[1].start:spans[1].end] == "【source:guide.pdf】"
    assert spans[0].start != spans[0].annotation.start_index


def test_search_never_rematches_consumed_marker():
    """Identical markers are consumed left to right."""
    text = "x 【a】 y 【a】 z"
    annotations = [
        make_annotation("【a】", 0, 3, file_id="file-1"),
        make_annotation("【a】", 1, 4, file_id="file-2"),
    ]

    spans = normalize_annotations(text, annotations)

    assert [(s.start, s.end) for s in spans] == [(2, 5), (8, 11)]
    assert [s.annotation.file_citation.file_id for s in spans] == ["file-1", "file-2"]


def test_duplicate_claim_resolves_to_next_occurrence():
    text = "【a】 and 【a】"
    annotations = [
        make_annotation("【a】", 0, file_id="file-1"),
        make_annotation("【a】", 0, file_id="file-2"),
    ]

    spans = normalize_annotations(text, annotations)

    assert [(s.start, s.end) for s in spans] == [(0, 3), (8, 11)]


def test_unresolvable_annotation_dropped(caplog):
    text = "A 【a】 B"
    annotations = [
        make_annotation("【a】", 2),
        make_annotation("【missing】", 0, file_id="file-2"),
    ]

    with caplog.at_level(logging.WARNING, logger="citemark.normalize"):
        spans = normalize_annotations(text, annotations)

    assert len(spans) == 1
    assert spans[0].annotation.text == "【a】"
    assert "【missing】" in caplog.text


def test_marker_only_before_cursor_is_unresolved():
    """The search never looks behind the furthest accepted span."""
    text = "【b】 then 【a】"
    annotations = [
        make_annotation("【a】", 9),
        make_annotation("【b】", 20, 23),
    ]

    resolutions = resolve_annotations(text, annotations)

    assert resolutions[0].status is ResolutionStatus.EXACT
    assert resolutions[1].status is ResolutionStatus.UNRESOLVED


def test_adjacent_markers_resolve_independently():
    text = "【a】【b】"
    annotations = [
        make_annotation("【a】", 0, file_id="file-a"),
        make_annotation("【b】", 3, file_id="file-b"),
    ]

    spans = normalize_annotations(text, annotations)

    assert [(s.start, s.end) for s in spans] == [(0, 3), (3, 6)]


def test_out_of_range_offsets_fall_back_to_search():
    text = "A 【a】"
    annotations = [make_annotation("【a】", 40, 43)]

    spans = normalize_annotations(text, annotations)

    assert [(s.start, s.end) for s in spans] == [(2, 5)]


def test_empty_marker_is_unresolved():
    resolutions = resolve_annotations("text", [make_annotation("", 0, 0)])

    assert resolutions[0].status is ResolutionStatus.UNRESOLVED
    assert resolutions[0].span is None


def test_relocation_disabled_drops_mismatches():
    text = "A 【a】 B 【b】"
    annotations = [
        make_annotation("【a】", 0, file_id="file-a"),
        make_annotation("【b】", 8, file_id="file-b"),
    ]

    spans = normalize_annotations(text, annotations, relocate=False)

    assert [s.annotation.file_citation.file_id for s in spans] == ["file-b"]


def test_spans_sorted_by_actual_position():
    """A misplaced claim that relocates past a later exact claim sorts by real start."""
    text = "A 【a】 B 【b】"
    annotations = [
        make_annotation("【a】", 2, file_id="file-a"),
        make_annotation("【b】", 0, file_id="file-b"),
    ]

    spans = normalize_annotations(text, annotations)

    assert [s.annotation.file_citation.file_id for s in spans] == ["file-a", "file-b"]
    assert spans[0].start < spans[1].start


def test_resolutions_report_every_input_in_order(two_source_text, two_source_annotations):
    annotations = [
        {"type": "url_citation"},
        two_source_annotations[1],
        {"type": "file_citation"},
        make_annotation("【source:z.pdf】", 0, 1),
    ]

    resolutions = resolve_annotations(two_source_text, annotations)

    assert [r.order for r in resolutions] == [0, 1, 2, 3]
    assert [r.status for r in resolutions] == [
        ResolutionStatus.IGNORED,
        ResolutionStatus.EXACT,
        ResolutionStatus.MALFORMED,
        ResolutionStatus.UNRESOLVED,
    ]
    assert resolutions[0].kind == "url_citation"
    assert resolutions[1].claimed_start == 19
