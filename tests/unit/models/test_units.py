"""Tests for delta, narrative unit, issue and report models."""

from __future__ import annotations

import pydantic
import pytest

from continuity_engine.models import (
    ContinuityIssue,
    ContinuityReport,
    DeltaOp,
    NarrativeUnit,
    ParticipantRole,
    Severity,
    WorldStateDelta,
    flatten_world_state,
)


class TestDeltaOp:
    """Tests for DeltaOp parsing."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("SET", DeltaOp.SET),
            ("INC", DeltaOp.INCREMENT),
            ("dec", DeltaOp.DECREMENT),
            ("ADD", DeltaOp.APPEND),
            (" remove ", DeltaOp.REMOVE),
            ("Increment", DeltaOp.INCREMENT),
        ],
    )
    def test_aliases(self, raw: str, expected: DeltaOp) -> None:
        """Test stored spellings map onto the canonical ops."""
        assert DeltaOp(raw) is expected

    def test_unknown_op(self) -> None:
        """Test that an unknown op is rejected."""
        with pytest.raises(ValueError):
            DeltaOp("MULTIPLY")


class TestWorldStateDelta:
    """Tests for WorldStateDelta."""

    def test_defaults(self) -> None:
        """Test that value defaults to None."""
        delta = WorldStateDelta(key="x", op="INC")
        assert delta.op is DeltaOp.INCREMENT
        assert delta.value is None

    def test_empty_key_rejected(self) -> None:
        """Test that keys must be non-empty."""
        with pytest.raises(pydantic.ValidationError):
            WorldStateDelta(key="", op="SET")

    def test_unknown_op_rejected(self) -> None:
        """Test that an unknown op fails validation."""
        with pytest.raises(pydantic.ValidationError):
            WorldStateDelta(key="x", op="MULTIPLY")

    def test_frozen(self) -> None:
        """Test that deltas are immutable."""
        delta = WorldStateDelta(key="x", op="SET", value=1)
        with pytest.raises(pydantic.ValidationError):
            delta.value = 2  # type: ignore[misc]

    def test_describe(self) -> None:
        """Test the short description."""
        assert WorldStateDelta(key="x", op="SET", value="a").describe() == "x SET 'a'"
        assert WorldStateDelta(key="n", op="INC").describe() == "n INCREMENT"


class TestNarrativeUnit:
    """Tests for NarrativeUnit."""

    def test_minimal(self) -> None:
        """Test defaults of a bare unit."""
        unit = NarrativeUnit(id="n1")
        assert unit.order == 0
        assert unit.deltas == ()
        assert unit.scene_location is None
        assert unit.participant_ids == []

    def test_document_spelling(self) -> None:
        """Test validation from a stored story-node document."""
        unit = NarrativeUnit.model_validate(
            {
                "_id": 12345,
                "title": "The Duel",
                "time": {"order": 4, "inWorldDate": "Year 3"},
                "participants": [{"entityId": "c1", "role": "ANTAGONIST"}],
                "locations": ["loc-A", "loc-B"],
                "worldStateDelta": [{"key": "x", "op": "DEC", "value": 2}],
                "version": {"status": "DRAFT"},
            }
        )

        assert unit.id == "12345"
        assert unit.order == 4
        assert unit.participants[0].role is ParticipantRole.ANTAGONIST
        assert unit.scene_location == "loc-A"
        assert unit.deltas[0].op is DeltaOp.DECREMENT

    def test_explicit_order_wins(self) -> None:
        """Test that a top-level order beats time.order."""
        unit = NarrativeUnit.model_validate({"id": "n", "order": 1, "time": {"order": 9}})
        assert unit.order == 1

    def test_null_collections(self) -> None:
        """Test that null collections become empty."""
        unit = NarrativeUnit.model_validate(
            {"id": "n", "deltas": None, "participants": None, "locations": None}
        )
        assert unit.deltas == ()
        assert unit.locations == ()

    def test_negative_order_rejected(self) -> None:
        """Test that order must be non-negative."""
        with pytest.raises(pydantic.ValidationError):
            NarrativeUnit(id="n", order=-1)

    def test_frozen(self) -> None:
        """Test that units are immutable."""
        unit = NarrativeUnit(id="n")
        with pytest.raises(pydantic.ValidationError):
            unit.order = 3  # type: ignore[misc]


class TestContinuityReport:
    """Tests for ContinuityReport."""

    @pytest.fixture
    def report(self) -> ContinuityReport:
        return ContinuityReport(
            unit_id="n1",
            issues=[
                ContinuityIssue(
                    severity=Severity.WARN,
                    code="CHAR_LOCATION_MISMATCH",
                    message="Character c1 location (loc-B) differs from scene location (loc-A).",
                    unit_id="n1",
                    suggestion="Move c1.",
                ),
                ContinuityIssue(
                    severity=Severity.ERROR,
                    code="ITEM_RESURRECTED",
                    message="Item i1 status resurrected from DESTROYED to INTACT.",
                    unit_id="n1",
                ),
            ],
            pre_state={},
            post_state={"item": {"i1": {"status": "INTACT"}}, "gold": 3, "empty": {}},
        )

    def test_has_errors(self, report: ContinuityReport) -> None:
        """Test error detection."""
        assert report.has_errors is True
        assert ContinuityReport(unit_id="n").has_errors is False

    def test_issues_by_severity(self, report: ContinuityReport) -> None:
        """Test grouping by severity."""
        grouped = report.issues_by_severity()
        assert [i.code for i in grouped[Severity.WARN]] == ["CHAR_LOCATION_MISMATCH"]
        assert [i.code for i in grouped[Severity.ERROR]] == ["ITEM_RESURRECTED"]
        assert grouped[Severity.INFO] == []

    def test_to_ai_context(self, report: ContinuityReport) -> None:
        """Test the prompt rendering."""
        context = report.to_ai_context()

        assert context.startswith("# Continuity - n1")
        assert "[WARN] CHAR_LOCATION_MISMATCH" in context
        assert "Suggestion: Move c1." in context
        assert '- item.i1.status = "INTACT"' in context
        assert "- gold = 3" in context
        assert "- empty = {}" in context

    def test_to_ai_context_truncates(self, report: ContinuityReport) -> None:
        """Test the fact limit."""
        context = report.to_ai_context(max_facts=1)
        assert "... 2 more" in context

    def test_serializes(self, report: ContinuityReport) -> None:
        """Test JSON export includes the computed flag."""
        data = report.model_dump(mode="json")
        assert data["has_errors"] is True
        assert data["issues"][0]["severity"] == "WARN"


def test_flatten_world_state() -> None:
    """Test flattening snapshots to dot paths."""
    state = {"b": {"y": 2, "x": [1]}, "a": None}
    assert list(flatten_world_state(state).items()) == [("a", None), ("b.x", [1]), ("b.y", 2)]
