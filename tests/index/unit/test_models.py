"""Tests for output models: identities, ranges, occurrences and documents."""

import pytest

from symdex.core.errors import ErrorCode, IndexingError, InternalError
from symdex.index.descriptor import package_descriptor, term_descriptor, type_descriptor
from symdex.index.models import (
    Document,
    IdentityKind,
    Occurrence,
    Relationship,
    ScipRange,
    SymbolIdentity,
    SymbolInformation,
    SymbolRole,
)

HEADER = "scip-typescript npm pkg 1.0.0 "


class TestSymbolIdentity:
    def test_empty_renders_empty_string(self) -> None:
        identity = SymbolIdentity.empty()
        assert identity.is_empty()
        assert identity.value == ""
        assert identity is SymbolIdentity.empty()

    def test_local_renders_prefix_and_index(self) -> None:
        identity = SymbolIdentity.local(3)
        assert identity.is_local()
        assert identity.value == "local 3"

    def test_global_renders_header_and_chain(self) -> None:
        # Given
        root = SymbolIdentity.global_(HEADER, (package_descriptor("src/a.ts"),))

        # When
        child = root.child(type_descriptor("Foo")).child(term_descriptor("x"))

        # Then
        assert child.kind is IdentityKind.GLOBAL
        assert child.value == HEADER + "`src/a.ts`/Foo#x."
        assert root.value == HEADER + "`src/a.ts`/"

    @pytest.mark.parametrize("identity", [SymbolIdentity.empty(), SymbolIdentity.local(0)])
    def test_child_of_non_global_is_internal_error(self, identity: SymbolIdentity) -> None:
        with pytest.raises(InternalError):
            identity.child(term_descriptor("x"))

    def test_identities_compare_by_value(self) -> None:
        assert SymbolIdentity.local(1) == SymbolIdentity.local(1)
        assert SymbolIdentity.local(1) != SymbolIdentity.local(2)


class TestScipRange:
    def test_three_components_are_single_line(self) -> None:
        range_ = ScipRange.from_scip([2, 4, 9])
        assert range_ == ScipRange(2, 4, 2, 9)
        assert range_.is_single_line()
        assert range_.to_scip() == [2, 4, 9]

    def test_four_components_are_kept(self) -> None:
        range_ = ScipRange.from_scip([1, 0, 3, 2])
        assert not range_.is_single_line()
        assert range_.to_scip() == [1, 0, 3, 2]

    def test_four_component_single_line_encodes_as_three(self) -> None:
        assert ScipRange.from_scip([5, 1, 5, 4]).to_scip() == [5, 1, 4]

    def test_empty_range_is_valid(self) -> None:
        assert ScipRange(0, 0, 0, 0).to_scip() == [0, 0, 0]

    @pytest.mark.parametrize("values", [[], [1], [1, 2], [1, 2, 3, 4, 5]])
    def test_wrong_component_count_is_malformed(self, values: list[int]) -> None:
        with pytest.raises(IndexingError) as exc_info:
            ScipRange.from_scip(values)
        assert exc_info.value.code == ErrorCode.MALFORMED_RANGE

    @pytest.mark.parametrize(
        "values",
        [
            [0, 5, 2],  # end column before start column
            [3, 0, 1, 9],  # end line before start line
            [-1, 0, 2],
        ],
    )
    def test_inverted_or_negative_range_is_malformed(self, values: list[int]) -> None:
        with pytest.raises(IndexingError) as exc_info:
            ScipRange.from_scip(values)
        assert exc_info.value.code == ErrorCode.MALFORMED_RANGE

    def test_sort_key_orders_by_position(self) -> None:
        ranges = [ScipRange(1, 0, 1, 2), ScipRange(0, 5, 0, 6), ScipRange(0, 1, 0, 3)]
        ordered = sorted(ranges, key=ScipRange.sort_key)
        assert [r.to_scip() for r in ordered] == [[0, 1, 3], [0, 5, 6], [1, 0, 2]]


class TestOccurrence:
    def test_definition_bit(self) -> None:
        range_ = ScipRange(0, 0, 0, 1)
        assert Occurrence(range_, "local 0", SymbolRole.DEFINITION).is_definition
        assert not Occurrence(range_, "local 0").is_definition

    def test_to_dict(self) -> None:
        occurrence = Occurrence(ScipRange(0, 6, 0, 7), "local 0", SymbolRole.DEFINITION)
        assert occurrence.to_dict() == {"range": [0, 6, 7], "symbol": "local 0", "symbol_roles": 1}


class TestDocument:
    def test_finalized_document_rejects_mutation(self) -> None:
        # Given
        document = Document("src/a.ts")
        document.add_occurrence(Occurrence(ScipRange(0, 0, 0, 1), "local 0"))

        # When
        document.finalize()

        # Then
        assert document.finalized
        with pytest.raises(InternalError):
            document.add_occurrence(Occurrence(ScipRange(0, 0, 0, 1), "local 1"))
        with pytest.raises(InternalError):
            document.add_symbol(SymbolInformation("local 1"))
        assert len(document.occurrences) == 1

    def test_duplicate_symbols_are_reported_not_removed(self) -> None:
        document = Document("src/a.ts")
        document.add_symbol(SymbolInformation("x"))
        document.add_symbol(SymbolInformation("y"))
        document.add_symbol(SymbolInformation("x"))

        assert document.duplicate_symbols() == ["x"]
        assert len(document.symbols) == 3

    def test_definitions_and_occurrences_at(self) -> None:
        here = ScipRange(0, 0, 0, 1)
        document = Document("src/a.ts")
        document.add_occurrence(Occurrence(here, "a", SymbolRole.DEFINITION))
        document.add_occurrence(Occurrence(here, "b"))
        document.add_occurrence(Occurrence(ScipRange(1, 0, 1, 1), "a"))

        assert [occ.symbol for occ in document.definitions()] == ["a"]
        assert [occ.symbol for occ in document.occurrences_at(here)] == ["a", "b"]

    def test_to_dict(self) -> None:
        document = Document("src/a.ts")
        document.add_occurrence(Occurrence(ScipRange(0, 6, 0, 7), "s", SymbolRole.DEFINITION))
        document.add_symbol(
            SymbolInformation("s", ["doc"], [Relationship("t", is_implementation=True)])
        )

        assert document.to_dict() == {
            "relative_path": "src/a.ts",
            "language": "typescript",
            "occurrences": [{"range": [0, 6, 7], "symbol": "s", "symbol_roles": 1}],
            "symbols": [
                {
                    "symbol": "s",
                    "documentation": ["doc"],
                    "relationships": [
                        {
                            "symbol": "t",
                            "is_implementation": True,
                            "is_reference": False,
                            "is_type_definition": False,
                        }
                    ],
                }
            ],
        }
