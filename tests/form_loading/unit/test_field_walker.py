"""Field walker tests."""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest
from record_binding.form_loading import SchemaMismatchError, allocate_if_absent, apply
from record_binding.schema_management import (
    Int8,
    Ref,
    SchemaError,
    describe_record_type,
)
from record_binding.value_coercion import FieldCoercionError


@dataclass
class Flags:
    B: bool = False


@dataclass
class Sample:
    X: int = 0
    Y: int = 0
    Z: Flags = field(default_factory=Flags)


@dataclass
class Leaf:
    D: int = 0


@dataclass
class Middle:
    C: Leaf | None = None


@dataclass
class Chain:
    B: Middle | None = None


@dataclass
class Root:
    A: Chain | None = None
    E: Chain | None = None


@dataclass
class Counters:
    small: Int8 = 0
    counter: Ref[Ref[int]] | None = None
    cell: Ref[str] = field(default_factory=Ref)
    nickname: str | None = None


@dataclass
class Plugin:
    name: str = ""
    options: dict[str, str] = field(default_factory=dict)

    def load_form(self, form: object) -> dict[str, Exception]:
        return {}

    def generate_values(self) -> dict[str, str]:
        return {"name": self.name}


def test_apply_sets_scalars_and_nested_records() -> None:
    target = Sample()

    errors = apply(describe_record_type(Sample), {"X": "20", "Z": {"B": "true"}}, target)

    assert errors == {}
    assert target == Sample(X=20, Y=0, Z=Flags(B=True))


def test_field_errors_do_not_stop_sibling_fields() -> None:
    target = Sample(X=7)

    errors = apply(describe_record_type(Sample), {"X": "abc", "Y": "5"}, target)

    assert list(errors) == ["X"]
    assert isinstance(errors["X"], FieldCoercionError)
    assert target.X == 7
    assert target.Y == 5


def test_nested_field_errors_use_dotted_paths() -> None:
    target = Sample()

    errors = apply(describe_record_type(Sample), {"Z": {"B": "maybe"}}, target)

    assert list(errors) == ["Z.B"]
    assert target.Z.B is False


def test_unknown_keys_and_missing_fields_are_ignored() -> None:
    target = Sample(X=3, Y=4)

    errors = apply(describe_record_type(Sample), {"Y": "9", "W": "ignored"}, target)

    assert errors == {}
    assert target == Sample(X=3, Y=9)


def test_optional_chain_is_allocated_lazily() -> None:
    target = Root()

    errors = apply(describe_record_type(Root), {"A": {"B": {"C": {"D": "5"}}}}, target)

    assert errors == {}
    assert target.A is not None and target.A.B is not None and target.A.B.C is not None
    assert target.A.B.C.D == 5
    assert target.E is None


def test_failed_coercion_does_not_allocate_nested_records() -> None:
    target = Root()

    errors = apply(describe_record_type(Root), {"A": {"B": {"C": {"D": "five"}}}}, target)

    assert list(errors) == ["A.B.C.D"]
    assert target.A is None


def test_unknown_nested_keys_do_not_allocate_records() -> None:
    target = Root()

    apply(describe_record_type(Root), {"A": {"B": {"Q": "1"}}}, target)

    assert target.A is None


def test_existing_nested_records_are_updated_in_place() -> None:
    leaf = Leaf(D=1)
    target = Root(A=Chain(B=Middle(C=leaf)))

    apply(describe_record_type(Root), {"A": {"B": {"C": {"D": "2"}}}}, target)

    assert target.A is not None and target.A.B is not None
    assert target.A.B.C is leaf
    assert leaf.D == 2


def test_ref_levels_are_allocated_for_each_indirection() -> None:
    target = Counters()

    errors = apply(
        describe_record_type(Counters),
        {"counter": "12", "cell": "text", "nickname": "nick"},
        target,
    )

    assert errors == {}
    assert target.counter == Ref(Ref(12))
    assert target.cell == Ref("text")
    assert target.nickname == "nick"


def test_width_limits_apply_to_annotated_fields() -> None:
    target = Counters()

    errors = apply(describe_record_type(Counters), {"small": "300"}, target)

    assert "out of range for 8 bits" in str(errors["small"])
    assert target.small == 0


def test_plain_value_for_record_field_is_a_schema_mismatch() -> None:
    target = Sample()

    with pytest.raises(SchemaMismatchError, match="Field 'Z' expects a record"):
        apply(describe_record_type(Sample), {"X": "bad", "Z": "value"}, target)


def test_nested_tree_for_scalar_field_is_a_schema_mismatch() -> None:
    with pytest.raises(SchemaMismatchError) as exc_info:
        apply(describe_record_type(Sample), {"Y": {"nested": "1"}}, Sample())

    assert exc_info.value.path == "Y"


def test_loader_schemas_are_not_walked() -> None:
    with pytest.raises(SchemaError, match="load_form"):
        apply(describe_record_type(Plugin), {"name": "x"}, Plugin())


def test_target_must_match_the_schema() -> None:
    with pytest.raises(SchemaError, match="Cannot bind Flags"):
        apply(describe_record_type(Sample), {}, Flags())


class _Box:
    def __init__(self, content: object = None) -> None:
        self.content = content

    def get(self) -> object:
        return self.content

    def set(self, value: object) -> None:
        self.content = value


def test_allocate_if_absent_is_idempotent() -> None:
    box = _Box()

    first = allocate_if_absent(box, list)
    second = allocate_if_absent(box, list)

    assert first is second
    assert box.content is first
