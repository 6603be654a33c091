"""
Tests for field descriptor derivation.
"""

import gc
import weakref
from collections.abc import Mapping
from datetime import datetime
from typing import Any, ClassVar, Dict, Literal, Optional

import pytest

from entitymap.core.exceptions import (
    MissingTypeDeclarationError,
    UnsupportedTypeError,
)
from entitymap.entity import Entity
from entitymap.mappers.field_inspector import describe_fields, is_entity_type
from entitymap.schemas import FieldKind


class Child(Entity):
    value: int


class Everything(Entity):
    flag: bool
    count: int
    ratio: float
    label: str
    data: dict
    typed_data: Dict[str, int]
    mapping: Mapping[str, Any]
    child: Child
    maybe_child: Optional[Child]
    maybe_label: str | None
    anything: Any
    raw: object
    created: datetime
    version: ClassVar[int] = 1
    _secret: str = ""

    @property
    def summary(self) -> str:
        return self.label

    def describe(self) -> str:
        return self.label


class Base(Entity):
    id: str


class Derived(Base):
    name: str


class Unannotated(Entity):
    name: str
    nickname = "bobby"


class WithList(Entity):
    tags: list[str]


class WithBareTuple(Entity):
    pair: tuple


class WithUnion(Entity):
    value: int | str


class WithLiteral(Entity):
    mode: Literal["a", "b"]


class WithGhost(Entity):
    ghost: "DoesNotExist"  # noqa: F821


class Plain:
    name: str


def test_kinds_are_classified() -> None:
    """Every supported declaration maps to the expected kind."""
    schema = describe_fields(Everything)
    kinds = {d.name: d.kind for d in schema.fields}

    assert kinds == {
        "flag": FieldKind.BOOL,
        "count": FieldKind.INT,
        "ratio": FieldKind.FLOAT,
        "label": FieldKind.STR,
        "data": FieldKind.MAP,
        "typed_data": FieldKind.MAP,
        "mapping": FieldKind.MAP,
        "child": FieldKind.ENTITY,
        "maybe_child": FieldKind.ENTITY,
        "maybe_label": FieldKind.STR,
        "anything": FieldKind.OPAQUE,
        "raw": FieldKind.OPAQUE,
        "created": FieldKind.CLASS,
    }


def test_nullability_and_targets() -> None:
    """Optional / X | None set the nullable flag and keep the target."""
    schema = describe_fields(Everything)

    maybe_child = schema.get("maybe_child")
    assert maybe_child is not None
    assert maybe_child.nullable is True
    assert maybe_child.target is Child

    child = schema.get("child")
    assert child is not None
    assert child.nullable is False

    assert schema.get("maybe_label").nullable is True
    assert schema.get("created").target is datetime
    assert schema.get("data").target is None


def test_hidden_fields() -> None:
    """Underscore and ClassVar annotations are known but hidden."""
    schema = describe_fields(Everything)

    assert {"version", "_secret", "__entity__"} <= schema.hidden
    assert schema.get("version") is None
    assert schema.get("_secret") is None


def test_methods_and_properties_are_not_fields() -> None:
    """Callables and descriptors need no annotation and are not fields."""
    names = describe_fields(Everything).names

    assert "summary" not in names
    assert "describe" not in names


def test_declaration_order_base_first() -> None:
    """Inherited fields come before the subclass's own fields."""
    assert describe_fields(Derived).names == ["id", "name"]


def test_self_reference_resolves() -> None:
    """A class may reference itself by name in a string annotation."""

    class Node(Entity):
        label: str
        parent: "Node | None" = None

    parent = describe_fields(Node).get("parent")

    assert parent.kind is FieldKind.ENTITY
    assert parent.target is Node
    assert parent.nullable is True


def test_descriptors_are_cached() -> None:
    """Each class is inspected once."""
    assert describe_fields(Child) is describe_fields(Child)


def test_cached_schema_is_not_inherited() -> None:
    """A subclass gets its own schema, not its parent's."""
    base_schema = describe_fields(Base)
    derived_schema = describe_fields(Derived)

    assert derived_schema is not base_schema
    assert derived_schema.entity == "Derived"
    assert base_schema.names == ["id"]


def test_described_class_can_be_collected() -> None:
    """Describing a class does not keep it alive."""

    class Transient(Entity):
        value: int

    describe_fields(Transient)
    ref = weakref.ref(Transient)
    del Transient
    gc.collect()

    assert ref() is None


def test_missing_type_declaration() -> None:
    """Public data attributes must be annotated."""
    with pytest.raises(MissingTypeDeclarationError) as exc_info:
        describe_fields(Unannotated)

    assert exc_info.value.field_name == "nickname"


def test_missing_type_declaration_blocks_mapping() -> None:
    """A definition defect surfaces on first use of the type."""
    with pytest.raises(MissingTypeDeclarationError):
        Unannotated({"name": "Bob"})


@pytest.mark.parametrize(
    ("cls", "field_name"),
    [
        (WithList, "tags"),
        (WithBareTuple, "pair"),
        (WithUnion, "value"),
        (WithLiteral, "mode"),
    ],
)
def test_unsupported_declarations(cls: type, field_name: str) -> None:
    """Collections, multi-type unions and other constructs are rejected."""
    with pytest.raises(UnsupportedTypeError) as exc_info:
        describe_fields(cls)

    assert exc_info.value.field_name == field_name


def test_unresolvable_annotation() -> None:
    """Forward references that cannot be resolved are unsupported."""
    with pytest.raises(UnsupportedTypeError) as exc_info:
        describe_fields(WithGhost)

    assert exc_info.value.field_name is None
    assert "WithGhost" in exc_info.value.message


def test_is_entity_type() -> None:
    """Only marked classes are entity types."""
    assert is_entity_type(Entity)
    assert is_entity_type(Child)
    assert not is_entity_type(Plain)
    assert not is_entity_type(Child())
    assert not is_entity_type("Child")
