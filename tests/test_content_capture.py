"""Tests for snapcheck.content.capture - native values to Content."""

import enum
from collections import OrderedDict
from dataclasses import dataclass
from typing import NamedTuple

import pytest
from pydantic import BaseModel

from snapcheck.content.capture import from_value
from snapcheck.content.model import (
    Bool,
    Bytes,
    EnumVariant,
    Float,
    Integer,
    Map,
    Nil,
    Seq,
    String,
    Struct,
)
from snapcheck.errors import CaptureError, SerializationError


class Role(enum.Enum):
    ADMIN = "admin"
    GUEST = "guest"


class Priority(enum.IntEnum):
    LOW = 1


@dataclass
class Address:
    street: str
    city: str


@dataclass
class User:
    name: str
    age: int
    address: Address
    role: Role


class Point(NamedTuple):
    y: int
    x: int


class Account(BaseModel):
    login: str
    active: bool = True


class TestScalars:
    """Scalar values map onto scalar nodes."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, Nil()),
            (False, Bool(False)),
            (42, Integer(42)),
            (2.5, Float(2.5)),
            ("hi", String("hi")),
            (b"\x00\x01", Bytes(b"\x00\x01")),
            (bytearray(b"ab"), Bytes(b"ab")),
        ],
    )
    def test_scalar(self, value, expected):
        """Each scalar type captures as its own node kind."""
        assert from_value(value) == expected


class TestContainers:
    """Lists, tuples and mappings."""

    def test_list_and_tuple_become_sequences(self):
        """Lists and plain tuples both capture as Seq."""
        assert from_value([1, (2, 3)]) == Seq(
            [Integer(1), Seq([Integer(2), Integer(3)])]
        )

    def test_dict_keeps_insertion_order(self):
        """Dict entries keep their insertion order, never sorted."""
        tree = from_value({"b": 1, "a": 2})
        assert [k for k, _ in tree.entries] == [String("b"), String("a")]

    def test_mapping_subclass(self):
        """Any Mapping is captured as a Map."""
        tree = from_value(OrderedDict([(1, "x")]))
        assert tree == Map([(Integer(1), String("x"))])


class TestStructs:
    """Record-like types become Structs with declared field order."""

    def test_dataclass_field_order(self):
        """Dataclass fields keep declaration order and nest."""
        user = User("Alice", 30, Address("Main St", "Springfield"), Role.ADMIN)
        tree = from_value(user)
        assert isinstance(tree, Struct)
        assert tree.name == "User"
        assert [name for name, _ in tree.fields] == ["name", "age", "address", "role"]
        assert tree.get("address") == Struct(
            "Address",
            [("street", String("Main St")), ("city", String("Springfield"))],
        )

    def test_namedtuple_is_struct(self):
        """Namedtuples are structs in _fields order."""
        assert from_value(Point(y=2, x=1)) == Struct(
            "Point", [("y", Integer(2)), ("x", Integer(1))]
        )

    def test_pydantic_model_is_struct(self):
        """Pydantic models are structs in model_fields order."""
        assert from_value(Account(login="bob")) == Struct(
            "Account", [("login", String("bob")), ("active", Bool(True))]
        )

    def test_snapshot_hook(self):
        """Objects may describe themselves through __snapshot__()."""

        class Token:
            def __snapshot__(self):
                return {"kind": "token"}

        assert from_value(Token()) == Map([(String("kind"), String("token"))])


class TestEnums:
    """Enum members become enum variants."""

    def test_unit_variant_by_default(self):
        """Enum members capture without their value by default."""
        assert from_value(Role.GUEST) == EnumVariant("Role", "GUEST")

    def test_int_enum_is_not_an_integer(self):
        """IntEnum members are still enum variants."""
        assert from_value(Priority.LOW) == EnumVariant("Priority", "LOW")

    def test_capture_enum_values(self):
        """capture_enum_values attaches the member value as payload."""
        assert from_value(Role.ADMIN, capture_enum_values=True) == EnumVariant(
            "Role", "ADMIN", String("admin")
        )


class TestUnsupported:
    """Shapes without a deterministic representation fail loudly."""

    def test_set_is_rejected(self):
        """Sets raise CaptureError instead of being silently reordered."""
        with pytest.raises(CaptureError, match="not deterministic"):
            from_value({"tags": {1, 2}})

    def test_arbitrary_object_is_rejected(self):
        """Plain objects raise CaptureError."""
        with pytest.raises(CaptureError):
            from_value(object())

    def test_capture_error_is_serialization_error(self):
        """CaptureError is a SerializationError."""
        assert issubclass(CaptureError, SerializationError)

    def test_self_referencing_list_is_rejected(self):
        """Cycles hit the depth guard rather than recursing forever."""
        loop: list = []
        loop.append(loop)
        with pytest.raises(CaptureError, match="deeper"):
            from_value(loop)
