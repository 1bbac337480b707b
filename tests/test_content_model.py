"""Tests for snapcheck.content.model - Content nodes and replace_at."""

import pytest

from snapcheck.content.model import (
    Bool,
    EnumVariant,
    Float,
    Integer,
    Map,
    Nil,
    Seq,
    Step,
    StepKind,
    String,
    Struct,
    primitive,
    replace_at,
)


def _user_tree() -> Map:
    return Map(
        [
            (String("name"), String("Alice")),
            (String("tags"), Seq([String("a"), String("b")])),
            (String("profile"), Struct("Profile", [("age", Integer(30))])),
        ]
    )


class TestStructuralEquality:
    """Content nodes compare by structure."""

    def test_identical_trees_are_equal(self):
        """Two independently built trees with the same shape are equal."""
        assert _user_tree() == _user_tree()

    def test_bool_and_integer_differ(self):
        """Bool(True) is not the same node as Integer(1)."""
        assert Bool(True) != Integer(1)

    def test_map_order_matters(self):
        """Maps keep insertion order, so reordered entries are different trees."""
        a = Map([(String("x"), Integer(1)), (String("y"), Integer(2))])
        b = Map([(String("y"), Integer(2)), (String("x"), Integer(1))])
        assert a != b

    def test_lists_are_stored_as_tuples(self):
        """Children passed as lists are frozen into tuples."""
        seq = Seq([Integer(1)])
        assert isinstance(seq.items, tuple)

    def test_nodes_are_hashable(self):
        """Frozen nodes can be used as dict keys."""
        assert {String("a"): 1}[String("a")] == 1

    def test_signed_zeros_differ(self):
        """0.0 and -0.0 are different nodes, as their renderings differ."""
        assert Float(0.0) != Float(-0.0)
        assert Map([(Float(-0.0), Nil())]).get(Float(0.0)) is None

    def test_nan_equals_itself(self):
        """NaN floats compare equal and hash alike."""
        nan = float("nan")
        assert Float(nan) == Float(nan)
        assert hash(Float(nan)) == hash(Float(nan))

    def test_float_never_equals_integer(self):
        """Float(1.0) and Integer(1) are distinct kinds."""
        assert Float(1.0) != Integer(1)


class TestChildren:
    """Tests for Content.children()."""

    def test_map_children_carry_key_and_position(self):
        """Map children yield KEY steps with the key Content and entry offset."""
        steps = [step for step, _ in _user_tree().children()]
        assert steps[0] == Step(StepKind.KEY, String("name"), 0)
        assert steps[2].position == 2

    def test_struct_children_are_fields(self):
        """Struct children yield FIELD steps named after the field."""
        struct = Struct("Point", [("x", Integer(1)), ("y", Integer(2))])
        assert [step.value for step, _ in struct.children()] == ["x", "y"]

    def test_unit_enum_has_no_children(self):
        """A unit variant has no payload child."""
        assert list(EnumVariant("Role", "Admin").children()) == []

    def test_scalars_have_no_children(self):
        """Scalars are leaves."""
        assert list(String("x").children()) == []


class TestReplaceAt:
    """Tests for replace_at()."""

    def test_replace_nested_field(self):
        """Replaces a field inside a struct inside a map."""
        tree = _user_tree()
        path = (
            Step(StepKind.KEY, String("profile")),
            Step(StepKind.FIELD, "age"),
        )
        new = replace_at(tree, path, String("[age]"))
        assert new.get(String("profile")).get("age") == String("[age]")

    def test_original_tree_is_untouched(self):
        """The input tree is not modified."""
        tree = _user_tree()
        replace_at(tree, (Step(StepKind.KEY, String("name")),), String("Bob"))
        assert tree == _user_tree()

    def test_replace_sequence_item(self):
        """Index steps address sequence positions."""
        tree = _user_tree()
        path = (Step(StepKind.KEY, String("tags")), Step(StepKind.INDEX, 1))
        new = replace_at(tree, path, Nil())
        assert new.get(String("tags")) == Seq([String("a"), Nil()])

    def test_empty_path_replaces_root(self):
        """An empty path returns the replacement itself."""
        assert replace_at(_user_tree(), (), Integer(0)) == Integer(0)

    def test_replace_enum_payload(self):
        """The payload of an enum variant is reachable with a PAYLOAD step."""
        tree = EnumVariant("Shape", "Circle", Float(1.5))
        new = replace_at(tree, (Step(StepKind.PAYLOAD, "Circle"),), Float(0.0))
        assert new == EnumVariant("Shape", "Circle", Float(0.0))

    def test_missing_key_raises_key_error(self):
        """A key that does not exist raises KeyError."""
        with pytest.raises(KeyError):
            replace_at(_user_tree(), (Step(StepKind.KEY, String("nope")),), Nil())

    def test_out_of_range_index_raises_index_error(self):
        """An out-of-range index raises IndexError."""
        path = (Step(StepKind.KEY, String("tags")), Step(StepKind.INDEX, 5))
        with pytest.raises(IndexError):
            replace_at(_user_tree(), path, Nil())


class TestPrimitive:
    """Tests for primitive() replacement conversion."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, Nil()),
            (True, Bool(True)),
            (3, Integer(3)),
            (1.5, Float(1.5)),
            ("x", String("x")),
        ],
    )
    def test_scalars(self, value, expected):
        """Plain scalars convert to the matching node."""
        assert primitive(value) == expected

    def test_rejects_containers(self):
        """Lists are not valid replacements."""
        with pytest.raises(TypeError):
            primitive([1, 2])

    def test_rejects_non_primitive_content(self):
        """Container Content nodes are not valid replacements."""
        with pytest.raises(TypeError):
            primitive(Seq([]))
