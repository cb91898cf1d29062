"""Tests for deep comparison."""

import logging
import queue
import weakref
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional

import pytest
from deepcheck import (
    Notice,
    default_options,
    equal,
    equal_error,
    not_equal,
    register_type_checker,
)
from deepcheck import options as options_module


@dataclass
class TIntStr:
    Int: int
    Str: str


@dataclass
class TPriv:
    Pub: int
    _priv: int


@dataclass
class TMap:
    M: dict = field(default_factory=dict)


@dataclass
class TNested:
    Name: str
    Child: Optional["TNested"] = None


class TNode:
    def __init__(self, name):
        self.Name = name
        self.Other = None

    def greet(self):
        return self.Name


class MyInt(int):
    pass


class Color(Enum):
    RED = 1
    BLUE = 2


class Weird:
    def __eq__(self, other):
        raise TypeError("cannot compare")

    __hash__ = object.__hash__


class TSlotted:
    __slots__ = ("Name", "Value")

    def __init__(self, name):
        self.Name = name


def _lines(*lines):
    return "\n".join(lines)


class TestScenarios:
    """Test the basic comparison outcomes."""

    def test_equal_logs_trail(self):
        """Test that equal values produce no notice and log their trail."""
        log = []
        assert equal(42, 42, trail="type.field", trail_log=log) is None
        assert log == ["type.field"]

    def test_different_values(self):
        """Test the notice for two different integers."""
        err = equal(42, 44, trail="type.field")

        assert str(err) == _lines(
            "expected values to be equal:",
            "  trail: type.field",
            "   want: 42",
            "   have: 44",
        )

    def test_different_types(self):
        """Test the notice for values of different types."""
        err = equal(42, "42")

        assert str(err) == _lines(
            "expected values to be equal:",
            "  want type: int",
            "  have type: str",
        )

    def test_different_lengths(self):
        """Test the notice for lists of different length, with a diff."""
        err = equal([1, 2], [1], trail="type.field")

        assert str(err) == _lines(
            "expected values to be equal:",
            "     trail: type.field",
            "  want len: 2",
            "  have len: 1",
            "      want:",
            "            list{",
            "              1,",
            "              2,",
            "            }",
            "      have:",
            "            list{",
            "              1,",
            "            }",
            "      diff:",
            "            @@ -1,3 +1,4 @@",
            "             list{",
            "               1,",
            "            +  2,",
            "             }",
        )

    def test_struct_collects_all_mismatches(self):
        """Test that every mismatched field gets its own notice."""
        err = equal(TIntStr(42, "abc"), TIntStr(44, "xyz"))

        assert err.chain_len() == 2
        assert str(err) == _lines(
            "multiple expectations violated:",
            "  error: expected values to be equal",
            "  trail: TIntStr.Int",
            "   want: 42",
            "   have: 44",
            "      ---",
            "  error: expected values to be equal",
            "  trail: TIntStr.Str",
            "   want: \"abc\"",
            "   have: \"xyz\"",
        )

    def test_cycles(self):
        """Test that structurally equal cyclic graphs compare equal."""
        a1, b1 = TNode("a"), TNode("b")
        a1.Other, b1.Other = b1, a1
        a2, b2 = TNode("a"), TNode("b")
        a2.Other, b2.Other = b2, a2

        assert equal(a1, a2) is None

    def test_cycles_with_mismatch(self):
        """Test that mismatches inside cyclic graphs are still found."""
        a1, b1 = TNode("a"), TNode("b")
        a1.Other, b1.Other = b1, a1
        a2, b2 = TNode("a"), TNode("c")
        a2.Other, b2.Other = b2, a2

        err = equal(a1, a2)
        assert err.trail == "TNode.Other.Name"

    def test_self_referencing_lists(self):
        """Test lists containing themselves."""
        want, have = [1], [1]
        want.append(want)
        have.append(have)

        assert equal(want, have) is None


class TestNil:
    """Test comparisons involving None."""

    def test_both_nil(self):
        """Test that two None values are equal."""
        assert equal(None, None) is None

    def test_one_nil(self):
        """Test that a None value has no type rows."""
        assert str(equal(None, 123)) == _lines(
            "expected values to be equal:",
            "  want: nil",
            "  have: 123",
        )

    def test_nil_field(self):
        """Test a nested None field."""
        err = equal(TNested("a", TNested("b")), TNested("a"))

        assert err.trail == "TNested.Child"
        assert err.row("have").value() == "nil"


class TestTrails:
    """Test trails logged while walking values."""

    def setup_method(self):
        self.log = []

    def test_struct(self):
        """Test struct field trails."""
        equal(TIntStr(1, "a"), TIntStr(1, "a"), trail_log=self.log)
        assert self.log == ["TIntStr.Int", "TIntStr.Str"]

    def test_list_and_tuple(self):
        """Test sequence index trails."""
        equal([1, 2], [1, 2], trail_log=self.log)
        equal((1,), (1,), trail_log=self.log)

        assert self.log == ["<slice>[0]", "<slice>[1]", "<array>[0]"]

    def test_map(self):
        """Test that map keys are visited in sorted order."""
        equal({"B": 1, "A": 2}, {"A": 2, "B": 1}, trail_log=self.log)
        assert self.log == ['map["A"]', 'map["B"]']

    def test_map_in_list(self):
        """Test a map nested in a list."""
        err = equal([{"A": 1}], [{"A": 2}])
        assert err.trail == '<slice>[0]map["A"]'

    def test_map_in_struct(self):
        """Test a map nested in a struct."""
        err = equal(TMap({"a": 1}), TMap({"a": 2}))
        assert err.trail == 'TMap.M["a"]'

    def test_set(self):
        """Test set element trails."""
        equal({1, 2}, {2, 1}, trail_log=self.log)
        assert self.log == ["<set>[1]", "<set>[2]"]

    def test_nested_struct(self):
        """Test that nested struct trails do not repeat type names."""
        equal(TNested("a", TNested("b")), TNested("a", TNested("b")), trail_log=self.log)
        assert self.log == [
            "TNested.Name",
            "TNested.Child.Name",
            "TNested.Child.Child",
        ]

    def test_identical_list_is_not_walked(self):
        """Test that comparing a list with itself only logs its own trail."""
        lst = [1, 2]
        assert equal(lst, lst, trail="x", trail_log=self.log) is None
        assert self.log == ["x"]


class TestContainers:
    """Test comparison of sequences, mappings and sets."""

    def test_missing_map_key(self):
        """Test that a key missing from have is reported as nil."""
        err = equal({"A": 1, "B": 2}, {"A": 1, "C": 2})

        assert str(err) == _lines(
            "expected values to be equal:",
            "  trail: map[\"B\"]",
            "   want: 2",
            "   have: nil",
        )

    def test_map_length(self):
        """Test that maps of different length report both lengths."""
        err = equal({"A": 1}, {"A": 1, "B": 2})

        assert err.row("want len").value() == "1"
        assert err.row("have len").value() == "2"

    def test_set_missing_element(self):
        """Test that an element missing from have is reported."""
        err = equal({1, 2}, {1, 3})

        assert err.trail == "<set>[2]"
        assert err.row("want").value() == "2"
        assert err.row("have").value() == "nil"

    def test_bytes(self):
        """Test that bytes are compared byte by byte."""
        err = equal(b"ab", b"ac")

        assert str(err) == _lines(
            "expected values to be equal:",
            "  trail: <bytes>[1]",
            "   want: 0x62 ('b')",
            "   have: 0x63 ('c')",
        )

    def test_list_elements(self):
        """Test that each mismatched element is reported."""
        err = equal([1, 2, 3], [1, 5, 6])

        assert [n.trail for n in err.head().walk()] == ["<slice>[1]", "<slice>[2]"]

    def test_multiline_strings(self):
        """Test that multiline strings get a diff row."""
        err = equal("a\nb\nc", "a\nx\nc")
        assert err.row("diff").value() == "@@ -1,3 +1,3 @@\n a\n-x\n+b\n c"

    def test_unset_slot_on_both_sides(self):
        """Test that a slot unset on both sides is equal and logged."""
        log = []
        value = TSlotted("a")

        assert equal(value, value, trail_log=log) is None
        assert equal(value, TSlotted("a")) is None
        assert log == ["TSlotted.Name", "TSlotted.Value"]

    def test_unset_slot_on_one_side(self):
        """Test that a slot set on one side only is reported as nil."""
        have = TSlotted("a")
        have.Value = 1

        err = equal(TSlotted("a"), have)

        assert err.trail == "TSlotted.Value"
        assert err.row("want").value() == "nil"
        assert err.row("have").value() == "1"

    def test_set_elements_compared_by_type(self):
        """Test that hash-equal set elements of different types differ."""
        err = equal({1}, {True})

        assert err.trail == "<set>[1]"
        assert err.row("want type").value() == "int"
        assert err.row("have type").value() == "bool"

    def test_set_of_tuples(self):
        """Test that matched tuple elements are compared element by element."""
        assert equal(frozenset({(1, "a")}), frozenset({(1, "a")})) is None


class TestOptions:
    """Test comparison options."""

    def test_skip_trails(self):
        """Test that skipped trails are not compared and logged as skipped."""
        log = []
        err = equal(
            TIntStr(1, "a"),
            TIntStr(1, "b"),
            skip_trails=["TIntStr.Str"],
            trail_log=log,
        )

        assert err is None
        assert log == ["TIntStr.Int", "TIntStr.Str <skipped>"]

    def test_unexported_fields(self):
        """Test that private fields are compared by default."""
        err = equal(TPriv(1, 2), TPriv(1, 3))
        assert err.trail == "TPriv._priv"

    def test_skip_unexported(self):
        """Test that skip_unexported skips private fields."""
        log = []
        assert equal(TPriv(1, 2), TPriv(1, 3), skip_unexported=True, trail_log=log) is None
        assert log == ["TPriv.Pub", "TPriv._priv <skipped>"]

    def test_base_types(self):
        """Test that subclasses of primitives differ in type by default."""
        err = equal(MyInt(42), 42)

        assert err.row("want type").value() == "test_equal.MyInt"
        assert err.row("have type").value() == "int"

    def test_cmp_base_types(self):
        """Test that cmp_base_types compares the underlying values."""
        assert equal(MyInt(42), 42, cmp_base_types=True) is None

        err = equal(MyInt(42), 43, cmp_base_types=True)
        assert err.row("want").value() == "42"
        assert err.row("have").value() == "43"

    def test_options_instance(self):
        """Test passing an options instance with overrides."""
        ops = default_options(trail="T.F")
        err = equal(1, 2, ops, skip_unexported=True)

        assert err.trail == "T.F"
        assert ops.skip_unexported is False

    def test_unknown_option(self):
        """Test that unknown options are rejected."""
        with pytest.raises(TypeError):
            equal(1, 1, no_such_option=True)


class TestCheckers:
    """Test custom trail and type checkers."""

    def test_type_checker(self):
        """Test that a type checker replaces the built-in comparison."""
        assert equal(1, 2, type_checkers={int: lambda w, h, o: None}) is None

    def test_trail_checker_wins(self):
        """Test that trail checkers take precedence over type checkers."""
        seen = []

        def chk_trail(want, have, ops):
            seen.append(ops.trail)
            return Notice("trail checker")

        def chk_type(want, have, ops):
            return Notice("type checker")

        err = equal(
            TIntStr(1, "a"),
            TIntStr(2, "a"),
            trail_checkers={"TIntStr.Int": chk_trail},
            type_checkers={int: chk_type},
        )

        assert err.header == "trail checker"
        assert err.chain_len() == 1
        assert seen == ["TIntStr.Int"]

    def test_checker_on_skipped_trail(self):
        """Test that skipped trails are not passed to checkers."""
        def chk(want, have, ops):
            return Notice("called")

        err = equal(
            TIntStr(1, "a"),
            TIntStr(1, "a"),
            trail_checkers={"TIntStr.Int": chk},
            skip_trails=["TIntStr.Int"],
        )
        assert err is None

    def test_global_type_checker(self, monkeypatch, caplog):
        """Test registering a global type checker."""
        monkeypatch.setattr(options_module, "_TYPE_CHECKERS", {})

        with caplog.at_level(logging.INFO, logger="deepcheck.options"):
            register_type_checker(Decimal, lambda w, h, o: None)

        assert "Registering type checker for: decimal.Decimal" in caplog.text
        assert equal(Decimal("1"), Decimal("2")) is None

    def test_override_global_checker_warns(self, monkeypatch, caplog):
        """Test that a per call checker overriding a global one logs a warning."""
        monkeypatch.setattr(options_module, "_TYPE_CHECKERS", {})
        register_type_checker(Decimal, lambda w, h, o: None)

        with caplog.at_level(logging.WARNING, logger="deepcheck.options"):
            err = equal(Decimal("1"), Decimal("1"), type_checkers={Decimal: lambda w, h, o: Notice("x")})

        assert "Overwriting the global type checker for: decimal.Decimal" in caplog.text
        assert err.header == "x"


class TestOtherKinds:
    """Test functions, queues, weak references, errors and opaque values."""

    def test_funcs(self):
        """Test that functions compare by identity."""
        assert equal(len, len) is None
        assert str(equal(len, abs)) == _lines(
            "expected values to be equal:",
            "  want: <func>(<addr>)",
            "  have: <func>(<addr>)",
        )

    def test_bound_methods(self):
        """Test that bound methods compare by receiver and function."""
        node = TNode("a")

        assert equal(node.greet, node.greet) is None
        assert equal(node.greet, TNode("a").greet) is not None

    def test_queues(self):
        """Test that queues compare by identity."""
        q = queue.Queue()

        assert equal(q, q) is None
        assert str(equal(q, queue.Queue())) == _lines(
            "expected values to be equal:",
            "  want: (queue.Queue)(<addr>)",
            "  have: (queue.Queue)(<addr>)",
        )

    def test_weakrefs(self):
        """Test that weak references compare their referents."""
        want, same, other = TIntStr(1, "a"), TIntStr(1, "a"), TIntStr(2, "a")

        assert equal(weakref.ref(want), weakref.ref(same)) is None
        assert equal(weakref.ref(want), weakref.ref(other)).trail == "TIntStr.Int"

    def test_errors(self):
        """Test that exceptions compare by type and arguments."""
        assert equal(ValueError("a"), ValueError("a")) is None

        err = equal(ValueError("a"), ValueError("b"))
        assert err.row("want").value() == '"a"'
        assert err.row("have").value() == '"b"'

    def test_other_values(self):
        """Test values compared with ==."""
        assert equal(Decimal("1.0"), Decimal("1.00")) is None
        assert equal(Color.RED, Color.BLUE).row("want").value() == "Color.RED"

    def test_raising_eq(self):
        """Test that values raising on == are reported."""
        assert str(equal(Weird(), Weird())) == _lines(
            "cannot compare values:",
            "  cause: value cannot be used without raising",
            "   hint: use skip_trails or skip_unexported option to skip this field",
        )


class TestSymmetry:
    """Test general properties of equal."""

    VALUES = [
        None,
        0,
        1,
        "a",
        [1, 2],
        [1],
        {"a": 1},
        {"a": 2},
        {1, 2},
        TIntStr(1, "a"),
        TIntStr(1, "b"),
    ]

    @pytest.mark.parametrize("value", VALUES)
    def test_reflexive(self, value):
        """Test that every value equals itself."""
        assert equal(value, value) is None

    def test_symmetric(self):
        """Test that failure does not depend on argument order."""
        for a in self.VALUES:
            for b in self.VALUES:
                assert (equal(a, b) is None) == (equal(b, a) is None)


class TestNotEqual:
    """Test not_equal and equal_error."""

    def test_equal_values(self):
        """Test that equal values produce a notice."""
        assert str(not_equal(1, 1)) == _lines(
            "expected values not to be equal:",
            "  want: 1",
            "  have: 1",
        )

    def test_different_values(self):
        """Test that different values pass."""
        assert not_equal(1, 2) is None

    def test_equal_error(self):
        """Test building a notice directly."""
        err = equal_error([1], (1,), default_options(trail="T.F"))

        assert err.trail == "T.F"
        assert err.row("want type").value() == "list"
        assert err.row("have type").value() == "tuple"
        assert err.row("diff") is None
