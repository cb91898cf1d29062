"""Tests for comparison options and trail building."""

from datetime import timedelta

import pytest
from deepcheck import Dump, Options, RegistrationError, default_options, field_name, register_type_checker
from deepcheck import options as options_module


def _checker(want, have, ops):
    return None


class TestDefaults:
    """Test default option values."""

    def test_defaults(self):
        """Test the values of a fresh Options."""
        ops = default_options()

        assert isinstance(ops.dumper, Dump)
        assert ops.trail == ""
        assert ops.trail_log is None
        assert ops.recent == timedelta(seconds=10)
        assert ops.skip_trails == []
        assert ops.skip_unexported is False
        assert ops.cmp_base_types is False

    def test_unknown_option(self):
        """Test that unknown option names raise TypeError."""
        with pytest.raises(TypeError):
            default_options(bogus=1)

    def test_skip_trails_copied(self):
        """Test that skip_trails accept any iterable and are copied."""
        trails = ("T.A", "T.B")
        ops = default_options(skip_trails=trails)

        assert ops.skip_trails == ["T.A", "T.B"]

    def test_global_checkers_copied(self, monkeypatch):
        """Test that changing the options does not change the global registry."""
        monkeypatch.setattr(options_module, "_TYPE_CHECKERS", {})
        register_type_checker(int, _checker)

        ops = default_options()
        del ops.type_checkers[int]

        assert int in options_module._TYPE_CHECKERS
        assert int in default_options().type_checkers


class TestRegistry:
    """Test the global type checker registry."""

    def test_register_twice(self, monkeypatch):
        """Test that an existing checker cannot be overwritten."""
        monkeypatch.setattr(options_module, "_TYPE_CHECKERS", {})
        register_type_checker(int, _checker)

        with pytest.raises(RegistrationError) as exc_info:
            register_type_checker(int, _checker)
        assert exc_info.value.reason == "cannot overwrite an existing type checker"

    def test_register_none(self, monkeypatch):
        """Test that a None checker is rejected."""
        monkeypatch.setattr(options_module, "_TYPE_CHECKERS", {})

        with pytest.raises(RegistrationError) as exc_info:
            register_type_checker(int, None)
        assert str(exc_info.value) == "Cannot register 'int': type checker must not be None"


class TestTrails:
    """Test trail builders."""

    def test_struct_trail(self):
        """Test that the type name only starts a trail."""
        assert Options().struct_trail("T", "F").trail == "T.F"
        assert Options(trail="a.b").struct_trail("T", "F").trail == "a.b.F"
        assert Options().struct_trail("", "F").trail == "F"
        assert Options(trail="a").struct_trail("T", "").trail == "a"

    def test_arr_trail(self):
        """Test sequence index trails."""
        assert Options().arr_trail("slice", 1).trail == "<slice>[1]"
        assert Options(trail="T.F").arr_trail("slice", 0).trail == "T.F[0]"
        assert Options().arr_trail("", 2).trail == "[2]"

    def test_map_trail(self):
        """Test map key trails."""
        assert Options().map_trail('"A"').trail == 'map["A"]'
        assert Options(trail="T.F").map_trail("1").trail == "T.F[1]"
        assert Options(trail="<slice>[0]").map_trail("1").trail == "<slice>[0]map[1]"

    def test_set_trail(self):
        """Test set element trails."""
        assert Options().set_trail("1").trail == "<set>[1]"
        assert Options(trail="T.F").set_trail("1").trail == "T.F[1]"

    def test_trail_builders_copy(self):
        """Test that trail builders leave the original options unchanged."""
        ops = Options(trail="T")
        ops.struct_trail("T", "F")
        assert ops.trail == "T"

    def test_log_trail(self):
        """Test that only non empty trails are logged."""
        log = []
        Options(trail_log=log).log_trail()
        Options(trail="T.F", trail_log=log).log_trail()

        assert log == ["T.F"]

    def test_skipped(self):
        """Test that skipped trails carry a suffix."""
        log = []
        Options(trail="T.F", trail_log=log).skipped()
        assert log == ["T.F <skipped>"]

    def test_field_name(self):
        """Test the field trail helper."""
        fld = field_name(Options(), "TRec")

        assert fld("Name").trail == "TRec.Name"
        assert fld("Age").trail == "TRec.Age"
