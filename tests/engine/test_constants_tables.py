"""Tests for lazily evaluated constants and the command table view."""

from __future__ import annotations

import pytest

import giacbind
from giacbind.engine import constants
from giacbind.engine.runtime import GiacRuntime
from giacbind.engine.tables import CommandRow, clear_commands_cache, commands_table


class TestConstants:
    def test_module_attribute(self, runtime: GiacRuntime) -> None:
        assert giacbind.pi.text == "pi"
        assert giacbind.pi is giacbind.pi

    def test_all_constants(self, runtime: GiacRuntime) -> None:
        for name in ("pi", "e", "i", "inf"):
            assert constants.constant(name).text == name

    def test_evaluated_once(self, runtime: GiacRuntime, fake_native) -> None:
        constants.constant("e")
        constants.constant("e")
        assert fake_native.evals().count("e") == 1

    def test_clear_cache(self, runtime: GiacRuntime) -> None:
        first = constants.constant("pi")
        constants.clear_constants_cache()
        assert constants.constant("pi") is not first

    def test_unknown(self, runtime: GiacRuntime) -> None:
        with pytest.raises(KeyError):
            constants.constant("tau")
        with pytest.raises(AttributeError):
            giacbind.tau  # noqa: B018


class TestCommandsTable:
    def test_rows(self, runtime: GiacRuntime, fake_native) -> None:
        rows = commands_table()
        assert len(rows) == len(fake_native.commands)
        factor = next(row for row in rows if row.name == "factor")
        assert factor == CommandRow("factor", "algebra", "Factorizes a polynomial.")

    def test_cached_until_cleared(self, runtime: GiacRuntime, fake_native) -> None:
        commands_table()
        fake_native.helps["sin"] = "Description: Sine."
        sin = next(row for row in commands_table() if row.name == "sin")
        assert sin.description == ""
        clear_commands_cache()
        sin = next(row for row in commands_table() if row.name == "sin")
        assert sin.description == "Sine."

    def test_returns_copy(self, runtime: GiacRuntime) -> None:
        rows = commands_table()
        rows.clear()
        assert commands_table()
