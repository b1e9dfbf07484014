"""Tests for CommandRegistry lookup, search, categories, and suggestions."""

from __future__ import annotations

import re

import pytest

from giacbind.domain.categories import (
    COMMAND_CATEGORIES,
    OTHER_CATEGORY,
    build_category_lookup,
    merge_categories,
)
from giacbind.domain.registry import CommandInfo, CommandRegistry

NAMES = ["factor", "ifactor", "cfactor", "expand", "sin", "cos", "gcd", "mystery", "zeta"]


@pytest.fixture
def registry() -> CommandRegistry:
    return CommandRegistry(NAMES, docs={"factor": "Description: Factorizes a polynomial."})


class TestMembership:
    def test_names_sorted(self, registry: CommandRegistry) -> None:
        assert registry.names == tuple(sorted(NAMES))
        assert len(registry) == len(NAMES)

    def test_contains(self, registry: CommandRegistry) -> None:
        assert "factor" in registry
        assert "factr" not in registry

    def test_accepts(self, registry: CommandRegistry) -> None:
        assert registry.accepts("sin")
        assert not registry.accepts("sinn")

    def test_empty_registry_accepts_everything(self) -> None:
        empty = CommandRegistry()
        assert empty.is_empty
        assert empty.accepts("anything")

    def test_info(self, registry: CommandRegistry) -> None:
        info = registry.info("factor")
        assert info == CommandInfo(
            name="factor",
            category="algebra",
            doc="Description: Factorizes a polynomial.",
        )
        assert registry.info("nope") is None


class TestSearch:
    def test_prefix(self, registry: CommandRegistry) -> None:
        assert registry.search("c") == ["cfactor", "cos"]

    def test_regex(self, registry: CommandRegistry) -> None:
        assert registry.search_regex("factor$") == ["cfactor", "factor", "ifactor"]
        assert registry.search_regex(re.compile("^s")) == ["sin"]

    def test_invalid_regex(self, registry: CommandRegistry) -> None:
        with pytest.raises(ValueError, match="Invalid regular expression"):
            registry.search_regex("(")

    def test_description(self, registry: CommandRegistry) -> None:
        assert registry.search_description("POLYNOMIAL") == ["factor"]
        assert registry.search_description("") == []

    def test_description_with_lookup(self, registry: CommandRegistry) -> None:
        docs = {"sin": "Sine function", "cos": "Cosine function"}
        found = registry.search_description("function", doc_for=lambda n: docs.get(n, ""))
        assert found == ["cos", "sin"]


class TestCategories:
    def test_primary_category_is_first_listed(self, registry: CommandRegistry) -> None:
        assert registry.category_of("gcd") == "algebra"
        assert registry.category_of("sin") == "trigonometry"
        assert registry.category_of("mystery") == OTHER_CATEGORY

    def test_categories_include_other(self, registry: CommandRegistry) -> None:
        cats = registry.categories()
        assert OTHER_CATEGORY in cats
        assert cats == sorted(cats)

    def test_commands_in_category(self, registry: CommandRegistry) -> None:
        assert "factor" in registry.commands_in_category("algebra")

    def test_other_lists_uncategorized_registered(self, registry: CommandRegistry) -> None:
        assert registry.commands_in_category(OTHER_CATEGORY) == ["mystery"]

    def test_unknown_category(self, registry: CommandRegistry) -> None:
        with pytest.raises(ValueError, match="Unknown category: bogus"):
            registry.commands_in_category("bogus")

    def test_merge_categories(self) -> None:
        merged = merge_categories(
            COMMAND_CATEGORIES,
            {"transforms": ["laplace"], "algebra": ["factor", "newcmd"], OTHER_CATEGORY: ["x"]},
        )
        assert merged["transforms"] == ("laplace",)
        assert merged["algebra"][-1] == "newcmd"
        assert merged["algebra"].count("factor") == 1
        assert OTHER_CATEGORY not in merged

    def test_lookup_first_wins(self) -> None:
        lookup = build_category_lookup({"a": ("x", "y"), "b": ("y", "z")})
        assert lookup == {"x": "a", "y": "a", "z": "b"}


class TestSuggestions:
    def test_suggest(self, registry: CommandRegistry) -> None:
        assert registry.suggest("factr")[0] == "factor"

    def test_suggest_with_distances(self, registry: CommandRegistry) -> None:
        assert registry.suggest_with_distances("factr", 1) == [("factor", 1)]

    def test_no_suggestions_for_exact(self, registry: CommandRegistry) -> None:
        assert "sin" not in registry.suggest("sin")
