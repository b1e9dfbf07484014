"""Tests for CatalogService — help, search, suggestions, categories, status."""

from __future__ import annotations

from giacbind.engine.runtime import GiacRuntime
from giacbind.services.catalog import CatalogService
from giacbind.services.result import ErrorCode


class TestHelp:
    def test_parsed_help(self, runtime: GiacRuntime) -> None:
        result = CatalogService(runtime).help("factor")
        assert result.ok
        assert result.data["command"] == "factor"
        assert result.data["description"] == "Factorizes a polynomial."
        assert result.data["related"] == ["ifactor", "partfrac", "normal"]
        assert result.data["examples"] == ["factor(x^4-1)", "factor(x^4-4,sqrt(2))"]
        assert result.data["category"] == "algebra"
        assert result.warnings == []

    def test_missing_help_warns(self, runtime: GiacRuntime) -> None:
        result = CatalogService(runtime).help("sin")
        assert result.ok
        assert result.data["description"] == ""
        assert result.warnings == ["No help found for: sin"]

    def test_unknown_command(self, runtime: GiacRuntime) -> None:
        result = CatalogService(runtime).help("factr")
        assert result.error is not None
        assert result.error.code == ErrorCode.UNKNOWN_COMMAND
        assert "Did you mean: factor" in result.error.message

    def test_stub_mode(self, stub_runtime: GiacRuntime) -> None:
        result = CatalogService(stub_runtime).help("factor")
        assert result.ok
        assert result.warnings == ["Help not available in stub mode"]


class TestSearch:
    def test_prefix(self, runtime: GiacRuntime) -> None:
        result = CatalogService(runtime).search("tr")
        assert result.data["items"] == ["trace", "transpose"]
        assert result.data["count"] == 2
        assert result.data["mode"] == "prefix"

    def test_regex(self, runtime: GiacRuntime) -> None:
        result = CatalogService(runtime).search("^a", mode="regex")
        assert result.data["items"] == ["abs", "acos", "and", "asin", "atan"]

    def test_bad_regex(self, runtime: GiacRuntime) -> None:
        result = CatalogService(runtime).search("[", mode="regex")
        assert result.error is not None
        assert result.error.code == ErrorCode.INVALID_ARGUMENT

    def test_description(self, runtime: GiacRuntime) -> None:
        result = CatalogService(runtime).search("integral", mode="description")
        assert result.data["items"] == ["integrate"]


class TestSuggest:
    def test_ranked_with_distances(self, runtime: GiacRuntime) -> None:
        result = CatalogService(runtime).suggest("factr")
        assert result.data["input"] == "factr"
        assert result.data["items"] == [
            {"name": "factor", "distance": 1},
            {"name": "ifactor", "distance": 2},
        ]
        assert result.data["count"] == 2

    def test_limit(self, runtime: GiacRuntime) -> None:
        assert CatalogService(runtime).suggest("factr", n=1).data["count"] == 1

    def test_no_matches(self, runtime: GiacRuntime) -> None:
        assert CatalogService(runtime).suggest("zzzzzzzz").data["items"] == []


class TestCategories:
    def test_listing(self, runtime: GiacRuntime) -> None:
        result = CatalogService(runtime).categories()
        assert result.op == "categories"
        names = [item["name"] for item in result.data["items"]]
        assert names == sorted(names)
        assert "other" in names
        assert all(isinstance(item["count"], int) for item in result.data["items"])

    def test_single_category(self, runtime: GiacRuntime) -> None:
        result = CatalogService(runtime).categories("linear_algebra")
        assert result.op == "category"
        assert "det" in result.data["items"]
        assert result.data["count"] == len(result.data["items"])

    def test_other_lists_uncategorized(self, runtime: GiacRuntime) -> None:
        items = CatalogService(runtime).categories("other").data["items"]
        assert "factor" not in items
        assert "print" in items

    def test_unknown_category(self, runtime: GiacRuntime) -> None:
        result = CatalogService(runtime).categories("astrology")
        assert result.op == "categories"
        assert result.error is not None
        assert result.error.code == ErrorCode.INVALID_ARGUMENT


class TestStatus:
    def test_native(self, runtime: GiacRuntime, fake_native) -> None:
        result = CatalogService(runtime).status()
        assert result.ok
        data = result.data
        assert data["library_path"] == "/fake/libgiac_c.so"
        assert data["version"] == "1.9.0-fake"
        assert data["stub_mode"] is False
        assert data["command_count"] == len(fake_native.commands)
        assert data["help_count"] == 3
        assert data["suggestion_count"] == 4
        assert data["tier1"] is True
        assert result.warnings == []

    def test_stub(self, stub_runtime: GiacRuntime) -> None:
        result = CatalogService(stub_runtime).status()
        assert result.data["stub_mode"] is True
        assert result.data["library_path"] is None
        assert result.data["command_count"] == 0
        assert result.warnings == ["libgiac_c not found"]
