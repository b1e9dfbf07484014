"""Tests for GiacError and the error-kind taxonomy."""

from __future__ import annotations

import pytest

from giacbind.domain.errors import (
    ErrorKind,
    GiacError,
    UnknownCommandError,
    released_error,
    unavailable_error,
)


class TestGiacError:
    def test_defaults_to_eval_kind(self) -> None:
        err = GiacError("boom")
        assert err.kind is ErrorKind.EVAL
        assert err.message == "boom"
        assert err.suggestions == []

    def test_accepts_kind_string(self) -> None:
        assert GiacError("bad", "parse").kind is ErrorKind.PARSE

    def test_unknown_kind_falls_back_to_eval(self) -> None:
        assert GiacError("bad", "nonsense").kind is ErrorKind.EVAL

    def test_str_includes_kind(self) -> None:
        assert str(GiacError("oops", ErrorKind.TYPE)) == "GiacError(type): oops"

    def test_is_exception(self) -> None:
        with pytest.raises(GiacError, match="oops"):
            raise GiacError("oops")

    def test_suggestions_copied(self) -> None:
        names = ["factor"]
        err = GiacError("x", suggestions=names)
        names.append("expand")
        assert err.suggestions == ["factor"]


class TestUnknownCommandError:
    def test_carries_command_and_suggestions(self) -> None:
        err = UnknownCommandError("factr", "Unknown command: factr.", suggestions=["factor"])
        assert err.command == "factr"
        assert err.kind is ErrorKind.EVAL
        assert err.suggestions == ["factor"]
        assert isinstance(err, GiacError)


class TestErrorFactories:
    def test_released_error(self) -> None:
        err = released_error("context")
        assert err.kind is ErrorKind.RESOURCE
        assert "context" in err.message
        assert "released" in err.message

    def test_unavailable_error_mentions_env_var(self) -> None:
        err = unavailable_error()
        assert err.kind is ErrorKind.RESOURCE
        assert "GIACBIND_WRAPPER_LIB" in err.message
