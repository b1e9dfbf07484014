"""Tests for GiacContext evaluation and error classification."""

from __future__ import annotations

import pytest

from giacbind.domain.errors import ErrorKind, GiacError
from giacbind.engine.context import GiacContext, failure_error
from giacbind.engine.expr import GiacExpr
from giacbind.engine.runtime import GiacRuntime
from giacbind.infrastructure.lock import GIAC_LOCK


class TestEval:
    def test_returns_expression(self, runtime: GiacRuntime, fake_native) -> None:
        fake_native.responses["factor(x^2-1)"] = "(x-1)*(x+1)"
        result = runtime.default_context.eval("factor(x^2-1)")
        assert isinstance(result, GiacExpr)
        assert result.text == "(x-1)*(x+1)"

    def test_two_plus_three(self, runtime: GiacRuntime, fake_native) -> None:
        fake_native.responses["2+3"] = "5"
        result = runtime.default_context.eval("2+3")
        assert result.text == "5"
        assert int(result) == 5

    @pytest.mark.parametrize("text", ["", "   "])
    def test_empty_is_parse_error_without_native_call(
        self, runtime: GiacRuntime, fake_native, text: str
    ) -> None:
        with pytest.raises(GiacError) as exc_info:
            runtime.default_context.eval(text)
        assert exc_info.value.kind is ErrorKind.PARSE
        assert fake_native.evals() == []

    def test_parse_failure(self, runtime: GiacRuntime, fake_native) -> None:
        fake_native.failures["1+"] = (1, "syntax error line 1")
        with pytest.raises(GiacError) as exc_info:
            runtime.default_context.eval("1+")
        assert exc_info.value.kind is ErrorKind.PARSE
        assert exc_info.value.message == "syntax error line 1"

    def test_eval_failure_default_message(self, runtime: GiacRuntime, fake_native) -> None:
        fake_native.failures["boom(1)"] = (2, "")
        with pytest.raises(GiacError) as exc_info:
            runtime.default_context.eval("boom(1)")
        assert exc_info.value.kind is ErrorKind.EVAL
        assert exc_info.value.message == "Failed to evaluate expression: boom(1)"


class TestLifecycle:
    def test_create_and_release(self, runtime: GiacRuntime, fake_native) -> None:
        ctx = GiacContext.create(runtime)
        assert not ctx.released
        assert repr(ctx) == "GiacContext(live)"
        ctx.release()
        ctx.release()
        assert len(fake_native.freed_contexts) == 1
        assert repr(ctx) == "GiacContext(released)"

    def test_released_context_rejects_eval(self, runtime: GiacRuntime, fake_native) -> None:
        ctx = GiacContext.create(runtime)
        ctx.release()
        fake_native.calls.clear()
        with pytest.raises(GiacError) as exc_info:
            ctx.eval("1+1")
        assert exc_info.value.kind is ErrorKind.RESOURCE
        assert "context" in exc_info.value.message
        assert fake_native.calls == []

    def test_create_uses_installed_runtime(self, runtime: GiacRuntime) -> None:
        with GiacContext.create() as ctx:
            assert ctx.runtime is runtime

    def test_lock_is_process_wide(self, runtime: GiacRuntime) -> None:
        assert runtime.default_context.lock is GIAC_LOCK


class TestFailureError:
    def test_parse_code(self) -> None:
        assert failure_error(1, "bad", "x").kind is ErrorKind.PARSE

    def test_other_codes_are_eval(self) -> None:
        assert failure_error(2, "bad", "x").kind is ErrorKind.EVAL
        assert failure_error(0, "", "x").message == "Failed to evaluate expression: x"
