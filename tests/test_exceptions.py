"""Tests for the exception hierarchy."""

import pytest

from htachat.ai.providers.base import ProviderError, ProviderQuotaError
from htachat.exceptions import (
    ConfigurationError,
    HTAChatError,
    SessionBusyError,
    SessionNotFoundError,
    ValidationError,
)


class TestHTAChatError:
    def test_str_includes_context_and_cause(self):
        error = HTAChatError("failed", context={"key": "a"}, original_error=OSError("x"))
        assert str(error) == "failed (key=a) [caused by: OSError]"

    def test_context_defaults_empty(self):
        assert HTAChatError("failed").context == {}


class TestContextNotShared:
    """Test subclasses copy the caller's context instead of editing it."""

    @pytest.mark.parametrize(
        "build",
        [
            lambda ctx: ValidationError("bad", field="f", value="v", context=ctx),
            lambda ctx: ConfigurationError("missing", setting="gemini_api_key", context=ctx),
            lambda ctx: SessionNotFoundError("abc", context=ctx),
            lambda ctx: SessionBusyError("abc", context=ctx),
            lambda ctx: ProviderError("boom", provider="gemini", code=500, context=ctx),
        ],
    )
    def test_caller_context_unchanged(self, build):
        ctx = {"request": 1}
        error = build(ctx)

        assert ctx == {"request": 1}
        assert error.context is not ctx
        assert error.context["request"] == 1

    def test_shared_context_does_not_leak_between_errors(self):
        ctx: dict = {}
        first = ProviderQuotaError("quota", code="RESOURCE_EXHAUSTED", context=ctx)
        second = ValidationError("bad", field="messages", context=ctx)

        assert "field" not in first.context
        assert "code" not in second.context
