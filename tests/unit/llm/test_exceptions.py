"""Unit tests for provider error classification."""

import pytest

from ai_proxy.llm.exceptions import (
    LocalFailure,
    MissingCredential,
    ProviderError,
    RateLimited,
    UnknownProvider,
    UpstreamError,
    UpstreamRejected,
    is_rate_limit_error,
    is_rate_limit_signal,
)


class TestFromResponse:
    """Test UpstreamError.from_response subclass selection."""

    def test_429_is_rate_limited(self):
        error = UpstreamError.from_response("groq", 429, "slow down")
        assert isinstance(error, RateLimited)
        assert error.status_code == 429
        assert error.details == {"status": 429, "body": "slow down"}

    def test_other_status_is_rejected(self):
        error = UpstreamError.from_response("groq", 500, "internal")
        assert isinstance(error, UpstreamRejected)
        assert error.message == "groq API error 500: internal"
        assert error.provider == "groq"

    @pytest.mark.parametrize(
        "body", ["Rate limit exceeded", "rate_limit_exceeded", "RateLimitError", "rate exceeded"]
    )
    def test_rate_marker_in_body_is_rate_limited(self, body):
        assert isinstance(UpstreamError.from_response("gemini", 400, body), RateLimited)

    @pytest.mark.parametrize("body", ["could not generate", "separated values", "accurate"])
    def test_words_containing_rate_are_not_rate_limited(self, body):
        assert isinstance(UpstreamError.from_response("gemini", 400, body), UpstreamRejected)


class TestIsRateLimitSignal:
    def test_status_alone(self):
        assert is_rate_limit_signal(429)

    def test_text_alone(self):
        assert is_rate_limit_signal(None, "Rate limited")

    def test_neither(self):
        assert not is_rate_limit_signal(500, "boom")
        assert not is_rate_limit_signal(None)


class TestIsRateLimitError:
    def test_rate_limited_type(self):
        assert is_rate_limit_error(RateLimited("x", status_code=429))

    def test_other_provider_errors_are_classified_by_type(self):
        """A rejected error is never retried, even if its text mentions rate."""
        assert not is_rate_limit_error(UpstreamRejected("Rate plan expired", status_code=403))
        assert not is_rate_limit_error(LocalFailure("Rate"))
        assert not is_rate_limit_error(UnknownProvider("openai"))

    def test_foreign_exception_with_429_in_message(self):
        assert is_rate_limit_error(RuntimeError("HTTP 429 Too Many Requests"))

    def test_foreign_exception_with_rate_in_message(self):
        assert is_rate_limit_error(RuntimeError("Rate limit hit"))

    def test_foreign_exception_with_status_attribute(self):
        error = RuntimeError("slow down")
        error.status_code = 429
        assert is_rate_limit_error(error)

    def test_foreign_exception_without_signal(self):
        assert not is_rate_limit_error(ValueError("generate failed"))


def test_hierarchy():
    assert issubclass(RateLimited, UpstreamError)
    assert issubclass(UpstreamRejected, UpstreamError)
    assert issubclass(MissingCredential, LocalFailure)
    for cls in (UpstreamError, UnknownProvider, LocalFailure):
        assert issubclass(cls, ProviderError)


def test_details_default_to_empty_dict():
    assert ProviderError("boom").details == {}
