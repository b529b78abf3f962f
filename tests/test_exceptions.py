"""Tests for exceptions.py - the catalog error hierarchy."""

from idloc_search.shared.exceptions import (
    APIError,
    CatalogSearchError,
    ConfigurationError,
    DataError,
    ErrorCategory,
    ErrorContext,
    ErrorSeverity,
    InvalidQueryError,
    MalformedGraphError,
    NetworkError,
    NotFoundError,
    ParseError,
    RateLimitError,
    ServiceUnavailableError,
    ValidationError,
)


class TestCatalogSearchError:
    def test_basic_creation(self):
        e = CatalogSearchError("test error")
        assert str(e) == "test error"
        assert e.severity == ErrorSeverity.ERROR
        assert e.category == ErrorCategory.API
        assert not e.retryable

    def test_to_agent_message(self):
        ctx = ErrorContext(suggestion="Check the LCCN", example='get_contributor_works(lccn="n1")')
        msg = CatalogSearchError("bad", context=ctx, retryable=True).to_agent_message()
        assert "❌ **Error**: bad" in msg
        assert "Check the LCCN" in msg
        assert "get_contributor_works" in msg
        assert "retryable" in msg

    def test_context_with_updates(self):
        ctx = ErrorContext(tool_name="a").with_updates(suggestion="b")
        assert (ctx.tool_name, ctx.suggestion) == ("a", "b")


class TestSubclasses:
    def test_api_errors_retryable(self):
        assert APIError("x").retryable
        assert NetworkError().retryable
        assert ServiceUnavailableError().retryable

    def test_rate_limit(self):
        e = RateLimitError(retry_after=7.0)
        assert e.context.retry_after == 7.0
        assert e.severity == ErrorSeverity.TRANSIENT
        assert e.context.suggestion

    def test_network_status_code(self):
        e = NetworkError("HTTP 403", status_code=403)
        assert e.status_code == 403
        assert e.category == ErrorCategory.NETWORK

    def test_service_unavailable_prefix(self):
        assert str(ServiceUnavailableError("down", service="Wikidata")) == "Wikidata: down"

    def test_validation_not_retryable(self):
        e = ValidationError("bad")
        assert not e.retryable
        assert e.category == ErrorCategory.VALIDATION

    def test_invalid_query(self):
        e = InvalidQueryError("a", "too short")
        assert "too short" in str(e)
        assert e.context.input_value == "a"
        assert e.context.example

    def test_not_found(self):
        e = NotFoundError("Work", "123")
        assert str(e) == "Work not found: 123"
        assert isinstance(e, DataError)
        assert not e.retryable

    def test_parse_error_source(self):
        assert str(ParseError("bad json", source="id.loc.gov")) == "Parse error (id.loc.gov): bad json"

    def test_malformed_graph(self):
        e = MalformedGraphError("blank agent", node_id="_:b0")
        assert e.node_id == "_:b0"
        assert e.context.input_value == "_:b0"

    def test_configuration(self):
        e = ConfigurationError("bad timeout")
        assert e.severity == ErrorSeverity.CRITICAL
        assert e.category == ErrorCategory.CONFIGURATION
