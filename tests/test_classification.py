"""
Tests for exception classification.

Covers the ordered policy table, leak prevention for access-denied
errors, declared-status lookup and message fallbacks.
All tests use pure exception values; no network or framework required.
"""

import httpx
import pytest

from errorshield.application.classification import (
    ClassificationResult,
    ExceptionCategory,
    ExceptionClassifier,
    LogLevel,
    categorize,
)
from errorshield.domain.errors import (
    AccessDeniedError,
    IllegalStateError,
    InvalidRequestError,
    NotFoundError,
    UpstreamCallError,
    UpstreamErrorWrapper,
    UserError,
)
from errorshield.domain.message_decorator import ExceptionMessageDecorator
from errorshield.domain.response_status import ResponseStatusRegistry, response_status

registry = ResponseStatusRegistry()


@response_status(409, "Conflict", registry=registry)
class PipelineConflictError(Exception):
    pass


class ExecutionConflictError(PipelineConflictError):
    pass


@response_status(503, "Backend unavailable", registry=registry)
class BackendUnavailableError(Exception):
    pass


@response_status(404, "Pipeline not found", registry=registry)
class MissingPipelineError(Exception):
    pass


@response_status(422, registry=registry)
class UnprocessablePipelineError(Exception):
    pass


@response_status(423, "Locked", registry=registry)
class DiscoveryUnchangeableError(IllegalStateError):
    pass


class AmbiguousNotFoundError(NotFoundError, ValueError):
    pass


class DeniedNotFoundError(AccessDeniedError, NotFoundError):
    pass


@response_status(409, registry=registry)
class UnprintableConflictError(Exception):
    def __str__(self) -> str:
        raise TypeError("boom")


class UnprintableError(Exception):
    def __str__(self) -> str:
        raise TypeError("boom")


class _BareResponse:
    status_code = 503
    headers = {"Content-Type": "application/json"}


@pytest.fixture
def classifier() -> ExceptionClassifier:
    return ExceptionClassifier(registry=registry)


def _request() -> httpx.Request:
    return httpx.Request("GET", "https://clouddriver.local/applications/front50")


# ══════════════════════════════════════════════════════════════════════
# Categorization
# ══════════════════════════════════════════════════════════════════════


class TestCategorize:
    """Tests for first-match-wins category selection."""

    @pytest.mark.parametrize(
        ("exc", "expected"),
        [
            (AccessDeniedError("x"), ExceptionCategory.ACCESS_DENIED),
            (NotFoundError("x"), ExceptionCategory.NOT_FOUND),
            (InvalidRequestError("x"), ExceptionCategory.INVALID_REQUEST),
            (UserError("x"), ExceptionCategory.INVALID_REQUEST),
            (ValueError("x"), ExceptionCategory.INVALID_REQUEST),
            (IllegalStateError("x"), ExceptionCategory.ILLEGAL_STATE),
            (UpstreamCallError("x", "https://a"), ExceptionCategory.UPSTREAM_FAILURE),
            (httpx.ConnectError("x"), ExceptionCategory.UPSTREAM_FAILURE),
            (RuntimeError("x"), ExceptionCategory.GENERIC),
            (KeyboardInterrupt(), ExceptionCategory.GENERIC),
        ],
    )
    def test_category(self, exc: BaseException, expected: ExceptionCategory) -> None:
        assert categorize(exc) is expected

    def test_not_found_wins_over_invalid_request(self) -> None:
        """An exception in both categories takes the higher-priority one."""
        assert categorize(AmbiguousNotFoundError("x")) is ExceptionCategory.NOT_FOUND

    def test_access_denied_wins_over_not_found(self) -> None:
        assert categorize(DeniedNotFoundError("x")) is ExceptionCategory.ACCESS_DENIED


# ══════════════════════════════════════════════════════════════════════
# Fixed-status categories
# ══════════════════════════════════════════════════════════════════════


class TestAccessDenied:
    """Access-denied errors never leak their message."""

    @pytest.mark.parametrize(
        "message",
        [
            "user jdoe lacks role ADMIN",
            "token=sk_live_abc123 rejected by policy engine",
            "",
            None,
        ],
    )
    def test_message_is_static(self, classifier, message) -> None:
        result = classifier.classify(AccessDeniedError(message))
        assert result.status_code == 403
        assert result.message == "Access is denied"
        assert result.log_level is LogLevel.NONE

    def test_configured_static_message(self) -> None:
        classifier = ExceptionClassifier(access_denied_message="Forbidden")
        result = classifier.classify(AccessDeniedError("user jdoe lacks role ADMIN"))
        assert result.message == "Forbidden"

    def test_scenario_a(self, classifier) -> None:
        result = classifier.classify(AccessDeniedError("user jdoe lacks role ADMIN"))
        assert (result.status_code, result.message) == (403, "Access is denied")
        assert "jdoe" not in result.message


class TestNotFoundAndInvalidRequest:
    """Not-found and bad-input errors pass their message through verbatim."""

    @pytest.mark.parametrize(
        "message", ["Application front50 not found", "  padded  ", "ünïcødé ✓"]
    )
    def test_not_found_message_identity(self, classifier, message) -> None:
        result = classifier.classify(NotFoundError(message))
        assert result.status_code == 404
        assert result.message == message
        assert result.log_level is LogLevel.NONE

    @pytest.mark.parametrize(
        "exc_type", [InvalidRequestError, UserError, ValueError]
    )
    def test_invalid_request_message_identity(self, classifier, exc_type) -> None:
        result = classifier.classify(exc_type("limit must be positive"))
        assert result.status_code == 400
        assert result.message == "limit must be positive"

    def test_scenario_b(self, classifier) -> None:
        result = classifier.classify(ValueError("limit must be positive"))
        assert (result.status_code, result.message) == (400, "limit must be positive")

    def test_missing_message_falls_back_to_phrase(self, classifier) -> None:
        result = classifier.classify(NotFoundError())
        assert result.message == "Not Found"


# ══════════════════════════════════════════════════════════════════════
# Declared statuses
# ══════════════════════════════════════════════════════════════════════


class TestDeclaredStatus:
    """Tests for registry lookup on generic and illegal-state exceptions."""

    def test_scenario_d(self, classifier) -> None:
        """Blank message, declared 409 -> reason text, warn level."""
        result = classifier.classify(PipelineConflictError(""))
        assert result.status_code == 409
        assert result.message == "Conflict"
        assert result.log_level is LogLevel.WARNING
        assert "PipelineConflictError" in result.log_message

    def test_whitespace_message_uses_reason(self, classifier) -> None:
        result = classifier.classify(PipelineConflictError("   \t"))
        assert result.message == "Conflict"

    def test_own_message_preferred_over_reason(self, classifier) -> None:
        result = classifier.classify(PipelineConflictError("execution 42 already running"))
        assert result.message == "execution 42 already running"

    def test_lookup_walks_hierarchy(self, classifier) -> None:
        result = classifier.classify(ExecutionConflictError())
        assert result.status_code == 409
        assert result.message == "Conflict"

    def test_server_error_logs_at_error_with_traceback(self, classifier) -> None:
        result = classifier.classify(BackendUnavailableError("redis down"))
        assert result.status_code == 503
        assert result.log_level is LogLevel.ERROR
        assert result.log_traceback is True

    def test_declared_404_is_not_logged(self, classifier) -> None:
        result = classifier.classify(MissingPipelineError())
        assert result.status_code == 404
        assert result.message == "Pipeline not found"
        assert result.log_level is LogLevel.NONE

    def test_blank_reason_falls_back_to_phrase(self, classifier) -> None:
        result = classifier.classify(UnprocessablePipelineError())
        assert result.message == "Unprocessable Entity"

    def test_illegal_state_subclass_uses_declared_status(self, classifier) -> None:
        result = classifier.classify(DiscoveryUnchangeableError())
        assert result.category is ExceptionCategory.ILLEGAL_STATE
        assert result.status_code == 423
        assert result.message == "Locked"

    def test_illegal_state_without_declaration_is_500(self, classifier) -> None:
        result = classifier.classify(IllegalStateError())
        assert result.status_code == 500
        assert result.message == "Internal Server Error"
        assert result.log_level is LogLevel.ERROR

    def test_unprintable_exception_uses_phrase(self, classifier) -> None:
        result = classifier.classify(UnprintableConflictError())
        assert result.status_code == 409
        assert result.message == "Conflict"
        assert result.log_message == "Conflict: UnprintableConflictError: "


class TestUnclassified:
    """Tests for the catch-all 500 path."""

    def test_original_message_passed_through(self, classifier) -> None:
        result = classifier.classify(RuntimeError("db connection pool exhausted"))
        assert result.status_code == 500
        assert result.message == "db connection pool exhausted"
        assert result.log_level is LogLevel.ERROR
        assert result.log_traceback is True

    def test_blank_message_uses_fallback(self, classifier) -> None:
        result = classifier.classify(RuntimeError())
        assert result.message == "Internal Server Error"

    def test_unprintable_exception_uses_fallback(self, classifier) -> None:
        result = classifier.classify(UnprintableError())
        assert result.status_code == 500
        assert result.message == "Internal Server Error"
        assert result.log_level is LogLevel.ERROR

    def test_configured_fallback(self) -> None:
        classifier = ExceptionClassifier(
            registry=registry, fallback_message="Something went wrong"
        )
        assert classifier.classify(RuntimeError(" ")).message == "Something went wrong"


# ══════════════════════════════════════════════════════════════════════
# Upstream failures
# ══════════════════════════════════════════════════════════════════════


class TestUpstreamFailure:
    """Tests for failures of calls to other services."""

    def test_scenario_c(self, classifier) -> None:
        response = httpx.Response(
            502,
            headers={"Content-Type": "application/json"},
            content=b'{"error":"timeout"}',
            request=_request(),
        )
        exc = httpx.HTTPStatusError("upstream failed", request=_request(), response=response)

        result = classifier.classify(exc)

        assert result.status_code == 502
        assert result.message == "upstream failed"
        assert result.log_level is LogLevel.NONE
        assert result.additional_context == {
            "url": "https://clouddriver.local/applications/front50",
            "body": '{"error":"timeout"}',
        }
        assert isinstance(result.subject, UpstreamErrorWrapper)
        assert result.subject.additional_attributes == result.additional_context

    def test_upstream_call_error_with_response(self, classifier) -> None:
        response = httpx.Response(409, headers={"content-type": "text/plain"}, content=b"no")
        exc = UpstreamCallError("conflict upstream", "https://orca.local/tasks", response)

        result = classifier.classify(exc)

        assert result.status_code == 409
        assert result.additional_context == {"url": "https://orca.local/tasks"}

    def test_network_error_falls_back_to_500_at_warn(self, classifier) -> None:
        exc = httpx.ConnectError("connection refused", request=_request())

        result = classifier.classify(exc)

        assert result.status_code == 500
        assert result.message == "connection refused"
        assert result.log_level is LogLevel.WARNING
        assert result.subject is exc
        assert result.additional_context == {}

    def test_upstream_call_error_without_response(self, classifier) -> None:
        result = classifier.classify(UpstreamCallError(None, "https://orca.local"))
        assert result.status_code == 500
        assert result.message == "Internal Server Error"
        assert result.log_level is LogLevel.WARNING

    def test_response_without_reader_keeps_its_status(self, classifier) -> None:
        exc = UpstreamCallError("unavailable", "https://orca.local", _BareResponse())

        result = classifier.classify(exc)

        assert result.status_code == 503
        assert result.message == "unavailable"
        assert result.additional_context == {"url": "https://orca.local"}

    def test_response_without_status_is_502(self, classifier) -> None:
        result = classifier.classify(UpstreamCallError("x", "https://orca.local", object()))
        assert result.status_code == 502


# ══════════════════════════════════════════════════════════════════════
# Invariants
# ══════════════════════════════════════════════════════════════════════

ALL_EXCEPTIONS = [
    AccessDeniedError("secret"),
    NotFoundError(""),
    InvalidRequestError(None),
    ValueError(),
    IllegalStateError(),
    DiscoveryUnchangeableError("x"),
    PipelineConflictError(),
    BackendUnavailableError(),
    UnprocessablePipelineError("  "),
    RuntimeError(),
    KeyError("k"),
    httpx.ConnectError("refused"),
    UpstreamCallError("", "https://a", httpx.Response(200)),
    UpstreamCallError("x", "https://a", _BareResponse()),
    UnprintableError(),
    UnprintableConflictError(),
]


class TestInvariants:
    """Properties that hold for every exception value."""

    @pytest.mark.parametrize("exc", ALL_EXCEPTIONS)
    def test_status_in_range_and_message_present(self, classifier, exc) -> None:
        result = classifier.classify(exc)
        assert 100 <= result.status_code <= 599
        assert result.message is not None

    @pytest.mark.parametrize("exc", ALL_EXCEPTIONS)
    def test_classify_is_idempotent(self, classifier, exc) -> None:
        assert classifier.classify(exc) == classifier.classify(exc)

    def test_result_is_a_classification_result(self, classifier) -> None:
        assert isinstance(classifier.classify(RuntimeError()), ClassificationResult)


class TestDecoration:
    """Tests for message decoration during classification."""

    def test_decorator_applied_to_passthrough_message(self) -> None:
        decorator = ExceptionMessageDecorator({NotFoundError: "Check the application name."})
        classifier = ExceptionClassifier(decorator=decorator, registry=registry)

        result = classifier.classify(NotFoundError("Application front50 not found"))

        assert result.message == "Application front50 not found\nCheck the application name."

    def test_decorator_applied_to_static_access_denied_message(self) -> None:
        decorator = ExceptionMessageDecorator({AccessDeniedError: "Request access in #ops."})
        classifier = ExceptionClassifier(decorator=decorator)

        result = classifier.classify(AccessDeniedError("user jdoe lacks role ADMIN"))

        assert result.message == "Access is denied\nRequest access in #ops."
