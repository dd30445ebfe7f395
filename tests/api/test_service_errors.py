"""
Tests for ServiceError construction from responses and transport failures.
"""

import httpx
import pytest

from cbt_toolkit.api import ErrorType, ServiceError


def _response(status, body=None, text=None):
    request = httpx.Request("GET", "https://cbt.test/api/x")
    if body is not None:
        return httpx.Response(status, json=body, request=request)
    return httpx.Response(status, text=text or "", request=request)


class TestFromResponse:
    """Tests for ServiceError.from_response."""

    @pytest.mark.parametrize(
        "status,error_type",
        [
            (400, ErrorType.VALIDATION),
            (401, ErrorType.AUTHENTICATION),
            (403, ErrorType.AUTHORIZATION),
            (404, ErrorType.NOT_FOUND),
            (422, ErrorType.VALIDATION),
            (500, ErrorType.SERVER),
            (503, ErrorType.SERVER),
        ],
    )
    def test_from_response_when_status_then_classified(self, status, error_type):
        error = ServiceError.from_response(_response(status, text="oops"))
        assert error.error_type is error_type
        assert error.status_code == status

    def test_from_response_when_no_body_then_status_default_message(self):
        error = ServiceError.from_response(_response(404, text="not json"))
        assert error.message == "Resource not found"
        assert error.details is None

    def test_from_response_when_body_message_then_it_wins(self):
        error = ServiceError.from_response(_response(400, {"message": "Exam has ended"}))
        assert error.message == "Exam has ended"

    def test_from_response_when_error_key_then_used(self):
        error = ServiceError.from_response(_response(500, {"error": "db down"}))
        assert error.message == "db down"

    def test_from_response_when_validation_errors_then_joined(self):
        body = {"errors": [{"msg": "Title required"}, {"message": "Duration too long"}, "x"]}
        error = ServiceError.from_response(_response(422, body))
        assert error.validation_errors == ["Title required", "Duration too long", "x"]
        assert error.message == "Validation error: Title required, Duration too long, x"

    def test_detail_when_body_object_then_reads_key(self):
        error = ServiceError.from_response(
            _response(400, {"message": "already completed", "canRetake": False})
        )
        assert error.detail("canRetake") is False
        assert error.detail("missing", "d") == "d"


class TestRetriable:
    """Tests for ServiceError.retriable."""

    @pytest.mark.parametrize("status,expected", [(429, True), (502, True), (400, False), (404, False)])
    def test_retriable_when_status_then_matches(self, status, expected):
        assert ServiceError.from_response(_response(status, text="")).retriable is expected

    def test_from_transport_when_timeout_then_flagged(self):
        error = ServiceError.from_transport(httpx.ReadTimeout("slow"))
        assert error.timeout is True
        assert error.error_type is ErrorType.NETWORK
        assert error.retriable

    def test_from_transport_when_connect_error_then_network_message(self):
        error = ServiceError.from_transport(httpx.ConnectError("refused"))
        assert error.timeout is False
        assert "Unable to connect" in error.message
