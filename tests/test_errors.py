import pytest

from roompi.status.errors import (
    AuthenticationError,
    HTTPStatusError,
    InvalidResponseError,
    InvalidURLError,
    NetworkError,
    NotFoundError,
    ParseError,
    ServerError,
    StatusAPIError,
)


def test_status_api_error_str_and_flags() -> None:
    err = StatusAPIError(code=404, message="Not Found")
    assert str(err) == "[404] Not Found"
    assert err.is_client_error is True
    assert err.is_server_error is False
    assert err.description == "Not Found"


@pytest.mark.parametrize(
    "code, expected_type",
    [
        (401, AuthenticationError),
        (403, AuthenticationError),
        (404, NotFoundError),
        (400, HTTPStatusError),
        (302, HTTPStatusError),
        (500, ServerError),
        (503, ServerError),
    ],
)
def test_from_status_creates_expected_error(
    code: int, expected_type: type[HTTPStatusError]
) -> None:
    err = HTTPStatusError.from_status(code, "test error\n")
    assert type(err) is expected_type
    assert err.code == code
    assert err.body == "test error"
    assert "test error" in str(err)


def test_http_error_without_body_uses_known_reason() -> None:
    err = HTTPStatusError.from_status(503, "   ")
    assert err.body is None
    assert err.message == "Service unavailable"
    assert err.description == "Server returned an error (503)."


def test_http_error_unknown_code() -> None:
    err = HTTPStatusError.from_status(418)
    assert err.message == "HTTP error"
    assert err.is_client_error


def test_invalid_url_error() -> None:
    err = InvalidURLError("::nope")
    assert err.code == 0
    assert err.url == "::nope"
    assert err.description == "Invalid service API address."


def test_invalid_response_error() -> None:
    err = InvalidResponseError(ValueError("garbled"))
    assert err.description == "Unexpected server response."
    assert isinstance(err.original_error, ValueError)


def test_network_error_wraps_exception() -> None:
    try:
        raise ConnectionError("BOOM")
    except ConnectionError as e:
        err = NetworkError(message="Connection error", original_error=e)
        assert str(err) == "[0] Connection error"
        assert err.description == "Connection error"
        assert isinstance(err.original_error, Exception)


def test_parse_error_wraps_exception() -> None:
    try:
        raise ValueError("bad parse")
    except ValueError as e:
        err = ParseError(message="snapshot.services.0.label: Field required", original_error=e)
        assert str(err) == "[0] snapshot.services.0.label: Field required"
        assert err.description == (
            "Could not read the server response: snapshot.services.0.label: Field required"
        )
        assert isinstance(err.original_error, Exception)


@pytest.mark.parametrize("body", [None, "", "   ", "\n\t"])
def test_blank_body_is_absent(body: str | None) -> None:
    err = HTTPStatusError.from_status(404, body)
    assert err.body is None
    assert err.description == "Server returned an error (404)."
