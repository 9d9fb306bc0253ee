import pytest

from truthlie.errors import (
    AppError,
    InternalError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
    json_error,
)


@pytest.mark.parametrize(
    "cls, code, prefix",
    [
        (ValidationError, 400, "Validation failed: "),
        (UnauthorizedError, 401, "Unauthorized: "),
        (NotFoundError, 404, "Not found: "),
        (InternalError, 500, "Internal server error: "),
    ],
)
def test_error_body(cls, code, prefix):
    err = cls("details here")
    assert err.to_dict() == {"error": prefix + "details here", "code": code}
    assert err.code == code


def test_errors_are_app_errors():
    err = NotFoundError("Game x not found")
    assert isinstance(err, AppError)
    assert str(err) == "Not found: Game x not found"
    assert err.detail == "Game x not found"
    assert err.code == 404


def test_json_error_is_bad_request():
    status, body = json_error("oops", 42)
    assert status == 400
    assert body == {"error": "oops", "code": 42}