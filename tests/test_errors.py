from user_access_platform.api.errors import ERROR_RESPONSES, format_validation_errors
from user_access_platform.errors import AuthError, AuthErrorKind


def test_every_error_kind_has_a_response():
    assert set(ERROR_RESPONSES) == set(AuthErrorKind)


def test_login_failures_share_one_response():
    assert ERROR_RESPONSES[AuthErrorKind.INVALID_CREDENTIALS][0] == 401
    assert ERROR_RESPONSES[AuthErrorKind.USER_EXISTS][0] == 409


def test_auth_error_defaults_message_to_kind():
    error = AuthError(AuthErrorKind.FORBIDDEN)

    assert error.message == "forbidden"
    assert "forbidden" in repr(error)


def test_format_plain_string():
    assert format_validation_errors("Body is not valid JSON") == [
        {"field": None, "message": "Body is not valid JSON"}
    ]


def test_format_pydantic_errors_one_entry_per_field():
    errors = [
        {"type": "missing", "loc": ("body", "email"), "msg": "Field required"},
        {"type": "string_too_short", "loc": ("body", "password"), "msg": "too short"},
        {"type": "other", "loc": ("body", "password"), "msg": "second problem"},
        {"type": "enum", "loc": ("body", "profile", "role"), "msg": "bad role"},
    ]

    assert format_validation_errors(errors) == [
        {"field": "email", "message": "Field required"},
        {"field": "password", "message": "too short"},
        {"field": "profile.role", "message": "bad role"},
    ]


def test_format_nested_mapping():
    errors = {"email": ["Invalid email", "Too long"], "address": {"zip": "Required"}}

    assert format_validation_errors(errors) == [
        {"field": "email", "message": "Invalid email"},
        {"field": "address.zip", "message": "Required"},
    ]


def test_format_empty_inputs():
    assert format_validation_errors(None) == []
    assert format_validation_errors([]) == []
