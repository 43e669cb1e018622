from user_access_platform.middleware.logging_middleware import MASK, mask_sensitive_fields


def test_mask_sensitive_fields_recursively():
    body = {
        "email": "a@x.com",
        "Password": "secret123",
        "nested": {"token": "abc", "keep": 1},
        "items": [{"passwd": "x"}, "plain"],
    }

    assert mask_sensitive_fields(body) == {
        "email": "a@x.com",
        "Password": MASK,
        "nested": {"token": MASK, "keep": 1},
        "items": [{"passwd": MASK}, "plain"],
    }
    assert body["Password"] == "secret123"


def test_non_mapping_bodies_pass_through():
    assert mask_sensitive_fields("text") == "text"
    assert mask_sensitive_fields(3) == 3
