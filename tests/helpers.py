import httpx


async def sign_up(client: httpx.AsyncClient, **overrides) -> httpx.Response:
    payload = {"name": "Ann", "email": "a@x.com", "password": "secret123"}
    payload.update(overrides)
    return await client.post("/auth/sign-up", json=payload)


def set_cookie_headers(response: httpx.Response):
    return response.headers.get_list("set-cookie")


async def sign_in(client: httpx.AsyncClient, email: str = "a@x.com", password: str = "secret123") -> httpx.Response:
    return await client.post("/auth/sign-in", json={"email": email, "password": password})


def find_set_cookie(response: httpx.Response, name: str = "token"):
    for header in set_cookie_headers(response):
        if header.startswith(f"{name}="):
            return header
    return None


def cookie_attributes(header: str):
    """Lower-cased ``{attribute: value}`` view of a Set-Cookie header."""
    attrs = {}
    for part in header.split(";")[1:]:
        key, _, value = part.strip().partition("=")
        attrs[key.lower()] = value
    return attrs
