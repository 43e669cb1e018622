import pytest
from fastapi.testclient import TestClient

from user_access_platform.config import ConfigurationError, Settings
from user_access_platform.main import create_app


def test_missing_secret_stops_app_creation(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.delenv("USER_ACCESS_JWT_SECRET", raising=False)

    with pytest.raises(ConfigurationError):
        create_app()


def test_startup_creates_schema_and_bootstraps_admin(tmp_path):
    settings = Settings(
        jwt_secret="test-secret-0123456789abcdef-0123456789",
        app_env="test",
        bcrypt_rounds=4,
        database_url=f"sqlite:///{tmp_path / 'startup.db'}",
        log_dir=tmp_path / "logs",
        log_to_file=True,
        admin_email="Boss@X.com",
        admin_password="bosspass1",
    )
    app = create_app(settings)

    with TestClient(app) as client:
        response = client.post("/auth/sign-in", json={"email": "boss@x.com", "password": "bosspass1"})
        assert response.status_code == 200
        assert response.json()["user"]["role"] == "admin"
        assert client.get("/users").status_code == 200

    assert (tmp_path / "logs" / "app.log").exists()
    assert (tmp_path / "logs" / "access.log").exists()


def test_cors_is_enabled_for_configured_origins(tmp_path):
    settings = Settings(
        jwt_secret="test-secret-0123456789abcdef-0123456789",
        app_env="test",
        database_url=f"sqlite:///{tmp_path / 'cors.db'}",
        log_to_file=False,
        cors_origins=("http://front.test",),
    )

    with TestClient(create_app(settings)) as client:
        response = client.options(
            "/auth/sign-in",
            headers={"Origin": "http://front.test", "Access-Control-Request-Method": "POST"},
        )

    assert response.headers["access-control-allow-origin"] == "http://front.test"
    assert response.headers["access-control-allow-credentials"] == "true"
