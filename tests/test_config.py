from app.core.config import _env_origins


def test_cors_origins_fall_back_to_frontend_url(monkeypatch):
    monkeypatch.delenv("CORS_ORIGINS", raising=False)
    monkeypatch.setenv("FRONTEND_BASE_URL", "https://garage.example.com/")
    assert _env_origins() == ("https://garage.example.com",)


def test_cors_origins_list_takes_precedence(monkeypatch):
    monkeypatch.setenv("FRONTEND_BASE_URL", "https://garage.example.com")
    monkeypatch.setenv("CORS_ORIGINS", "http://localhost:5173/, https://office.example.com ,")
    assert _env_origins() == ("http://localhost:5173", "https://office.example.com")
