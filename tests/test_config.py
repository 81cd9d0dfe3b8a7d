from baqman.backend.config import DEFAULT_SESSION_SECRET, get_settings

ENV_VARS = [
    "BAQMAN_PROJECT_ID",
    "GOOGLE_CLOUD_PROJECT",
    "BAQMAN_PORT",
    "BAQMAN_HOST",
    "BAQMAN_SESSION_SECRET",
    "BAQMAN_PRICE_PER_TIB",
    "BAQMAN_PAGE_SIZE",
    "BAQMAN_HTTP_TIMEOUT",
    "BAQMAN_API_ENDPOINT",
    "BAQMAN_FRONTEND_DIR",
    "BAQMAN_LOG_LEVEL",
]


def _clear(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults(monkeypatch):
    _clear(monkeypatch)
    s = get_settings()

    assert s.project_id == ""
    assert s.host == "0.0.0.0"
    assert s.port == 8080
    assert s.session_secret == DEFAULT_SESSION_SECRET
    assert s.price_per_tib == 5.0
    assert s.page_size == 50
    assert s.http_timeout == 40.0
    assert s.api_endpoint == ""
    assert s.frontend_dir == (s.project_root / "frontend").resolve()
    assert (s.frontend_dir / "html" / "base.html").exists()


def test_project_falls_back_to_google_cloud_project(monkeypatch):
    _clear(monkeypatch)
    monkeypatch.setenv("GOOGLE_CLOUD_PROJECT", "gcp-project")
    assert get_settings().project_id == "gcp-project"

    monkeypatch.setenv("BAQMAN_PROJECT_ID", "explicit-project")
    assert get_settings().project_id == "explicit-project"


def test_overrides(monkeypatch):
    _clear(monkeypatch)
    monkeypatch.setenv("BAQMAN_PORT", "9000")
    monkeypatch.setenv("BAQMAN_PRICE_PER_TIB", "6.25")
    monkeypatch.setenv("BAQMAN_PAGE_SIZE", "10")
    monkeypatch.setenv("BAQMAN_API_ENDPOINT", "http://localhost:9050/")

    s = get_settings()
    assert s.port == 9000
    assert s.price_per_tib == 6.25
    assert s.page_size == 10
    assert s.api_endpoint == "http://localhost:9050"
