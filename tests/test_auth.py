import google.auth
from google.auth.credentials import AnonymousCredentials
from google.cloud import bigquery

from baqman.backend.auth import BIGQUERY_SCOPES, build_bigquery_client, default_credentials
from baqman.backend.config import get_settings


def test_default_credentials_requests_bigquery_scope(monkeypatch):
    calls = {}

    def fake_default(scopes=None):
        calls["scopes"] = scopes
        return "creds", "adc-project"

    monkeypatch.setattr(google.auth, "default", fake_default)
    assert default_credentials() == ("creds", "adc-project")
    assert calls["scopes"] == list(BIGQUERY_SCOPES)


def test_build_bigquery_client_uses_settings(monkeypatch):
    monkeypatch.delenv("BAQMAN_API_ENDPOINT", raising=False)
    credentials = AnonymousCredentials()
    client = build_bigquery_client(get_settings(), credentials)

    assert isinstance(client, bigquery.Client)
    assert client.project == "test-project"
    assert client._credentials is credentials


def test_build_bigquery_client_honours_api_endpoint(monkeypatch):
    monkeypatch.setenv("BAQMAN_API_ENDPOINT", "http://localhost:9050/")
    client = build_bigquery_client(get_settings(), AnonymousCredentials())

    assert client._connection.API_BASE_URL == "http://localhost:9050"
