from __future__ import annotations

from typing import Any

import google.auth
from google.api_core.client_options import ClientOptions
from google.cloud import bigquery

from .config import Settings


BIGQUERY_SCOPES = ("https://www.googleapis.com/auth/bigquery",)


def default_credentials() -> tuple[Any, str | None]:
    """Application default credentials and the project they belong to, if any."""
    credentials, project_id = google.auth.default(scopes=list(BIGQUERY_SCOPES))
    return credentials, project_id


def build_bigquery_client(settings: Settings, credentials: Any) -> bigquery.Client:
    client_options = None
    if settings.api_endpoint:
        client_options = ClientOptions(api_endpoint=settings.api_endpoint)
    return bigquery.Client(
        project=settings.project_id,
        credentials=credentials,
        client_options=client_options,
    )
