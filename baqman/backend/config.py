from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os


DEFAULT_SESSION_SECRET = "itsy bitsy spider climbed up the water spout"


@dataclass(frozen=True)
class Settings:
    project_root: Path
    frontend_dir: Path
    project_id: str
    host: str
    port: int
    session_secret: str
    price_per_tib: float
    page_size: int
    http_timeout: float
    api_endpoint: str
    log_level: str


def get_settings() -> Settings:
    project_root = Path(__file__).resolve().parents[1]
    frontend_dir = Path(os.environ.get("BAQMAN_FRONTEND_DIR", project_root / "frontend")).resolve()
    project_id = os.environ.get("BAQMAN_PROJECT_ID") or os.environ.get("GOOGLE_CLOUD_PROJECT", "")
    host = os.environ.get("BAQMAN_HOST", "0.0.0.0")
    port = int(os.environ.get("BAQMAN_PORT", "8080"))
    session_secret = os.environ.get("BAQMAN_SESSION_SECRET", DEFAULT_SESSION_SECRET)
    price_per_tib = float(os.environ.get("BAQMAN_PRICE_PER_TIB", "5.0"))
    page_size = int(os.environ.get("BAQMAN_PAGE_SIZE", "50"))
    http_timeout = float(os.environ.get("BAQMAN_HTTP_TIMEOUT", "40"))
    api_endpoint = os.environ.get("BAQMAN_API_ENDPOINT", "").rstrip("/")
    log_level = os.environ.get("BAQMAN_LOG_LEVEL", "info")

    return Settings(
        project_root=project_root,
        frontend_dir=frontend_dir,
        project_id=project_id.strip(),
        host=host,
        port=port,
        session_secret=session_secret,
        price_per_tib=price_per_tib,
        page_size=page_size,
        http_timeout=http_timeout,
        api_endpoint=api_endpoint,
        log_level=log_level,
    )
