from __future__ import annotations

import argparse
import logging
import os
import sys

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Dashboard for BigQuery jobs of a project.")
    p.add_argument("--project-id", default=None, help="List queries running under this project.")
    p.add_argument("--host", default=None, help="Bind address (default: 0.0.0.0).")
    p.add_argument("--port", type=int, default=None, help="HTTP port to listen on (default: 8080).")
    p.add_argument("--session-secret", default=None, help="Secret used to sign the session cookie.")
    p.add_argument("--price-per-tib", type=float, default=None, help="Dollars per TiB scanned (default: 5.0).")
    p.add_argument("--log-level", default=None, choices=["debug", "info", "warning", "error"])
    return p.parse_args(argv)


def apply_overrides(args: argparse.Namespace, environ: dict | None = None) -> None:
    """Copy flags that were given into the environment read by get_settings()."""
    env = os.environ if environ is None else environ
    overrides = {
        "BAQMAN_PROJECT_ID": args.project_id,
        "BAQMAN_HOST": args.host,
        "BAQMAN_PORT": args.port,
        "BAQMAN_SESSION_SECRET": args.session_secret,
        "BAQMAN_PRICE_PER_TIB": args.price_per_tib,
        "BAQMAN_LOG_LEVEL": args.log_level,
    }
    for key, value in overrides.items():
        if value is not None:
            env[key] = str(value)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    apply_overrides(args)

    from .config import get_settings

    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
    if not settings.project_id:
        logger.error("project id can't be empty: pass --project-id or set GOOGLE_CLOUD_PROJECT")
        sys.exit(1)

    import uvicorn

    from .main import app

    logger.info("Running BaqMan for project: %s on port %d", settings.project_id, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower(), access_log=True)


if __name__ == "__main__":
    main()
