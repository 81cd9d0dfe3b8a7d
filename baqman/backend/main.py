from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import Depends, FastAPI, Form, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from google.auth.exceptions import DefaultCredentialsError
from starlette.middleware.sessions import SessionMiddleware

from .auth import build_bigquery_client, default_credentials
from .config import get_settings
from .errors import ConfigError, register_error_handlers
from .job_directory import JobDirectory, validate_job_id
from .schemas import HealthResponse, Job, JobPage


logger = logging.getLogger(__name__)

SESSION_COOKIE = "killedjobs"
FLASH_KEY = "flashes"

app = FastAPI(title="BaqMan", version="0.1.0")
settings = get_settings()
templates = Jinja2Templates(directory=str(settings.frontend_dir / "html"))

app.add_middleware(SessionMiddleware, secret_key=settings.session_secret, session_cookie=SESSION_COOKIE)

if (settings.frontend_dir / "assets").exists():
    app.mount("/assets", StaticFiles(directory=str(settings.frontend_dir / "assets")), name="assets")


@lru_cache(maxsize=1)
def get_directory() -> JobDirectory:
    if not settings.project_id:
        raise ConfigError("no project id configured: set BAQMAN_PROJECT_ID or GOOGLE_CLOUD_PROJECT")
    try:
        credentials, _ = default_credentials()
    except DefaultCredentialsError as exc:
        raise ConfigError(f"application default credentials not available: {exc}") from exc
    logger.info("using BigQuery jobs of project %s", settings.project_id)
    return JobDirectory(
        settings.project_id,
        build_bigquery_client(settings, credentials),
        price_per_tib=settings.price_per_tib,
        page_size=settings.page_size,
        timeout=settings.http_timeout,
    )


def _render_error(request: Request, status_code: int, message: str) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "error.html",
        {"status_code": status_code, "message": message, "flashes": []},
        status_code=status_code,
    )


register_error_handlers(app, _render_error)


def _pop_flashes(request: Request) -> list[str]:
    return [str(f) for f in request.session.pop(FLASH_KEY, [])]


def _add_flash(request: Request, message: str) -> None:
    flashes = list(request.session.get(FLASH_KEY, []))
    flashes.append(message)
    request.session[FLASH_KEY] = flashes


@app.get("/", response_class=HTMLResponse)
def index(request: Request, directory: JobDirectory = Depends(get_directory)) -> HTMLResponse:
    flashes = _pop_flashes(request)
    jobs = directory.list_jobs()
    return templates.TemplateResponse(request, "index.html", {"flashes": flashes, "jobs": jobs})


@app.get("/completed", response_class=HTMLResponse)
def completed(request: Request, token: str = "", directory: JobDirectory = Depends(get_directory)) -> HTMLResponse:
    jobs = directory.list_jobs(token)
    return templates.TemplateResponse(request, "completed.html", {"flashes": [], "jobs": jobs, "token": token})


@app.get("/describe/{job_id}", response_class=HTMLResponse)
def describe(request: Request, job_id: str, directory: JobDirectory = Depends(get_directory)) -> HTMLResponse:
    flashes = _pop_flashes(request)
    job = directory.get_job(job_id)
    return templates.TemplateResponse(request, "describe.html", {"flashes": flashes, "job": job})


@app.get("/kill/{job_id}")
def kill_job(request: Request, job_id: str, directory: JobDirectory = Depends(get_directory)) -> RedirectResponse:
    directory.cancel_job(job_id)
    _add_flash(request, job_id)
    return RedirectResponse(url=f"/describe/{job_id}", status_code=303)


@app.post("/killmany")
def kill_many(
    request: Request,
    jobkill: list[str] = Form([]),
    directory: JobDirectory = Depends(get_directory),
) -> RedirectResponse:
    for job_id in jobkill:
        validate_job_id(job_id)
    for job_id in jobkill:
        directory.cancel_job(job_id)
        _add_flash(request, job_id)
    return RedirectResponse(url="/", status_code=303)


@app.get("/_ah/health", response_class=PlainTextResponse)
def health_check() -> str:
    return "ok"


@app.get("/api/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(
        ok=True,
        project_id=settings.project_id,
        api_endpoint=settings.api_endpoint,
    )


@app.get("/api/jobs", response_model=JobPage)
def list_jobs_api(token: str = "", directory: JobDirectory = Depends(get_directory)) -> JobPage:
    return directory.list_jobs(token)


@app.get("/api/jobs/{job_id}", response_model=Job)
def get_job_api(job_id: str, directory: JobDirectory = Depends(get_directory)) -> Job:
    return directory.get_job(job_id)
