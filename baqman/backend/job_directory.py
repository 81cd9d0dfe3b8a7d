from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional

import requests
from google.api_core.exceptions import GoogleAPICallError, GoogleAPIError, NotFound
from google.auth.exceptions import GoogleAuthError

from .errors import InvalidJobIdError, JobDirectoryError, JobNotFoundError
from .normalize import DEFAULT_PRICE_PER_TIB, parse_job, parse_list_job
from .schemas import RUNNING, Job, JobPage

logger = logging.getLogger(__name__)

JOB_ID_RE = re.compile(r"^[A-Za-z0-9_.\-]{1,1024}$")


def validate_job_id(job_id: str) -> str:
    """Reject ids that are not valid BigQuery job ids before they reach the API."""
    if not isinstance(job_id, str) or not JOB_ID_RE.match(job_id):
        raise InvalidJobIdError(f"invalid job id {job_id!r}")
    return job_id


def _resource(job: Any) -> Dict[str, Any]:
    # the job as returned by the API, including "id" and "user_email"
    return job._properties


def _directory_error(action: str, exc: Exception) -> JobDirectoryError:
    if isinstance(exc, NotFound):
        return JobNotFoundError(exc.message, status_code=404)
    if isinstance(exc, GoogleAPICallError):
        return JobDirectoryError(exc.message, status_code=exc.code)
    return JobDirectoryError(f"BigQuery {action} failed: {exc}")


class JobDirectory:
    """Lists, describes and cancels the jobs of a single BigQuery project.

    Holds nothing but the project id and a ``bigquery.Client``, so one instance
    is shared by all requests. Remote calls are made without retries.
    """

    def __init__(
        self,
        project_id: str,
        client: Any,
        *,
        price_per_tib: float = DEFAULT_PRICE_PER_TIB,
        page_size: Optional[int] = None,
        timeout: Optional[float] = None,
    ) -> None:
        if not project_id:
            raise ValueError("project_id must not be empty")
        self.project_id = project_id
        self.price_per_tib = price_per_tib
        self.page_size = page_size
        self.timeout = timeout
        self._client = client

    def _remote(self, action: str, fn, *args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except (GoogleAPIError, GoogleAuthError, requests.RequestException) as exc:
            logger.warning("%s in project %s failed: %s", action, self.project_id, exc)
            raise _directory_error(action, exc) from exc

    def list_jobs(self, page_token: str = "", max_results: Optional[int] = None) -> JobPage:
        """One page of jobs for all users, most recent first, split into running and the rest."""
        limit = max_results if max_results is not None else self.page_size
        iterator = self._client.list_jobs(
            project=self.project_id,
            all_users=True,
            page_token=page_token or None,
            max_results=limit or None,
            retry=None,
            timeout=self.timeout,
        )
        page = self._remote("list jobs", next, iterator.pages, None)

        running: List[Job] = []
        done: List[Job] = []
        for bq_job in page or []:
            job = parse_list_job(_resource(bq_job), price_per_tib=self.price_per_tib)
            if job.status == RUNNING:
                running.append(job)
            else:
                done.append(job)

        return JobPage(running=running, done=done, next_page_token=iterator.next_page_token or "")

    def get_job(self, job_id: str) -> Job:
        bq_job = self._remote(
            "get job",
            self._client.get_job,
            validate_job_id(job_id),
            project=self.project_id,
            retry=None,
            timeout=self.timeout,
        )
        return parse_job(_resource(bq_job), price_per_tib=self.price_per_tib)

    def cancel_job(self, job_id: str) -> None:
        """Request cancellation. BigQuery cancels asynchronously; the state it reports back is only logged."""
        logger.info("cancelling job %s", job_id)
        bq_job = self._remote(
            "cancel job",
            self._client.cancel_job,
            validate_job_id(job_id),
            project=self.project_id,
            retry=None,
            timeout=self.timeout,
        )
        logger.info("cancel requested for job %s, state %s", job_id, bq_job.state or "UNKNOWN")
