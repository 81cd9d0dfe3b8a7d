from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pydantic import BaseModel, ConfigDict, Field, computed_field


RUNNING = "RUNNING"
DONE = "DONE"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Job(BaseModel):
    """One BigQuery job as shown on the dashboard.

    ``run_time`` is derived on every read: a running job keeps ageing, so it is
    never stored alongside the other fields and never takes part in equality.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    user_name: str = ""
    query: str = ""
    job_type: str = ""
    location: str = ""
    data_queried_bytes: int = 0
    human_data_queried: str = "0B"
    query_cost: str = "$0.00000"
    status: str = ""
    error_message: str | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def run_time(self) -> timedelta:
        if self.start_time is None:
            return timedelta(0)
        if self.status == DONE and self.end_time is not None:
            elapsed = self.end_time - self.start_time
        else:
            elapsed = _utc_now() - self.start_time
        return max(elapsed, timedelta(0))

    @property
    def is_running(self) -> bool:
        return self.status == RUNNING

    @property
    def run_time_display(self) -> str:
        return format_duration(self.run_time)


class JobPage(BaseModel):
    model_config = ConfigDict(frozen=True)

    running: list[Job] = Field(default_factory=list)
    done: list[Job] = Field(default_factory=list)
    next_page_token: str = ""


class HealthResponse(BaseModel):
    ok: bool
    project_id: str
    api_endpoint: str


def format_duration(delta: timedelta) -> str:
    """Render a duration the way the job tables show it, e.g. ``1h 02m 03s`` or ``4.2s``."""
    total = delta.total_seconds()
    if total < 60:
        return f"{total:.1f}s"
    seconds = int(total)
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}h {minutes:02d}m {secs:02d}s"
    return f"{minutes}m {secs:02d}s"
