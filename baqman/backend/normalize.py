from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import humanize

from .errors import InvalidJobIdError, InvalidJobRecordError
from .schemas import DONE, Job


# On-demand query pricing, in dollars per tebibyte scanned.
DEFAULT_PRICE_PER_TIB = 5.0

TIB = 1024 ** 4

BINARY_UNITS = ["KiB", "MiB", "GiB", "TiB", "PiB", "EiB", "ZiB", "YiB"]

SIZE_RE = re.compile(r"^(\d+(?:\.\d+)?)\s*([A-Za-z]+)$")

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def extract_job_id(remote_id: Any) -> str:
    """Strip the ``<project>:`` prefix from a remote job id.

    Domain-scoped projects (``example.com:proj``) carry an extra colon, so the
    job id is whatever follows the last one.
    """
    if not isinstance(remote_id, str) or ":" not in remote_id:
        raise InvalidJobIdError(f"malformed job id {remote_id!r}: expected '<project>:<jobId>'")
    project, _, job_id = remote_id.rpartition(":")
    if not project or not job_id:
        raise InvalidJobIdError(f"malformed job id {remote_id!r}: expected '<project>:<jobId>'")
    return job_id


def humanize_bytes(num_bytes: int) -> str:
    """Render a byte count with 1024-based units, e.g. ``0B``, ``512B``, ``12.3GiB``."""
    if num_bytes < 0:
        raise ValueError(f"byte count must not be negative, got {num_bytes}")

    text = humanize.naturalsize(num_bytes, binary=True, format="%.1f")
    match = SIZE_RE.match(text)
    if match is None:
        raise ValueError(f"unexpected size format {text!r}")
    number, unit = match.group(1), match.group(2)
    if unit in ("Byte", "Bytes"):
        unit = "B"
    # 1023.95KiB and up rounds to "1024.0"; show it in the next unit instead
    if number == "1024.0" and unit in BINARY_UNITS[:-1]:
        number, unit = "1.0", BINARY_UNITS[BINARY_UNITS.index(unit) + 1]
    if number.endswith(".0"):
        number = number[:-2]
    return number + unit


def estimate_cost(num_bytes: int, price_per_tib: float = DEFAULT_PRICE_PER_TIB) -> str:
    """Dollar estimate for scanning ``num_bytes`` at ``price_per_tib``."""
    cost = num_bytes / TIB * price_per_tib
    return f"${cost:.5f}"


def _as_int(value: Any, field: str) -> Optional[int]:
    # int64 fields arrive as JSON strings; the client library turns timestamps into floats
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidJobRecordError(f"{field} is not an integer: {value!r}") from None


def _from_millis(value: Any, field: str) -> Optional[datetime]:
    millis = _as_int(value, field)
    if millis is None:
        return None
    return EPOCH + timedelta(milliseconds=millis)


def _bytes_processed(stats: Dict[str, Any]) -> int:
    value = stats.get("totalBytesProcessed")
    if value in (None, ""):
        value = (stats.get("query") or {}).get("totalBytesProcessed")
    return _as_int(value, "statistics.totalBytesProcessed") or 0


def _build_job(resource: Dict[str, Any], state: str, price_per_tib: float) -> Job:
    stats = resource.get("statistics") or {}
    config = resource.get("configuration") or {}
    status = resource.get("status") or {}
    reference = resource.get("jobReference") or {}

    data_queried = _bytes_processed(stats)
    if data_queried < 0:
        raise InvalidJobRecordError(f"statistics.totalBytesProcessed is negative: {data_queried}")

    query = ""
    if config.get("query"):
        query = config["query"].get("query") or ""

    start_time = _from_millis(stats.get("startTime"), "statistics.startTime")
    end_time = None
    if state == DONE:
        end_time = _from_millis(stats.get("endTime"), "statistics.endTime")

    error_result = status.get("errorResult") or resource.get("errorResult") or {}

    return Job(
        id=extract_job_id(resource.get("id")),
        user_name=resource.get("user_email") or "",
        query=query,
        job_type=config.get("jobType") or "",
        location=reference.get("location") or "",
        data_queried_bytes=data_queried,
        human_data_queried=humanize_bytes(data_queried),
        query_cost=estimate_cost(data_queried, price_per_tib),
        status=state,
        error_message=error_result.get("message"),
        start_time=start_time,
        end_time=end_time,
    )


def parse_job(resource: Dict[str, Any], *, price_per_tib: float = DEFAULT_PRICE_PER_TIB) -> Job:
    """Normalize a ``jobs.get`` resource."""
    state = (resource.get("status") or {}).get("state") or ""
    return _build_job(resource, state, price_per_tib)


def parse_list_job(resource: Dict[str, Any], *, price_per_tib: float = DEFAULT_PRICE_PER_TIB) -> Job:
    """Normalize one ``jobs.list`` item."""
    state = (resource.get("status") or {}).get("state") or resource.get("state") or ""
    return _build_job(resource, state, price_per_tib)
