"""Shared fixtures: BigQuery job resources in the shapes the REST API returns."""
from __future__ import annotations

from typing import Any, Dict

import pytest

PROJECT = "test-project"

# 2024-01-02 03:04:05 UTC
T0_MS = 1704164645000


def job_resource(
    job_id: str = "job_1",
    state: str = "DONE",
    *,
    bytes_processed: Any = "1024",
    start_ms: Any = T0_MS,
    end_ms: Any = T0_MS + 90_500,
    query: str | None = "SELECT 1",
    user: str = "alice@example.com",
    location: str = "US",
) -> Dict[str, Any]:
    """A ``jobs.get`` style resource."""
    configuration: Dict[str, Any] = {"jobType": "QUERY" if query is not None else "LOAD"}
    if query is not None:
        configuration["query"] = {"query": query, "useLegacySql": False}
    else:
        configuration["load"] = {"sourceUris": ["gs://bucket/file.csv"]}

    statistics: Dict[str, Any] = {"creationTime": str(T0_MS - 1000)}
    if start_ms is not None:
        statistics["startTime"] = str(start_ms)
    if state == "DONE" and end_ms is not None:
        statistics["endTime"] = str(end_ms)
    if bytes_processed is not None:
        statistics["totalBytesProcessed"] = bytes_processed

    return {
        "kind": "bigquery#job",
        "id": f"{PROJECT}:{job_id}",
        "jobReference": {"projectId": PROJECT, "jobId": job_id, "location": location},
        "configuration": configuration,
        "statistics": statistics,
        "status": {"state": state},
        "user_email": user,
    }


def list_item(job_id: str = "job_1", state: str = "DONE", **kwargs: Any) -> Dict[str, Any]:
    """The same record as ``job_resource`` in ``jobs.list`` shape."""
    item = job_resource(job_id, state, **kwargs)
    item.pop("kind")
    item["state"] = state
    return item


@pytest.fixture
def make_resource():
    return job_resource


@pytest.fixture
def make_list_item():
    return list_item
