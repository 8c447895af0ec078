"""
Access to the run-orchestration service.

:class:`RunsApi` is the stable interface used by controllers and the CLI;
:class:`HttpRunsClient` implements it over HTTP.
"""

from .base import ApiError, ConfigurationError, RunsApi, RunwatchError
from .http import HttpRunsClient
from .models import (
    PresetRequest,
    RunArtifact,
    RunEventRecord,
    RunMetricsResponse,
    RunRecord,
    RunStatus,
)

__all__ = [
    "ApiError",
    "ConfigurationError",
    "HttpRunsClient",
    "PresetRequest",
    "RunArtifact",
    "RunEventRecord",
    "RunMetricsResponse",
    "RunRecord",
    "RunStatus",
    "RunsApi",
    "RunwatchError",
]
