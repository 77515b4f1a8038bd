# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/kjob/errors.py
from __future__ import annotations

from typing import Sequence


class KjobError(RuntimeError):
    """Base class for every failure surfaced by a job run."""


class ConfigError(KjobError):
    """Missing or invalid run parameters, or a broken runtime environment."""


class FetchError(KjobError):
    """Raised when the job template cannot be retrieved."""


class ParseError(KjobError):
    """Raised when the template or the command line cannot be parsed."""


class ContainerNotFound(KjobError):
    def __init__(self, name: str, available: Sequence[str]):
        self.name = name
        self.available = list(available)
        super().__init__(
            f"Container {name!r} does not exist in the template "
            f"(available: {', '.join(self.available) or '<none>'})"
        )


class ClusterAPIError(KjobError):
    """A request to the Kubernetes API failed."""

    def __init__(self, message: str, status: int | None = None):
        self.status = status
        super().__init__(message)


class ResourceNotFound(ClusterAPIError):
    """The API answered 404 for the requested resource."""


class SubmissionError(KjobError):
    """The cluster refused or failed to create the job."""


class PollError(KjobError):
    """Transport or API failure while polling job status."""


class JobFailed(KjobError):
    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f"Job {name} failed: {reason}")


class JobTimedOut(KjobError):
    def __init__(self, name: str, timeout: float | None):
        self.name = name
        self.timeout = timeout
        super().__init__(f"Timed out after {timeout}s waiting for job {name}")


class CleanupError(KjobError):
    """Pods or the job itself could not be removed."""
