# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/kjob/job/naming.py
from __future__ import annotations

import logging
import secrets

from ..errors import ConfigError

log = logging.getLogger("kjob")

RANDOM_BYTES = 16
MAX_LABEL_LENGTH = 63


def secure_random_hex(nbytes: int = RANDOM_BYTES) -> str:
    try:
        return secrets.token_hex(nbytes)
    except (OSError, NotImplementedError) as e:
        raise ConfigError(f"No secure random source available: {e}") from e


def generate_job_name(base: str) -> str:
    """Return '<base>-<32 hex chars>'."""
    name = f"{base}-{secure_random_hex()}"
    if len(name) > MAX_LABEL_LENGTH:
        log.warning(
            f"Job name {name} is longer than {MAX_LABEL_LENGTH} characters; "
            "the cluster may reject the job-name pod label"
        )
    return name
