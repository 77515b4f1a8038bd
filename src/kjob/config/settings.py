# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/kjob/config/settings.py

from __future__ import annotations
from dataclasses import dataclass
import os
import tempfile

@dataclass(frozen=True)
class FetchSettings:
    token_env: str
    cache_dir: str
    accept: str = "application/vnd.github.v3.raw"
    timeout_s: float = 30.0

    @property
    def token(self) -> str | None:
        return os.getenv(self.token_env) or None

def load_fetch_settings() -> FetchSettings:
    # defaults match GitHub raw-content downloads; override via env
    return FetchSettings(
        token_env=os.getenv("KJOB_TOKEN_ENV", "GITHUB_TOKEN"),
        cache_dir=os.getenv("KJOB_CACHE_DIR", tempfile.gettempdir()),
    )
