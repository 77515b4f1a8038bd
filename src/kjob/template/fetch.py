# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/kjob/template/fetch.py
from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from typing import Optional

import requests

from ..config.settings import FetchSettings, load_fetch_settings
from ..errors import FetchError

log = logging.getLogger("kjob")


def cache_path_for(url: str, cache_dir: str | Path) -> Path:
    """Remote templates are cached under the md5 of their URL."""
    digest = hashlib.md5(url.encode("utf-8")).hexdigest()
    return Path(cache_dir) / f"{digest}.yml"


def fetch_template(source: str, settings: Optional[FetchSettings] = None) -> Path:
    """
    Return a local path holding the template.

    Local paths are returned as-is. https:// URLs are downloaded (with a
    bearer token when the configured env var is set) and written to the cache.
    """
    if not source.startswith("https://"):
        return Path(source)

    settings = settings or load_fetch_settings()
    headers = {}
    token = settings.token
    if token:
        headers["Authorization"] = f"Bearer {token}"
        headers["Accept"] = settings.accept

    log.info(f"Downloading job template from {source}")
    try:
        r = requests.get(source, headers=headers, timeout=settings.timeout_s)
    except requests.RequestException as e:
        raise FetchError(f"Could not read template file from {source}: {e}") from e
    if r.status_code != 200:
        raise FetchError(f"Could not read template file from {source}: HTTP {r.status_code}")

    target = cache_path_for(source, settings.cache_dir)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(r.content)
    except OSError as e:
        raise FetchError(f"Could not cache template at {target}: {e}") from e

    log.debug(f"Template cached at {target}")
    return target
