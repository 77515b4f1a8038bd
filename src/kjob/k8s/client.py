# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/kjob/k8s/client.py
from __future__ import annotations

import functools
import logging
from typing import Any, Dict, Optional, Protocol

import urllib3
from kubernetes import client, config
from kubernetes.client.exceptions import ApiException

from ..errors import ClusterAPIError, ConfigError, ResourceNotFound

log = logging.getLogger("kjob")

Manifest = Dict[str, Any]

# seconds a single status read may take before urllib3 gives up
DEFAULT_REQUEST_TIMEOUT = 30.0


class ClusterClient(Protocol):
    """
    The cluster operations a job run needs. Every call is a plain
    request/response; implementations keep no cache.
    """

    def create_job(self, namespace: str, body: Manifest) -> Manifest: ...

    def get_job(self, namespace: str, name: str) -> Manifest: ...

    def delete_job(self, namespace: str, name: str) -> None: ...

    def delete_pods(self, namespace: str, label_selector: str) -> None: ...


def _translate(op: str):
    """Map ApiException to ResourceNotFound (404) or ClusterAPIError."""
    def decorator(fn):
        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                return fn(*args, **kwargs)
            except ApiException as e:
                msg = f"{op} failed: {e.status} {e.reason}"
                if e.status == 404:
                    raise ResourceNotFound(msg, status=404) from e
                raise ClusterAPIError(msg, status=e.status) from e
            except urllib3.exceptions.HTTPError as e:
                raise ClusterAPIError(f"{op} failed: {e}") from e
        return wrapper
    return decorator


class KubernetesClusterClient:
    """ClusterClient backed by the official kubernetes Python client."""

    def __init__(self, api_client: client.ApiClient, *, request_timeout: float = DEFAULT_REQUEST_TIMEOUT):
        self._api_client = api_client
        self.request_timeout = request_timeout
        self.batch = client.BatchV1Api(api_client)
        self.core = client.CoreV1Api(api_client)

    @classmethod
    def from_kubeconfig(cls, path: str, context: Optional[str] = None) -> "KubernetesClusterClient":
        try:
            api_client = config.new_client_from_config(config_file=path, context=context)
        except (config.ConfigException, OSError) as e:
            raise ConfigError(f"Could not load kubeconfig {path}: {e}") from e
        log.debug(f"Loaded kubeconfig {path} (context={context or 'current'})")
        return cls(api_client)

    @classmethod
    def in_cluster(cls) -> "KubernetesClusterClient":
        try:
            config.load_incluster_config()
        except config.ConfigException as e:
            raise ConfigError(f"Could not load in-cluster config: {e}") from e
        return cls(client.ApiClient())

    def _to_dict(self, obj: Any) -> Manifest:
        return self._api_client.sanitize_for_serialization(obj)

    @_translate("create job")
    def create_job(self, namespace: str, body: Manifest) -> Manifest:
        created = self.batch.create_namespaced_job(namespace=namespace, body=body)
        return self._to_dict(created)

    @_translate("get job")
    def get_job(self, namespace: str, name: str) -> Manifest:
        current = self.batch.read_namespaced_job(
            name=name, namespace=namespace, _request_timeout=self.request_timeout
        )
        return self._to_dict(current)

    @_translate("delete job")
    def delete_job(self, namespace: str, name: str) -> None:
        # Background: the job controller removes pods it recreated after delete_pods
        self.batch.delete_namespaced_job(
            name=name,
            namespace=namespace,
            body=client.V1DeleteOptions(propagation_policy="Background"),
        )

    @_translate("delete pods")
    def delete_pods(self, namespace: str, label_selector: str) -> None:
        # grace_period_seconds left unset: cluster default applies
        self.core.delete_collection_namespaced_pod(
            namespace=namespace,
            label_selector=label_selector,
            body=client.V1DeleteOptions(),
        )


def build_cluster_client(
    *,
    kubeconfig: Optional[str] = None,
    context: Optional[str] = None,
    in_cluster: bool = False,
) -> KubernetesClusterClient:
    if in_cluster:
        return KubernetesClusterClient.in_cluster()
    if not kubeconfig:
        raise ConfigError("Config file is required")
    return KubernetesClusterClient.from_kubeconfig(kubeconfig, context=context)
