import copy
from dataclasses import dataclass
from typing import Dict, List, Optional

import pytest

from kjob.errors import ResourceNotFound
from kjob.template.models import JobTemplate


# --------- Test doubles ----------

@dataclass
class Call:
    op: str
    args: tuple


class FakeCluster:
    """
    In-memory ClusterClient. get_job replays `statuses` one per poll and keeps
    returning the last one once the list is exhausted.
    """

    def __init__(self, statuses: Optional[List[Dict]] = None):
        self.calls: List[Call] = []
        self.jobs: Dict[tuple, Dict] = {}
        self.statuses = list(statuses or [])
        self.create_error: Optional[Exception] = None
        self.get_error: Optional[Exception] = None
        self.delete_pods_error: Optional[Exception] = None
        self.delete_job_error: Optional[Exception] = None

    def ops(self) -> List[str]:
        return [c.op for c in self.calls]

    def create_job(self, namespace, body):
        self.calls.append(Call("create_job", (namespace, body["metadata"]["name"])))
        if self.create_error:
            raise self.create_error
        stored = copy.deepcopy(body)
        stored["metadata"]["namespace"] = namespace
        stored["metadata"]["uid"] = "fake-uid"
        self.jobs[(namespace, stored["metadata"]["name"])] = stored
        return copy.deepcopy(stored)

    def get_job(self, namespace, name):
        self.calls.append(Call("get_job", (namespace, name)))
        if self.get_error:
            raise self.get_error
        if (namespace, name) not in self.jobs:
            raise ResourceNotFound(f"job {name} not found", status=404)
        if len(self.statuses) > 1:
            status = self.statuses.pop(0)
        else:
            status = self.statuses[0] if self.statuses else {}
        return {**copy.deepcopy(self.jobs[(namespace, name)]), "status": status}

    def delete_pods(self, namespace, label_selector):
        self.calls.append(Call("delete_pods", (namespace, label_selector)))
        if self.delete_pods_error:
            raise self.delete_pods_error

    def delete_job(self, namespace, name):
        self.calls.append(Call("delete_job", (namespace, name)))
        if self.delete_job_error:
            raise self.delete_job_error
        if (namespace, name) not in self.jobs:
            raise ResourceNotFound(f"job {name} not found", status=404)
        del self.jobs[(namespace, name)]


class Capture:
    def __init__(self): self.events = []
    def notify(self, ev): self.events.append(ev)

    def kinds(self):
        return [e.__class__.__name__ for e in self.events]


# --------- Fixtures ----------

DEMO_TEMPLATE = {
    "apiVersion": "batch/v1",
    "kind": "Job",
    "metadata": {"name": "demo", "namespace": "ci"},
    "spec": {
        "backoffLimit": 0,
        "template": {
            "spec": {
                "restartPolicy": "Never",
                "containers": [
                    {"name": "runner", "image": "busybox", "args": ["default"]},
                    {"name": "sidecar", "image": "busybox", "args": ["sleep", "5"]},
                ],
            }
        },
    },
}


@pytest.fixture
def demo_template() -> JobTemplate:
    return JobTemplate.from_dict(DEMO_TEMPLATE)


@pytest.fixture
def fake_cluster():
    def make(statuses=None) -> FakeCluster:
        return FakeCluster(statuses)
    return make


@pytest.fixture
def capture():
    return Capture()
