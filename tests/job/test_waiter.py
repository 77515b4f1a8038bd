import asyncio
import threading
import time

import pytest

from kjob.errors import ClusterAPIError, JobFailed, JobTimedOut, PollError
from kjob.job.outcome import OutcomeStatus, SubmittedJob
from kjob.job.waiter import JobWaiter, classify_status
from kjob.observers.dispatcher import EventBus

FAST = 0.01


def _submitted(cluster, name="demo-1", namespace="ci"):
    manifest = {"metadata": {"name": name, "namespace": namespace}}
    cluster.jobs[(namespace, name)] = manifest
    return SubmittedJob(namespace=namespace, name=name, manifest=manifest)


def _wait(waiter, job, **kw):
    return asyncio.run(waiter.wait(job, **kw))


# --------- classify_status ----------

def test_classify_running_job_is_not_terminal():
    assert classify_status("j", {"active": 2}) is None


def test_classify_unreported_status_is_not_terminal():
    assert classify_status("j", {}) is None


def test_classify_zero_active_without_failure_succeeds():
    assert classify_status("j", {"active": 0}).status is OutcomeStatus.SUCCEEDED


def test_classify_complete_condition_with_omitted_active_succeeds():
    status = {"succeeded": 1, "conditions": [{"type": "Complete", "status": "True"}]}
    assert classify_status("j", status).status is OutcomeStatus.SUCCEEDED


def test_classify_failed_condition_carries_reason():
    status = {"active": 0, "conditions": [{"type": "Failed", "status": "True", "reason": "OOMKilled"}]}
    outcome = classify_status("j", status)
    assert outcome.status is OutcomeStatus.FAILED
    assert outcome.reason == "OOMKilled"


def test_classify_ignores_false_failed_condition():
    status = {"active": 0, "conditions": [{"type": "Failed", "status": "False", "reason": "x"}]}
    assert classify_status("j", status).status is OutcomeStatus.SUCCEEDED


# --------- JobWaiter ----------

def test_wait_succeeds_when_active_drops_to_zero(fake_cluster, capture):
    cluster = fake_cluster([{"active": 1}, {"active": 1}, {"active": 0}])
    waiter = JobWaiter(cluster, poll_interval=FAST, bus=EventBus([capture]))

    outcome = _wait(waiter, _submitted(cluster), timeout=5)

    assert outcome.ok
    assert cluster.ops().count("get_job") == 3
    assert capture.kinds()[0] == "WaiterStarted"
    assert capture.kinds()[-1] == "WaiterSucceeded"
    outcome.raise_for_status()


def test_wait_reports_failure_reason(fake_cluster):
    cluster = fake_cluster([
        {"active": 0, "conditions": [{"type": "Failed", "status": "True", "reason": "OOMKilled"}]},
    ])
    waiter = JobWaiter(cluster, poll_interval=FAST)

    outcome = _wait(waiter, _submitted(cluster))

    assert outcome.status is OutcomeStatus.FAILED
    assert outcome.reason == "OOMKilled"
    with pytest.raises(JobFailed, match="OOMKilled"):
        outcome.raise_for_status()


def test_wait_times_out_on_never_finishing_job(fake_cluster, capture):
    cluster = fake_cluster([{"active": 1}])
    waiter = JobWaiter(cluster, poll_interval=0.05, bus=EventBus([capture]))

    outcome = _wait(waiter, _submitted(cluster), timeout=0.05)

    assert outcome.status is OutcomeStatus.TIMED_OUT
    assert "WaiterSucceeded" not in capture.kinds()
    assert "WaiterFailed" not in capture.kinds()
    assert capture.kinds()[-1] == "WaiterTimedOut"
    with pytest.raises(JobTimedOut):
        outcome.raise_for_status()


def test_zero_timeout_waits_until_the_job_finishes(fake_cluster):
    cluster = fake_cluster([{"active": 1}, {"active": 1}, {"active": 1}, {"active": 0}])
    waiter = JobWaiter(cluster, poll_interval=FAST)

    outcome = _wait(waiter, _submitted(cluster), timeout=0)

    assert outcome.ok
    assert cluster.ops().count("get_job") == 4


def test_cancel_event_ends_the_wait(fake_cluster):
    cluster = fake_cluster([{"active": 1}])
    waiter = JobWaiter(cluster, poll_interval=FAST)
    job = _submitted(cluster)

    async def scenario():
        cancel = asyncio.Event()
        asyncio.get_running_loop().call_later(0.05, cancel.set)
        return await waiter.wait(job, cancel=cancel)

    outcome = asyncio.run(scenario())
    assert outcome.status is OutcomeStatus.TIMED_OUT


def test_poll_failure_resolves_to_errored(fake_cluster, capture):
    cluster = fake_cluster([{"active": 1}])
    cluster.get_error = ClusterAPIError("get job failed: 500 Internal", status=500)
    waiter = JobWaiter(cluster, poll_interval=FAST, bus=EventBus([capture]))

    outcome = _wait(waiter, _submitted(cluster), timeout=5)

    assert outcome.status is OutcomeStatus.ERRORED
    assert outcome.cause is cluster.get_error
    assert cluster.ops().count("get_job") == 1
    assert capture.kinds()[-1] == "WaiterErrored"
    with pytest.raises(PollError):
        outcome.raise_for_status()


def test_poll_events_record_each_attempt(fake_cluster, capture):
    cluster = fake_cluster([{"active": 3}, {"active": 0}])
    waiter = JobWaiter(cluster, poll_interval=FAST, bus=EventBus([capture]))

    _wait(waiter, _submitted(cluster))

    polls = [e for e in capture.events if e.__class__.__name__ == "JobPolled"]
    assert [(p.attempt, p.active) for p in polls] == [(1, 3), (2, 0)]


def test_malformed_status_payload_resolves_to_errored(fake_cluster, capture):
    cluster = fake_cluster()
    cluster.get_job = lambda namespace, name: None
    waiter = JobWaiter(cluster, poll_interval=FAST, bus=EventBus([capture]))

    outcome = _wait(waiter, _submitted(cluster), timeout=5)

    assert outcome.status is OutcomeStatus.ERRORED
    assert isinstance(outcome.cause, AttributeError)
    assert capture.kinds()[-1] == "WaiterErrored"


def test_timed_out_wait_does_not_join_a_hanging_status_read(fake_cluster):
    cluster = fake_cluster()
    release = threading.Event()

    def hanging_get(namespace, name):
        release.wait(3)
        return {"status": {"active": 1}}

    cluster.get_job = hanging_get
    waiter = JobWaiter(cluster, poll_interval=FAST)

    started = time.monotonic()
    try:
        outcome = _wait(waiter, _submitted(cluster), timeout=0.2)
        elapsed = time.monotonic() - started
    finally:
        release.set()

    assert outcome.status is OutcomeStatus.TIMED_OUT
    assert elapsed < 1.5
