import pytest

import careerai.services.bulk_apply as bulk_mod
from careerai.core.actions import Action
from careerai.core.errors import ConfigError, ProviderError
from careerai.schemas.ai import Job
from careerai.services.bulk_apply import run_bulk_apply


def _jobs(n):
    return [Job(id=f"j{i}", title=f"Role {i}", company=f"Co {i}", ats=80) for i in range(1, n + 1)]


class _Recorder:
    def __init__(self, fail_on=()):
        self.fail_on = set(fail_on)
        self.saved = []
        self.attempts = 0

    def __call__(self, user_id, job, cover_letter):
        self.attempts += 1
        if self.attempts in self.fail_on:
            raise RuntimeError("write rejected")
        self.saved.append((user_id, job["id"], cover_letter))
        return {"id": f"rec-{self.attempts}"}


def test_persistence_failure_on_second_job_does_not_stop_the_batch():
    calls = []

    def _dispatch(action, payload):
        calls.append((action, payload["job"]["id"]))
        return f"  Letter for {payload['job']['title']}  "

    store = _Recorder(fail_on={2})
    report = run_bulk_apply(_jobs(3), "my resume", "user-1", dispatch_fn=_dispatch, save_fn=store)

    assert report.processed == 3
    assert report.saved == 2
    assert [s[1] for s in store.saved] == ["j1", "j3"]
    assert store.saved[0] == ("user-1", "j1", "Letter for Role 1")
    assert len(report.failures) == 1
    failure = report.failures[0]
    assert (failure.index, failure.title, failure.step) == (1, "Role 2", "save")
    assert "write rejected" in failure.error
    assert calls == [(Action.GENERATE_COVER_LETTER, "j1"), (Action.GENERATE_COVER_LETTER, "j2"), (Action.GENERATE_COVER_LETTER, "j3")]


def test_jobs_are_processed_strictly_in_order():
    order = []

    def _dispatch(action, payload):
        order.append(("dispatch", payload["job"]["id"]))
        return "letter"

    def _save(user_id, job, cover_letter):
        order.append(("save", job["id"]))

    run_bulk_apply(_jobs(2), "", "u", dispatch_fn=_dispatch, save_fn=_save)
    assert order == [("dispatch", "j1"), ("save", "j1"), ("dispatch", "j2"), ("save", "j2")]


def test_cover_letter_failure_is_recorded_and_skipped():
    def _dispatch(action, payload):
        if payload["job"]["id"] == "j1":
            raise ProviderError(details="503 busy")
        return "letter"

    store = _Recorder()
    report = run_bulk_apply(_jobs(2), "", "u", dispatch_fn=_dispatch, save_fn=store)
    assert report.saved == 1
    assert report.failures[0].step == "cover_letter"
    assert [s[1] for s in store.saved] == ["j2"]


def test_batch_is_capped(monkeypatch):
    monkeypatch.setattr(bulk_mod.settings, "bulk_apply_max_jobs", 10)
    store = _Recorder()
    report = run_bulk_apply(_jobs(14), "", "u", dispatch_fn=lambda a, p: "l", save_fn=store)
    assert report.processed == 10
    assert len(store.saved) == 10

    report = run_bulk_apply(_jobs(5), "", "u", dispatch_fn=lambda a, p: "l", save_fn=_Recorder(), max_jobs=2)
    assert report.processed == 2


def test_accepts_plain_dict_jobs():
    store = _Recorder()
    report = run_bulk_apply([{"id": "x", "title": "T"}], "", "u", dispatch_fn=lambda a, p: "l", save_fn=store)
    assert report.saved == 1
    assert report.to_dict() == {"processed": 1, "saved": 1, "failures": []}


def test_missing_api_key_stops_the_batch():
    store = _Recorder()

    def _dispatch(action, payload):
        raise ConfigError()

    with pytest.raises(ConfigError):
        run_bulk_apply(_jobs(3), "", "u", dispatch_fn=_dispatch, save_fn=store)
    assert store.attempts == 0


def test_empty_job_list():
    report = run_bulk_apply([], "", "u", dispatch_fn=lambda a, p: "l", save_fn=_Recorder())
    assert (report.processed, report.saved, report.failures) == (0, 0, [])
