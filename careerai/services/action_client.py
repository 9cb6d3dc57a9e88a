"""Dashboard-side orchestration of AI actions.

``ActionClient`` sends one dispatch per user action, normalizes the text it
gets back and keeps the results on an explicit ``AppState``. Dispatch errors
are handed to ``on_error`` (the dashboard shows a blocking notice) and never
leave an action stuck in the loading state.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Callable

import httpx

from careerai.core.actions import Action
from careerai.core.errors import DispatchError, ProviderError, error_from_body
from careerai.repos import application_repo
from careerai.schemas.ai import Gig, Job, OptimizedResume
from careerai.services.bulk_apply import BulkApplyReport, DispatchFn, SaveFn, run_bulk_apply
from careerai.services.interview import InterviewPhase, InterviewSession, InterviewStateError
from careerai.services.normalizer import NormalizedResult, normalize

logger = logging.getLogger(__name__)


class HttpDispatcher:
    """Dispatch through a running API (POST /ai) instead of calling the provider in-process."""

    def __init__(self, base_url: str, timeout: float = 60.0, client: httpx.Client | None = None):
        self._client = client or httpx.Client(base_url=base_url.rstrip("/"), timeout=timeout)

    def __call__(self, action: Action, payload: dict) -> str:
        action_value = action.value if isinstance(action, Action) else action
        try:
            response = self._client.post("/ai", json={"action": action_value, "payload": payload})
        except httpx.HTTPError as e:
            raise ProviderError(details=f"{type(e).__name__}: {e}") from e
        try:
            body = response.json()
        except ValueError as e:
            raise ProviderError(details=f"API returned a non-JSON body (status {response.status_code})") from e
        if response.is_success and isinstance(body, dict) and "result" in body:
            return str(body["result"])
        raise error_from_body(response.status_code, body if isinstance(body, dict) else {})

    def close(self) -> None:
        self._client.close()


class DatabaseApplicationStore:
    """Append application records through a SQLAlchemy session."""

    def __init__(self, db):
        self._db = db

    def __call__(self, user_id: str, job: dict, cover_letter: str):
        return application_repo.create(self._db, user_id, job, cover_letter)


@dataclass
class AppState:
    jobs: list[Job] = field(default_factory=list)
    optimized_resume: OptimizedResume | None = None
    cover_letter: str = ""
    lesson: str = ""
    side_hustles: list[Gig] = field(default_factory=list)
    created_resume: str = ""
    interview: InterviewSession = field(default_factory=InterviewSession)
    last_bulk_apply: BulkApplyReport | None = None
    loading: Action | None = None
    last_error: str | None = None


def _log_error(err: DispatchError) -> None:
    logger.warning("Action failed: %s", err)


class ActionClient:
    def __init__(
        self,
        dispatch_fn: DispatchFn,
        *,
        save_fn: SaveFn | None = None,
        on_error: Callable[[DispatchError], None] = _log_error,
        state: AppState | None = None,
    ):
        self.dispatch_fn = dispatch_fn
        self.save_fn = save_fn
        self.on_error = on_error
        self.state = state or AppState()

    def run(self, action: Action, payload: dict) -> NormalizedResult | None:
        """Dispatch one action and normalize the reply. Returns None when the dispatch failed."""
        self.state.loading = action
        self.state.last_error = None
        try:
            raw = self.dispatch_fn(action, payload)
        except DispatchError as e:
            self.state.last_error = e.message
            self.on_error(e)
            return None
        finally:
            self.state.loading = None
        result = normalize(action, raw)
        if result.fallback is not None:
            logger.debug("Action %s normalized with fallback=%s", action.value, result.fallback.value)
        return result

    def find_jobs(self, resume_text: str, query: str) -> list[Job] | None:
        result = self.run(Action.FIND_JOBS, {"resume_text": resume_text, "query": query})
        if result is None:
            return None
        self.state.jobs = result.value
        return self.state.jobs

    def optimize_resume(self, resume_text: str) -> OptimizedResume | None:
        result = self.run(Action.OPTIMIZE_RESUME, {"resume_text": resume_text})
        if result is None:
            return None
        self.state.optimized_resume = result.value
        return result.value

    def generate_cover_letter(self, job: Job | dict[str, Any], resume_text: str) -> str | None:
        job_data = job.model_dump() if isinstance(job, Job) else job
        result = self.run(Action.GENERATE_COVER_LETTER, {"job": job_data, "resume_text": resume_text})
        if result is None:
            return None
        self.state.cover_letter = result.value
        return result.value

    def generate_lesson(self, skill: str) -> str | None:
        result = self.run(Action.GENERATE_LESSON, {"skill": skill})
        if result is None:
            return None
        self.state.lesson = result.value
        return result.value

    def side_hustles(self, profile: str) -> list[Gig] | None:
        result = self.run(Action.SIDE_HUSTLES, {"profile": profile})
        if result is None:
            return None
        self.state.side_hustles = result.value
        return result.value

    def create_resume(self, profile: dict[str, Any]) -> str | None:
        result = self.run(Action.CREATE_RESUME, {"profile": profile})
        if result is None:
            return None
        self.state.created_resume = result.value
        return result.value

    # Mock interview

    def start_mock_interview(self, role: str) -> list[str] | None:
        """(Re)start from idle and load a fresh set of questions."""
        interview = self.state.interview
        interview.reset()
        result = self.run(Action.MOCK_INTERVIEW, {"role": role})
        if result is None:
            return None
        interview.load(role, result.value)
        return interview.questions

    def answer_question(self, answer: str) -> str | None:
        interview = self.state.interview
        if interview.phase == InterviewPhase.QUESTIONS_LOADED:
            interview.begin()
        if interview.phase != InterviewPhase.ANSWERING:
            raise InterviewStateError(f"no question awaiting an answer (interview is {interview.phase.value})")
        question = interview.current_question
        result = self.run(Action.INTERVIEW_FEEDBACK, {"question": question, "answer": answer})
        if result is None:
            return None
        interview.record_feedback(answer, result.value)
        return result.value

    def next_question(self) -> str | None:
        """Move past the shown feedback. Returns the next question, or None once complete."""
        interview = self.state.interview
        interview.advance()
        return interview.current_question

    # Bulk apply

    def bulk_apply(self, user_id: str, resume_text: str, max_jobs: int | None = None) -> BulkApplyReport | None:
        """Apply to the loaded jobs. Returns None when the batch could not start (missing API key)."""
        if self.save_fn is None:
            raise RuntimeError("bulk_apply needs a save_fn to persist application records")
        self.state.loading = Action.GENERATE_COVER_LETTER
        self.state.last_error = None
        try:
            report = run_bulk_apply(
                self.state.jobs,
                resume_text,
                user_id,
                dispatch_fn=self.dispatch_fn,
                save_fn=self.save_fn,
                max_jobs=max_jobs,
            )
        except DispatchError as e:
            self.state.last_error = e.message
            self.on_error(e)
            return None
        finally:
            self.state.loading = None
        self.state.last_bulk_apply = report
        return report
