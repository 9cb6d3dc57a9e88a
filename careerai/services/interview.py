from dataclasses import dataclass, field
from enum import Enum


class InterviewPhase(str, Enum):
    IDLE = "idle"
    QUESTIONS_LOADED = "questions_loaded"
    ANSWERING = "answering"
    FEEDBACK_SHOWN = "feedback_shown"
    COMPLETE = "complete"


class InterviewStateError(Exception):
    pass


@dataclass
class InterviewSession:
    """Mock interview progress: load questions, answer one, see feedback, move on."""

    role: str = ""
    questions: list[str] = field(default_factory=list)
    index: int = 0
    phase: InterviewPhase = InterviewPhase.IDLE
    answers: list[str] = field(default_factory=list)
    feedback: list[str] = field(default_factory=list)

    def reset(self) -> None:
        self.role = ""
        self.questions = []
        self.index = 0
        self.phase = InterviewPhase.IDLE
        self.answers = []
        self.feedback = []

    def load(self, role: str, questions: list[str]) -> None:
        self.reset()
        self.role = role
        self.questions = [q for q in questions if q]
        if self.questions:
            self.phase = InterviewPhase.QUESTIONS_LOADED

    @property
    def current_question(self) -> str | None:
        if self.phase in (InterviewPhase.QUESTIONS_LOADED, InterviewPhase.ANSWERING, InterviewPhase.FEEDBACK_SHOWN):
            return self.questions[self.index]
        return None

    @property
    def is_last_question(self) -> bool:
        return self.index >= len(self.questions) - 1

    def begin(self) -> None:
        self._expect(InterviewPhase.QUESTIONS_LOADED)
        self.phase = InterviewPhase.ANSWERING

    def record_feedback(self, answer: str, feedback: str) -> None:
        self._expect(InterviewPhase.ANSWERING)
        self.answers.append(answer)
        self.feedback.append(feedback)
        self.phase = InterviewPhase.FEEDBACK_SHOWN

    def advance(self) -> None:
        self._expect(InterviewPhase.FEEDBACK_SHOWN)
        if self.is_last_question:
            self.phase = InterviewPhase.COMPLETE
        else:
            self.index += 1
            self.phase = InterviewPhase.ANSWERING

    def _expect(self, phase: InterviewPhase) -> None:
        if self.phase != phase:
            raise InterviewStateError(f"expected phase {phase.value}, interview is {self.phase.value}")
