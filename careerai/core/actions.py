from enum import Enum


class Action(str, Enum):
    """Requests the dashboard can route through the AI endpoint."""

    FIND_JOBS = "find_jobs"
    OPTIMIZE_RESUME = "optimize_resume"
    GENERATE_COVER_LETTER = "generate_cover_letter"
    GENERATE_LESSON = "generate_lesson"
    MOCK_INTERVIEW = "mock_interview"
    INTERVIEW_FEEDBACK = "interview_feedback"
    SIDE_HUSTLES = "side_hustles"
    CREATE_RESUME = "create_resume"

    @classmethod
    def parse(cls, value) -> "Action | None":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except (ValueError, TypeError):
            return None
