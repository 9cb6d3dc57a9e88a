"""Turn raw provider text into typed, always-displayable results.

Every path through here returns a value. When the text is not usable JSON the
result degrades to opaque text (single-value actions) or a line-split list
(list actions) and is flagged with a ``NormalizationFallback``.
"""
import json
import logging
import random
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable
from uuid import uuid4

from careerai.core.actions import Action
from careerai.schemas.ai import Gig, Job, OptimizedResume

logger = logging.getLogger(__name__)

MAX_FALLBACK_ITEMS = 10
SYNTHETIC_ATS_RANGE = (70, 95)  # half-open
DEFAULT_JOB_STAGE = "Suggested"

JOB_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "title": ("title", "jobTitle", "position"),
    "company": ("company", "employer", "organization"),
    "ats": ("ats", "score"),
    "stage": ("stage", "status"),
    "date": ("date", "posted"),
}
GIG_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "title": ("title", "name"),
    "desc": ("desc", "description"),
    "pay": ("pay", "rate", "earnings"),
}
QUESTION_FIELDS = ("question", "text", "prompt")

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)
_SPAN_PAIRS = (("[", "]"), ("{", "}"))


class ParseBranch(str, Enum):
    DIRECT = "direct"
    FENCED = "fenced"
    EMBEDDED = "embedded"


class NormalizationFallback(str, Enum):
    """Recovered-from parse failures. Not errors: the caller still gets a result."""

    LINE_SPLIT = "line_split"
    OPAQUE_TEXT = "opaque_text"


class ResultShape(str, Enum):
    ARRAY = "array"
    WRAPPED = "wrapped"
    SINGLE_OBJECT = "single_object"
    OBJECT = "object"
    TEXT = "text"
    LINES = "lines"


@dataclass(frozen=True)
class ParseResult:
    value: Any = None
    branch: ParseBranch | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class NormalizedResult:
    action: Action
    value: Any
    shape: ResultShape
    fallback: NormalizationFallback | None = None
    parse_error: str | None = None

    def to_jsonable(self) -> Any:
        if isinstance(self.value, list):
            return [v.model_dump() if hasattr(v, "model_dump") else v for v in self.value]
        if hasattr(self.value, "model_dump"):
            return self.value.model_dump()
        return self.value


def _loads(text: str) -> tuple[Any, str | None]:
    try:
        return json.loads(text), None
    except (json.JSONDecodeError, ValueError) as e:
        return None, str(e)


def try_parse(text: str) -> ParseResult:
    """Parse text as JSON, also accepting JSON inside a code fence or surrounded by prose."""
    stripped = (text or "").strip()
    if not stripped:
        return ParseResult(error="empty text")

    value, err = _loads(stripped)
    if err is None:
        return ParseResult(value, ParseBranch.DIRECT)
    first_error = err

    fence = _FENCE_RE.search(stripped)
    if fence:
        value, err = _loads(fence.group(1).strip())
        if err is None:
            return ParseResult(value, ParseBranch.FENCED)

    for opener, closer in _SPAN_PAIRS:
        start, end = stripped.find(opener), stripped.rfind(closer)
        if start != -1 and end > start and _is_standalone_span(stripped, start, end):
            value, err = _loads(stripped[start : end + 1])
            if err is None:
                return ParseResult(value, ParseBranch.EMBEDDED)

    return ParseResult(error=first_error)


def _is_standalone_span(text: str, start: int, end: int) -> bool:
    """A span counts as a JSON payload only if it sits on its own lines or the text is one line.

    Keeps a bracketed fragment inside multi-line prose ("a list like [1, 2]") from
    replacing the prose itself.
    """
    before, after = text[:start], text[end + 1 :]
    if "\n" not in before and "\n" not in after:
        return True
    opens_line = not before.rstrip(" \t") or before.rstrip(" \t").endswith("\n")
    closes_line = not after.lstrip(" \t") or after.lstrip(" \t").startswith("\n")
    return opens_line and closes_line


def synthesize_ats(rng: random.Random | None = None) -> int:
    low, high = SYNTHETIC_ATS_RANGE
    return (rng or random).randrange(low, high)


def new_job_id() -> str:
    return uuid4().hex


def _first_present(item: dict, aliases: tuple[str, ...]) -> Any:
    for key in aliases:
        value = item.get(key)
        if value is not None and value != "":
            return value
    return None


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def coerce_score(value: Any) -> int | None:
    """Accept 91, 91.4, "91", "91%"; clamp to 0..100. None when unreadable."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        value = value.strip().rstrip("%").strip()
    try:
        score = int(round(float(value)))
    except (TypeError, ValueError, OverflowError):
        return None
    return max(0, min(100, score))


def normalize_job(item: Any, rng: random.Random | None = None) -> Job:
    if not isinstance(item, dict):
        return Job(id=new_job_id(), title=_as_text(item), ats=synthesize_ats(rng), stage=DEFAULT_JOB_STAGE)

    fields = {name: _first_present(item, aliases) for name, aliases in JOB_FIELD_ALIASES.items()}
    ats = coerce_score(fields["ats"])
    return Job(
        id=_as_text(item.get("id")) or new_job_id(),
        title=_as_text(fields["title"]),
        company=_as_text(fields["company"]),
        ats=ats if ats is not None else synthesize_ats(rng),
        stage=_as_text(fields["stage"]) or DEFAULT_JOB_STAGE,
        date=_as_text(fields["date"]),
    )


def normalize_gig(item: Any) -> Gig:
    if not isinstance(item, dict):
        return Gig(title=_as_text(item))
    fields = {name: _first_present(item, aliases) for name, aliases in GIG_FIELD_ALIASES.items()}
    return Gig(**{name: _as_text(value) for name, value in fields.items()})


def normalize_question(item: Any) -> str:
    if isinstance(item, dict):
        found = _first_present(item, QUESTION_FIELDS)
        return _as_text(found if found is not None else item)
    return _as_text(item)


def split_lines(text: str, limit: int = MAX_FALLBACK_ITEMS) -> list[str]:
    lines = [line.strip() for line in (text or "").splitlines()]
    return [line for line in lines if line][:limit]


@dataclass(frozen=True)
class _ListSpec:
    wrapper_key: str
    entity_keys: tuple[str, ...]
    convert: Callable[[Any, random.Random | None], Any]


_LIST_SPECS: dict[Action, _ListSpec] = {
    Action.FIND_JOBS: _ListSpec("jobs", JOB_FIELD_ALIASES["title"], normalize_job),
    Action.MOCK_INTERVIEW: _ListSpec("questions", QUESTION_FIELDS, lambda item, rng: normalize_question(item)),
    Action.SIDE_HUSTLES: _ListSpec("gigs", GIG_FIELD_ALIASES["title"], lambda item, rng: normalize_gig(item)),
}


def _match_collection(value: Any, spec: _ListSpec) -> tuple[list, ResultShape] | None:
    if isinstance(value, list):
        return value, ResultShape.ARRAY
    if isinstance(value, dict):
        wrapped = value.get(spec.wrapper_key)
        if isinstance(wrapped, list):
            return wrapped, ResultShape.WRAPPED
        if any(key in value for key in spec.entity_keys):
            return [value], ResultShape.SINGLE_OBJECT
    return None


def _normalize_list(action: Action, raw_text: str, rng: random.Random | None) -> NormalizedResult:
    spec = _LIST_SPECS[action]
    parsed = try_parse(raw_text)
    matched = _match_collection(parsed.value, spec) if parsed.ok else None
    if matched is not None:
        items, shape = matched
        values = [spec.convert(item, rng) for item in items if item is not None]
        return NormalizedResult(action, values, shape)

    reason = parsed.error or "unrecognized JSON shape"
    logger.debug("Normalizing %s via line split: %s", action.value, reason)
    values = [spec.convert(line, rng) for line in split_lines(raw_text)]
    return NormalizedResult(
        action, values, ResultShape.LINES, fallback=NormalizationFallback.LINE_SPLIT, parse_error=reason
    )


def _normalize_optimized_resume(action: Action, raw_text: str, rng: random.Random | None) -> NormalizedResult:
    parsed = try_parse(raw_text)
    if parsed.ok and isinstance(parsed.value, dict) and "optimized" in parsed.value:
        value = OptimizedResume(
            optimized=_as_text(parsed.value.get("optimized")),
            score=coerce_score(parsed.value.get("score")),
        )
        return NormalizedResult(action, value, ResultShape.OBJECT)

    reason = parsed.error or "missing 'optimized' field"
    return NormalizedResult(
        action,
        OptimizedResume(optimized=(raw_text or "").strip(), score=None),
        ResultShape.TEXT,
        fallback=NormalizationFallback.OPAQUE_TEXT,
        parse_error=reason,
    )


def _normalize_text(action: Action, raw_text: str, rng: random.Random | None) -> NormalizedResult:
    return NormalizedResult(action, (raw_text or "").strip(), ResultShape.TEXT)


NORMALIZERS: dict[Action, Callable[[Action, str, random.Random | None], NormalizedResult]] = {
    Action.FIND_JOBS: _normalize_list,
    Action.MOCK_INTERVIEW: _normalize_list,
    Action.SIDE_HUSTLES: _normalize_list,
    Action.OPTIMIZE_RESUME: _normalize_optimized_resume,
    Action.GENERATE_COVER_LETTER: _normalize_text,
    Action.GENERATE_LESSON: _normalize_text,
    Action.INTERVIEW_FEEDBACK: _normalize_text,
    Action.CREATE_RESUME: _normalize_text,
}


def normalize(action: Action, raw_text: Any, rng: random.Random | None = None) -> NormalizedResult:
    """Normalize provider text for action. Does not raise for any input text."""
    action = Action(action)
    if not isinstance(raw_text, str):
        raw_text = "" if raw_text is None else str(raw_text)
    return NORMALIZERS[action](action, raw_text, rng)
