"""Prompt templates, one per action.

Templates are plain ``str.format`` strings. Payload values are inserted as
text; nested objects are serialized as JSON. A field missing from the payload
renders as an empty string.
"""
import json
from dataclasses import dataclass

from careerai.core.actions import Action


@dataclass(frozen=True)
class PromptTemplate:
    text: str
    long_output: bool = False  # use the larger resume token budget
    json_indent: int | None = None  # indentation for nested payload objects


PROMPT_TEMPLATES: dict[Action, PromptTemplate] = {
    Action.FIND_JOBS: PromptTemplate(
        "You are an expert job-sourcing assistant. Given resume text and a query, "
        "return a JSON array of up to 10 entry-level job suggestions.\n"
        "Resume: {resume_text}\n"
        "Query: {query}\n"
        'Return JSON array like [{{"title": "", "company": "", "ats": 0, "stage": "", "date": ""}}, ...].'
    ),
    Action.OPTIMIZE_RESUME: PromptTemplate(
        "You are an ATS resume expert. Optimize the following resume text for entry-level job "
        'applications. Provide output as JSON: {{"optimized": "...", "score": 0-100}}. Resume:\n'
        "{resume_text}"
    ),
    Action.GENERATE_COVER_LETTER: PromptTemplate(
        "Write a concise professional cover letter for this job and this resume.\n"
        "Job: {job}\n"
        "Resume: {resume_text}\n"
        "Return plain text."
    ),
    Action.GENERATE_LESSON: PromptTemplate(
        "Generate a 10-20 minute micro-lesson (outline + steps + short practice) to improve skill: {skill}"
    ),
    Action.MOCK_INTERVIEW: PromptTemplate(
        "Act as an interviewer for the role: {role}. "
        'Generate 5 realistic interview questions in JSON: {{"questions": [ ... ]}}'
    ),
    Action.INTERVIEW_FEEDBACK: PromptTemplate(
        "Question: {question}\n"
        "Candidate Answer: {answer}\n"
        "Provide constructive feedback and a 3-point improvement plan. Return plain text."
    ),
    Action.SIDE_HUSTLES: PromptTemplate(
        "Suggest 5 freelance side hustles for a person with profile: {profile}. "
        'Return JSON array of {{"title": "", "desc": "", "pay": ""}}.'
    ),
    Action.CREATE_RESUME: PromptTemplate(
        "You are an expert resume writer. Create a professional, ATS-friendly resume (plain text) "
        "using this profile. Include: name, title, contact line (placeholder), summary/profile, "
        "skills (comma separated), education (formatted), experience (bullet points showing "
        "measurable impact). Output only the resume text. Use concise, achievement-focused language.\n\n"
        "Profile:\n{profile}",
        long_output=True,
        json_indent=2,
    ),
}


class _BlankMissing(dict):
    def __missing__(self, key):
        return ""


def _as_prompt_text(value, json_indent: int | None) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value, indent=json_indent, ensure_ascii=False)
    return str(value)


def render_prompt(action: Action, payload: dict | None) -> str:
    template = PROMPT_TEMPLATES[action]
    fields = _BlankMissing(
        {str(k): _as_prompt_text(v, template.json_indent) for k, v in (payload or {}).items()}
    )
    return template.text.format_map(fields)
