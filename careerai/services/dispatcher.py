import logging

from careerai.config import settings
from careerai.core.actions import Action
from careerai.core.errors import ConfigError, MalformedRequestError, UnknownActionError
from careerai.services.llm_client import call_generative, is_llm_enabled
from careerai.services.prompts import PROMPT_TEMPLATES, render_prompt

logger = logging.getLogger(__name__)


def dispatch(action, payload: dict | None = None) -> str:
    """
    Render the prompt for action, call the provider once and return its raw text.
    Raises ConfigError, UnknownActionError, MalformedRequestError or ProviderError.
    """
    if not is_llm_enabled():
        logger.error("Dispatch refused: AI API key is not configured")
        raise ConfigError()

    parsed = Action.parse(action)
    if parsed is None:
        logger.info("Dispatch refused: unknown action %r", action)
        raise UnknownActionError(details=f"Unsupported action: {action!r}")

    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise MalformedRequestError("Invalid payload", details="payload must be a JSON object")

    prompt = render_prompt(parsed, payload)
    template = PROMPT_TEMPLATES[parsed]
    max_tokens = settings.ai_resume_max_tokens if template.long_output else settings.ai_max_tokens
    logger.info("Dispatching action=%s prompt_length=%d max_tokens=%d", parsed.value, len(prompt), max_tokens)
    return call_generative(prompt, max_tokens)
