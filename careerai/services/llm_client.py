import json
import logging
from typing import Any, Callable

import httpx

from careerai.config import settings
from careerai.core.errors import ProviderError

logger = logging.getLogger(__name__)

ShapeMatcher = Callable[[Any], str | None]


def _field_path(*path: str | int) -> ShapeMatcher:
    """Matcher that walks dict keys / list indexes and accepts a non-empty string leaf."""

    def match(envelope: Any) -> str | None:
        node = envelope
        for step in path:
            if isinstance(step, int):
                if not isinstance(node, list) or len(node) <= step:
                    return None
            elif not isinstance(node, dict) or step not in node:
                return None
            node = node[step]
        return node if isinstance(node, str) and node else None

    match.__name__ = ".".join(str(p) for p in path)
    return match


# Provider envelopes seen in the wild, checked in order; the first hit wins.
RESPONSE_TEXT_MATCHERS: list[tuple[str, ShapeMatcher]] = [
    ("result.content", _field_path("result", "content")),
    ("result.text", _field_path("result", "text")),
    ("text", _field_path("text")),
    ("output.text", _field_path("output", "text")),
    ("choices[0].text", _field_path("choices", 0, "text")),
    ("choices[0].message.content", _field_path("choices", 0, "message", "content")),
    ("candidates[0].content.parts[0].text", _field_path("candidates", 0, "content", "parts", 0, "text")),
]


def extract_text(envelope: Any) -> str:
    """Pull the generated text out of a provider response envelope.

    Falls back to the whole envelope serialized as JSON when no known shape matches.
    """
    for name, matcher in RESPONSE_TEXT_MATCHERS:
        text = matcher(envelope)
        if text is not None:
            logger.debug("Provider text found at %s (length=%d)", name, len(text))
            return text
    logger.info("No known text field in provider response; returning raw envelope")
    return json.dumps(envelope, ensure_ascii=False)


def is_llm_enabled() -> bool:
    """Whether a provider credential is configured."""
    return bool(settings.ai_api_key and settings.ai_api_key.strip())


def _http_client() -> httpx.Client:
    return httpx.Client(timeout=settings.ai_timeout_seconds)


def call_generative(prompt: str, max_tokens: int) -> str:
    """POST one prompt to the configured provider and return its text. Never retries."""
    headers = {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {settings.ai_api_key}",
    }
    body = {"prompt": prompt, "max_tokens": max_tokens}
    try:
        with _http_client() as client:
            response = client.post(settings.ai_endpoint_url, json=body, headers=headers)
    except httpx.HTTPError as e:
        logger.warning("AI provider call failed: %s", e)
        raise ProviderError(details=f"{type(e).__name__}: {e}") from e

    if not response.is_success:
        detail = response.text[:500]
        logger.warning("AI provider returned status=%d body=%s", response.status_code, detail)
        raise ProviderError(
            details=f"{response.status_code} {detail}".strip(),
            provider_status=response.status_code,
        )

    try:
        envelope = response.json()
    except ValueError as e:
        logger.warning("AI provider returned a non-JSON body (status=%d)", response.status_code)
        raise ProviderError(
            details="Provider response body is not valid JSON",
            provider_status=response.status_code,
        ) from e

    text = extract_text(envelope)
    logger.debug("AI provider response length=%d", len(text))
    return text
