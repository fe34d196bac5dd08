"""
Remote safety advisor (OpenRouter chat completions).

``RemoteAdvisor.get_advice`` always returns text. Every failure mode of the
provider (missing key, quota/payment error, any other error envelope,
malformed success body, transport error) degrades to the deterministic
:class:`~assistant.advice_fallback.FallbackAdvisor`.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from assistant.advice_fallback import FallbackAdvisor
from assistant.config import (
    APP_TITLE,
    DEFAULT_ADVICE_MODEL,
    DEFAULT_ADVICE_TIMEOUT,
    DEFAULT_APP_URL,
    OPENROUTER_CHAT_URL,
    AssistantConfig,
)
from assistant.http_client import provider_client

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a safety advisor. Provide brief, practical advice. "
    "Keep responses under 100 words."
)

NOT_CONFIGURED_MESSAGE = (
    "I'm sorry, but I can't provide advice right now due to a configuration issue. "
    "Please try the emergency services mode or contact emergency services directly "
    "if you need immediate help."
)

# OpenRouter reports insufficient credits with this error code.
QUOTA_ERROR_CODE = 402


def _error_details(body: Any) -> tuple[Any, str]:
    """Pull ``(code, message)`` out of an OpenRouter error envelope."""
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        err = body["error"]
        return err.get("code"), str(err.get("message") or "")
    return None, ""


def _is_quota_error(code: Any) -> bool:
    try:
        return int(code) == QUOTA_ERROR_CODE
    except (TypeError, ValueError):
        return False


def _extract_content(body: Any) -> str | None:
    """Return the first choice's message content, or None if the shape is off."""
    if not isinstance(body, dict):
        return None
    choices = body.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    choice = choices[0]
    if not isinstance(choice, dict) or not isinstance(choice.get("message"), dict):
        return None
    content = choice["message"].get("content")
    if not isinstance(content, str) or not content.strip():
        return None
    return content


class RemoteAdvisor:
    def __init__(
        self,
        api_key: str | None,
        fallback: FallbackAdvisor | None = None,
        *,
        model: str = DEFAULT_ADVICE_MODEL,
        url: str = OPENROUTER_CHAT_URL,
        referer: str = DEFAULT_APP_URL,
        app_title: str = APP_TITLE,
        temperature: float = 0.7,
        max_tokens: int = 150,
        timeout: float = DEFAULT_ADVICE_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.api_key = api_key
        self.fallback = fallback or FallbackAdvisor()
        self.model = model
        self.url = url
        self.referer = referer
        self.app_title = app_title
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self._client = client

    @classmethod
    def from_config(
        cls,
        config: AssistantConfig,
        fallback: FallbackAdvisor | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> "RemoteAdvisor":
        return cls(
            config.openrouter_key,
            fallback,
            model=config.advice_model,
            url=config.chat_url,
            referer=config.app_url,
            app_title=config.app_title,
            timeout=config.advice_timeout,
            client=client,
        )

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
            "HTTP-Referer": self.referer,
            "X-Title": self.app_title,
        }

    def _payload(self, question: str) -> dict[str, Any]:
        # Single turn only: prior conversation is never sent.
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": question},
            ],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }

    async def get_advice(self, question: str) -> str:
        if not self.api_key:
            logger.warning("OpenRouter key not set; advice unavailable")
            return NOT_CONFIGURED_MESSAGE

        try:
            async with provider_client(self._client, self.timeout) as client:
                resp = await client.post(
                    self.url,
                    headers=self._headers(),
                    json=self._payload(question),
                )
            body = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Error getting AI advice: %s", exc)
            return self.fallback.get_fallback(question)

        if not resp.is_success:
            code, message = _error_details(body)
            if _is_quota_error(code):
                logger.warning("OpenRouter quota exhausted (code %s); using offline advice", code)
            else:
                logger.error(
                    "OpenRouter API error (HTTP %d, code %s): %s",
                    resp.status_code, code, message or "Failed to get AI response",
                )
            return self.fallback.get_fallback(question)

        content = _extract_content(body)
        if content is None:
            logger.warning("OpenRouter returned no usable choices; using offline advice")
            return self.fallback.get_fallback(question)

        return content
