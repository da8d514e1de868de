"""Client for the Gemini generateContent endpoint.

The handler only depends on the TextGenerator Protocol, so any object with
an async ``generate(prompt_text) -> str`` can stand in for Gemini.
"""

import logging
from typing import Any, Protocol

import httpx

from .config import DEFAULT_MODEL, GEMINI_API_BASE
from .errors import UpstreamError

FALLBACK_REPLY = "⚠️ Sorry, I didn’t quite get that. Try again?"
UPSTREAM_ERROR_MESSAGE = "Gemini API error"


logger = logging.getLogger(__name__)


class TextGenerator(Protocol):
    """Anything that turns a rendered prompt into reply text."""

    async def generate(self, prompt_text: str) -> str:
        """Generate a reply for prompt_text."""
        ...


def build_payload(
    prompt_text: str,
    temperature: float = 0.9,
    max_output_tokens: int = 900,
) -> dict[str, Any]:
    """Build the generateContent request body."""
    return {
        "contents": [{"role": "user", "parts": [{"text": prompt_text}]}],
        "generationConfig": {
            "temperature": temperature,
            "maxOutputTokens": max_output_tokens,
        },
    }


def extract_text(payload: Any) -> str | None:
    """Pull the first candidate's text out of a response body.

    Returns:
        The stripped text, or None if the body does not have the expected
        ``candidates[0].content.parts[0].text`` shape or the text is blank.
    """
    try:
        text = payload["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None

    if not isinstance(text, str):
        return None
    return text.strip() or None


class GeminiClient:
    """Calls Gemini once per prompt. No retries and no timeout."""

    def __init__(
        self,
        api_key: str | None,
        model: str = DEFAULT_MODEL,
        base_url: str = GEMINI_API_BASE,
        temperature: float = 0.9,
        max_output_tokens: int = 900,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: Gemini API key, sent as the ``key`` query parameter.
            model: Model name used in the endpoint path.
            base_url: API root, without a trailing slash.
            temperature: Sampling temperature.
            max_output_tokens: Upper bound on generated tokens.
            http_client: Optional shared client; one is opened per call if omitted.
        """
        if not api_key:
            raise ValueError("GEMINI_API_KEY not set")
        self._api_key = api_key
        self._model = model
        self._base_url = base_url.rstrip("/")
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self._http_client = http_client

    @property
    def model(self) -> str:
        """Return the model being used."""
        return self._model

    @property
    def endpoint(self) -> str:
        return f"{self._base_url}/models/{self._model}:generateContent"

    async def _post(self, client: httpx.AsyncClient, prompt_text: str) -> httpx.Response:
        return await client.post(
            self.endpoint,
            params={"key": self._api_key},
            json=build_payload(prompt_text, self.temperature, self.max_output_tokens),
        )

    async def generate(self, prompt_text: str) -> str:
        """Generate reply text for a rendered prompt.

        Returns:
            The generated text, or FALLBACK_REPLY if the response carried none.

        Raises:
            UpstreamError: If Gemini answers with a non-success status.
            httpx.RequestError: If the request could not be sent.
        """
        if self._http_client is not None:
            response = await self._post(self._http_client, prompt_text)
        else:
            async with httpx.AsyncClient(timeout=None) as client:
                response = await self._post(client, prompt_text)

        if not response.is_success:
            try:
                payload = response.json()
            except ValueError:
                payload = None
            logger.error("Gemini error: %s", payload if payload is not None else response.text)
            raise UpstreamError(
                response.status_code,
                payload if payload is not None else UPSTREAM_ERROR_MESSAGE,
            )

        try:
            body = response.json()
        except ValueError:
            logger.warning("Gemini returned a non-JSON body; using fallback reply")
            return FALLBACK_REPLY

        return extract_text(body) or FALLBACK_REPLY
