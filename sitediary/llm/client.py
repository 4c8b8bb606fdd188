"""Text generation client for the AI gateway.

Transport-level ConnectionErrors (the request never reached Gemini) are
retried with exponential backoff. Failures that carry an HTTP status
(401, 429, 5xx) are raised unchanged so the gateway can map them; those are
never retried here.
"""

from __future__ import annotations

from typing import Any, Protocol

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from sitediary.config import LLM_MAX_RETRIES
from sitediary.llm.gemini import get_gemini_model, is_gemini_configured
from sitediary.observability.logging import get_logger
from sitediary.observability.telemetry import counter

logger = get_logger(__name__)


class TextProvider(Protocol):
    """What the AI gateway needs from a text-generation backend."""

    def is_configured(self) -> bool: ...

    def generate(
        self,
        prompt: str,
        *,
        system_instruction: str,
        temperature: float,
        max_output_tokens: int,
    ) -> str: ...


def _response_text(response: Any) -> str:
    # .text raises ValueError when the candidate was blocked or empty
    try:
        return response.text or ""
    except ValueError:
        counter("llm.empty_response")
        logger.warning("Gemini returned no usable candidate")
        return ""


@retry(
    stop=stop_after_attempt(LLM_MAX_RETRIES),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type(ConnectionError),
    reraise=True,
)
def generate_text(
    prompt: str,
    system_instruction: str,
    temperature: float,
    max_output_tokens: int,
) -> str:
    """Call Gemini once (plus transport retries) and return the response text.

    Raises:
        ConnectionError: After LLM_MAX_RETRIES failed connection attempts.
        GeminiInitializationError: If no backend is available.
        google.api_core.exceptions.GoogleAPICallError: Provider HTTP failures.
    """
    model = get_gemini_model(system_instruction)
    generation_config = {
        "temperature": temperature,
        "max_output_tokens": max_output_tokens,
    }

    try:
        response = model.generate_content(prompt, generation_config=generation_config)
    except ConnectionError as e:
        counter("llm.connection_error")
        logger.warning("LLM connection failed, will retry: %s", e)
        raise

    return _response_text(response)


class GeminiTextProvider:
    """TextProvider backed by Vertex AI / google-generativeai."""

    def is_configured(self) -> bool:
        return is_gemini_configured()

    def generate(
        self,
        prompt: str,
        *,
        system_instruction: str,
        temperature: float,
        max_output_tokens: int,
    ) -> str:
        return generate_text(prompt, system_instruction, temperature, max_output_tokens)
