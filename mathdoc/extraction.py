# mathdoc/extraction.py

import base64
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, AsyncIterator, Callable, Dict, List, Literal, Optional

import httpx

from .config import Settings
from .errors import ExtractionError

logger = logging.getLogger(__name__)

OutputFormat = Literal['docx', 'excel']

PROMPT_DIR = Path(__file__).parent / "prompts"
PROMPT_FILES = {
    'docx': PROMPT_DIR / "math_extraction.txt",
    'excel': PROMPT_DIR / "table_extraction.txt",
}


@dataclass(frozen=True)
class SourceFile:
    """An uploaded image or PDF."""
    data: bytes
    mime_type: str
    name: str = ""

    def to_part(self) -> Dict[str, Any]:
        return {
            "inline_data": {
                "mime_type": self.mime_type,
                "data": base64.b64encode(self.data).decode("utf-8"),
            }
        }


def load_prompt(output_format: OutputFormat) -> str:
    return PROMPT_FILES[output_format].read_text(encoding='utf-8')


@asynccontextmanager
async def _client_scope(settings: Settings, client: Optional[httpx.AsyncClient]) -> AsyncIterator[httpx.AsyncClient]:
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(timeout=settings.gemini.timeout) as own_client:
        yield own_client


def _response_text(response_data: Any) -> str:
    if not isinstance(response_data, dict):
        raise ValueError(f"Unexpected Gemini response: {type(response_data).__name__}")
    candidates = response_data.get("candidates") or []
    if not candidates:
        raise ValueError("Gemini returned no candidates.")
    try:
        parts = candidates[0].get("content", {}).get("parts", [])
        text = "".join(part.get("text", "") for part in parts)
    except (AttributeError, KeyError, TypeError) as e:
        raise ValueError(f"Malformed Gemini candidate: {e}") from e
    if not text.strip():
        raise ValueError("Gemini returned an empty content string.")
    return text


async def list_available_models(settings: Settings, client: Optional[httpx.AsyncClient] = None) -> List[Dict[str, Any]]:
    """
    Lists the models visible to the configured API key.

    Raises:
        ExtractionError: If the key is missing or the request fails.
    """
    if not settings.gemini.api_key:
        raise ExtractionError("No Gemini API key configured.")
    try:
        async with _client_scope(settings, client) as http:
            response = await http.get(f"{settings.gemini.base_url}/models", params={"key": settings.gemini.api_key})
            response.raise_for_status()
            data = response.json()
    except (httpx.HTTPError, ValueError) as e:
        raise ExtractionError(f"Failed to list models: {e}") from e
    if not isinstance(data, dict):
        raise ExtractionError("Failed to list models: unexpected response body.")
    return data.get("models", [])


async def extract_content(
        files: List[SourceFile],
        output_format: OutputFormat = 'docx',
        *,
        settings: Settings,
        client: Optional[httpx.AsyncClient] = None,
        log_callback: Optional[Callable[[str], None]] = None
) -> str:
    """
    Sends the uploaded files to Gemini and returns the extracted text.

    The configured models are tried in order of priority; the first one that
    answers with non-empty text wins.

    Args:
        files (List[SourceFile]): Images or PDFs of the question paper.
        output_format (OutputFormat): 'docx' for text with inline $...$ math,
            'excel' for a JSON array of rows.
        settings (Settings): API key, base URL, model list and timeout.
        client (Optional[httpx.AsyncClient]): Reused when given, otherwise one is opened per call.
        log_callback (Optional[Callable[[str], None]]): Receives progress messages.

    Returns:
        str: The raw model output.

    Raises:
        ExtractionError: If no request could be made, or every model failed.
    """
    def log(message: str):
        logger.info(message)
        if log_callback:
            log_callback(message)

    if not settings.gemini.api_key:
        raise ExtractionError("Please configure GEMINI_API_KEY.")
    if not files:
        raise ExtractionError("Please upload at least one image or PDF.")

    parts = [{"text": load_prompt(output_format)}] + [f.to_part() for f in files]
    payload = {"contents": [{"role": "user", "parts": parts}]}
    last_error: Optional[Exception] = None

    async with _client_scope(settings, client) as http:
        for model_name in settings.gemini.models:
            log(f"[EXTRACT] Attempting generation with model: {model_name}")
            try:
                response = await http.post(
                    f"{settings.gemini.base_url}/models/{model_name}:generateContent",
                    params={"key": settings.gemini.api_key},
                    json=payload,
                )
                response.raise_for_status()
                text = _response_text(response.json())
                log(f"[EXTRACT] [SUCCESS] {model_name} returned {len(text)} characters.")
                return text
            except (httpx.HTTPError, ValueError) as e:
                log(f"[EXTRACT] [ERROR] Model {model_name} failed, retrying with next available... {type(e).__name__}: {e}")
                last_error = e

    raise ExtractionError(
        "All model attempts failed. Please verify your API key and connection."
    ) from last_error
