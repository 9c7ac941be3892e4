import logging

import httpx
from django.conf import settings
from google import genai
from google.genai import errors, types
from pydantic import ValidationError

logger = logging.getLogger(__name__)


class AnalysisError(Exception):
    """An AI matching call failed (not configured, API error or bad reply)."""


class GenAIClient:
    """Tiny helper around the Gemini API returning schema-validated output."""

    def __init__(self, cfg=None):
        self.cfg = cfg or settings.GENAI
        self._client = None

    def _ensure_client(self):
        if self._client is not None:
            return self._client
        api_key = self.cfg.get("API_KEY")
        if not api_key:
            raise AnalysisError("AI matching is not configured. Set GEMINI_API_KEY.")
        self._client = genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=self.cfg["TIMEOUT_SECONDS"] * 1000),
        )
        return self._client

    def generate(self, contents, schema):
        """
        Send ``contents`` to the model and parse the JSON reply into ``schema``.

        Args:
            contents: prompt text and/or types.Part objects
            schema: pydantic model class the reply must validate against

        Raises:
            AnalysisError on API errors, empty replies or invalid output
        """
        client = self._ensure_client()
        try:
            response = client.models.generate_content(
                model=self.cfg["MODEL"],
                contents=contents,
                config=types.GenerateContentConfig(
                    temperature=self.cfg.get("TEMPERATURE", 0.2),
                    response_mime_type="application/json",
                    response_schema=schema,
                ),
            )
        except errors.APIError as exc:
            logger.warning("Gemini API error (%s): %s", exc.code, exc.message, exc_info=True)
            raise AnalysisError("The AI service returned an error. Please try again.") from exc
        except httpx.HTTPError as exc:
            logger.warning("Gemini request failed: %s", exc, exc_info=True)
            raise AnalysisError(
                "Could not reach the AI service. Please check your connection and try again."
            ) from exc

        text = (response.text or "").strip()
        if not text:
            raise AnalysisError("The AI service returned an empty response.")

        try:
            return schema.model_validate_json(text)
        except ValidationError as exc:
            logger.warning("Gemini reply failed %s validation: %s", schema.__name__, text[:500])
            raise AnalysisError("The AI service returned an unexpected response.") from exc
