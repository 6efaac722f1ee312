"""Gemini API Service"""
import logging
from typing import Optional, Dict, Any
import requests
from ..config import ai_config, AIConfig
from ..exceptions import GeminiAPIError, ConfigurationError

logger = logging.getLogger(__name__)


class GeminiService:
    """Service for interacting with the Google Gemini REST API"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        config: Optional[AIConfig] = None,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize Gemini service

        Args:
            api_key: Optional API key. If not provided, uses config.
            config: Optional AI configuration. Defaults to the global one.
            session: Optional requests session
        """
        config = config or ai_config
        self.api_key = api_key or config.api_key
        self.model = config.model
        self.temperature = config.temperature
        self.max_tokens = config.max_tokens
        self.api_base = config.api_base.rstrip("/")
        self.timeout = config.request_timeout
        self.session = session or requests.Session()

        if not self.api_key:
            logger.warning(
                "Gemini API key not configured. Predictions will be unavailable.")

    def _get_api_url(self) -> str:
        """Get the API URL for the current model"""
        return f"{self.api_base}/models/{self.model}:generateContent"

    def _build_payload(
        self,
        prompt: str,
        system_instruction: Optional[str] = None
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "contents": [{"parts": [{"text": prompt}]}],
        }

        generation_config = {}
        if self.temperature is not None:
            generation_config["temperature"] = self.temperature
        if self.max_tokens is not None:
            generation_config["maxOutputTokens"] = self.max_tokens
        if generation_config:
            payload["generationConfig"] = generation_config

        # systemInstruction is only accepted by v1beta
        if system_instruction and "v1beta" in self.api_base:
            payload["systemInstruction"] = {
                "parts": [{"text": system_instruction}]
            }
        elif system_instruction:
            payload["contents"] = [
                {"parts": [{"text": f"{system_instruction}\n\n{prompt}"}]}
            ]

        return payload

    def _make_request(
        self,
        prompt: str,
        system_instruction: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Make a single request to Gemini API

        Raises:
            ConfigurationError: If no API key is configured
            GeminiAPIError: On timeout, transport error or non-200 status
        """
        if not self.api_key:
            raise ConfigurationError("Gemini API key not configured")

        try:
            response = self.session.post(
                self._get_api_url(),
                headers={"Content-Type": "application/json"},
                params={"key": self.api_key},
                json=self._build_payload(prompt, system_instruction),
                timeout=self.timeout
            )
        except requests.exceptions.Timeout as e:
            logger.error(f"Request timeout after {self.timeout} seconds")
            raise GeminiAPIError(
                f"Gemini request timed out after {self.timeout}s") from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Request error: {e}")
            raise GeminiAPIError(f"Gemini request failed: {e}") from e

        if response.status_code != 200:
            try:
                error_data = response.json() if response.text else {}
                error_msg = error_data.get("error", {}).get("message", response.text)
            except ValueError:
                error_msg = response.text
            logger.error(
                f"Gemini API request failed with status {response.status_code}: {error_msg}")
            raise GeminiAPIError(
                f"Gemini API returned {response.status_code}: {error_msg}")

        try:
            return response.json()
        except ValueError as e:
            raise GeminiAPIError("Gemini API returned invalid JSON") from e

    def generate_text(
        self,
        prompt: str,
        system_instruction: Optional[str] = None
    ) -> str:
        """
        Generate text using Gemini API

        Args:
            prompt: The user prompt
            system_instruction: Optional system instruction

        Returns:
            Generated text

        Raises:
            GeminiAPIError: If the request fails or the response has no text
        """
        response = self._make_request(prompt, system_instruction)

        candidates = response.get("candidates") or []
        if not candidates:
            feedback = response.get("promptFeedback")
            raise GeminiAPIError(
                f"No candidates in Gemini response (prompt feedback: {feedback})")

        candidate = candidates[0]
        finish_reason = candidate.get("finishReason", "")
        if finish_reason and finish_reason != "STOP":
            if finish_reason == "MAX_TOKENS":
                logger.warning(
                    f"Response truncated due to MAX_TOKENS limit ({self.max_tokens}). "
                    f"Consider increasing GEMINI_MAX_TOKENS.")
            else:
                logger.warning(
                    f"Response may be incomplete. Finish reason: {finish_reason}")

        parts = (candidate.get("content") or {}).get("parts") or []
        text = "".join(part.get("text", "") for part in parts).strip()
        if not text:
            raise GeminiAPIError(
                f"Gemini response contained no text (finish reason: {finish_reason or 'unknown'})")

        logger.debug(
            f"Generated text via REST API (length: {len(text)} chars, finish_reason: {finish_reason or 'STOP'})")
        return text

    def is_available(self) -> bool:
        """Check if the service is available"""
        return self.api_key is not None and len(self.api_key.strip()) > 0
