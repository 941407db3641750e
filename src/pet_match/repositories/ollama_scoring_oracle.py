"""Ollama-based scoring oracle.

Uses Ollama's local chat API to judge compatibility. Ollama serves models
locally without API keys.

Requirements:
    - Ollama installed: https://ollama.com
    - Model pulled: `ollama pull llama3.1`
    - Ollama running: `ollama serve` (usually runs automatically)
"""

import logging

import httpx

from pet_match.config import settings
from pet_match.errors import OracleMalformedResponse, OracleUnavailable

logger = logging.getLogger(__name__)


class OllamaScoringOracle:
    """Ollama implementation of the ScoringOracle protocol.

    Uses ``POST {base_url}/api/chat`` with streaming disabled.
    """

    def __init__(
        self,
        model_name: str | None = None,
        base_url: str | None = None,
        temperature: float | None = None,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the Ollama scoring oracle.

        Args:
            model_name: Name of the Ollama model. Defaults to settings.ollama_model.
            base_url: Ollama API base URL. Defaults to settings.ollama_base_url.
            temperature: Sampling temperature. Defaults to settings.oracle_temperature.
            timeout: HTTP timeout in seconds.
            client: Pre-built httpx client, mainly for tests.
        """
        self._model_name = model_name or settings.ollama_model
        self._base_url = (base_url or settings.ollama_base_url).rstrip("/")
        self._temperature = settings.oracle_temperature if temperature is None else temperature
        self._timeout = timeout
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
            )
        return self._client

    @classmethod
    def create(
        cls,
        model_name: str | None = None,
        base_url: str | None = None,
    ) -> "OllamaScoringOracle":
        """Factory method to create OllamaScoringOracle with defaults.

        Args:
            model_name: Model name. If None, uses settings.
            base_url: Ollama API URL. If None, uses settings.

        Returns:
            Configured OllamaScoringOracle
        """
        return cls(model_name=model_name, base_url=base_url)

    @property
    def model_name(self) -> str:
        return self._model_name

    async def judge(self, system_prompt: str, user_prompt: str) -> str:
        """Request a compatibility judgment from the local model.

        Raises:
            OracleUnavailable: If Ollama cannot be reached or rejects the request
            OracleMalformedResponse: If the response has no message content
        """
        url = f"{self._base_url}/api/chat"
        payload = {
            "model": self._model_name,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "stream": False,
            "options": {"temperature": self._temperature, "num_predict": 8},
        }

        try:
            response = await self.client.post(url, json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            error_msg = f"Ollama API error: {e}"
            if "connection refused" in str(e).lower():
                error_msg += "\n  → Is Ollama running? Try: ollama serve"
            elif "not found" in str(e).lower():
                error_msg += f"\n  → Model not found. Try: ollama pull {self._model_name}"
            raise OracleUnavailable(error_msg) from e
        except ValueError as e:
            raise OracleMalformedResponse(f"Ollama returned invalid JSON: {e}") from e

        message = data.get("message") if isinstance(data, dict) else None
        if not isinstance(message, dict) or not isinstance(message.get("content"), str):
            raise OracleMalformedResponse(f"Unexpected response format: {data}")
        return message["content"]

    async def is_available(self) -> bool:
        """Check if Ollama is running and lists at least one model."""
        try:
            response = await self.client.get(f"{self._base_url}/api/tags")
            response.raise_for_status()
            return True
        except httpx.HTTPError as e:
            logger.warning(f"Ollama unavailable: {e}")
            return False

    async def close(self) -> None:
        """Close the async HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
