"""OpenAI-compatible scoring oracle.

Calls the chat completions API through the official ``openai`` SDK and
returns the assistant's answer text. Works with api.openai.com and any
server exposing the same API (Azure OpenAI proxies, vLLM, LiteLLM, ...).

Key features:
- AsyncOpenAI client, sharing one connection pool across concurrent batches
- Very short completions (``max_tokens`` 3) since only a number is expected
- SDK retries are disabled; a failed call surfaces as OracleUnavailable
"""

import logging

import httpx
import openai
from openai import AsyncOpenAI

from pet_match.config import settings
from pet_match.errors import OracleMalformedResponse, OracleUnavailable

logger = logging.getLogger(__name__)


class OpenAIScoringOracle:
    """OpenAI chat-completions implementation of the ScoringOracle protocol.

    This class satisfies the ScoringOracle protocol through structural
    typing - no explicit inheritance needed.

    Example:
        ```python
        oracle = OpenAIScoringOracle.create(model_name="gpt-4")
        answer = await oracle.judge(system_prompt, user_prompt)
        print(answer)  # "78"
        ```
    """

    def __init__(
        self,
        api_key: str | None = None,
        model_name: str | None = None,
        base_url: str | None = None,
        temperature: float | None = None,
        max_tokens: int = 3,
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the OpenAI scoring oracle.

        Args:
            api_key: API key. Defaults to settings.openai_api_key.
            model_name: Chat model. Defaults to settings.oracle_model.
            base_url: API base URL. Defaults to settings.openai_base_url.
            temperature: Sampling temperature. Defaults to settings.oracle_temperature.
            max_tokens: Completion length limit.
            timeout: Request timeout in seconds (the scoring client applies its own, shorter one).
            http_client: httpx client handed to the SDK, mainly for tests.
        """
        self._api_key = api_key or settings.openai_api_key
        self._model_name = model_name or settings.oracle_model
        self._base_url = base_url or settings.openai_base_url
        self._temperature = settings.oracle_temperature if temperature is None else temperature
        self._max_tokens = max_tokens
        self._timeout = timeout
        self._http_client = http_client
        self._client: AsyncOpenAI | None = None

    @property
    def client(self) -> AsyncOpenAI:
        """Lazy-load the SDK client."""
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self._api_key,
                base_url=self._base_url,
                timeout=self._timeout,
                max_retries=0,
                http_client=self._http_client,
            )
        return self._client

    @classmethod
    def create(
        cls,
        model_name: str | None = None,
        base_url: str | None = None,
    ) -> "OpenAIScoringOracle":
        """Factory method to create OpenAIScoringOracle with defaults.

        Args:
            model_name: Model name. If None, uses settings.
            base_url: API base URL. If None, uses settings.

        Returns:
            Configured OpenAIScoringOracle
        """
        return cls(model_name=model_name, base_url=base_url)

    @property
    def model_name(self) -> str:
        return self._model_name

    async def judge(self, system_prompt: str, user_prompt: str) -> str:
        """Request a compatibility judgment from the chat model.

        Args:
            system_prompt: Rubric and output instructions
            user_prompt: Pet, preference and interaction details

        Returns:
            The assistant's answer text

        Raises:
            OracleUnavailable: If the API call fails or no API key is configured
            OracleMalformedResponse: If the response has no answer text
        """
        try:
            response = await self.client.chat.completions.create(
                model=self._model_name,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=self._temperature,
                max_tokens=self._max_tokens,
                presence_penalty=0.1,
                frequency_penalty=0.1,
            )
        except openai.OpenAIError as e:
            raise OracleUnavailable(f"OpenAI API error: {e}") from e

        if not response.choices:
            raise OracleMalformedResponse("OpenAI returned no choices")
        content = response.choices[0].message.content
        if content is None:
            raise OracleMalformedResponse("OpenAI returned no answer text")
        return content

    async def is_available(self) -> bool:
        """Check if the chat API answers at all."""
        try:
            await self.judge("Reply with the number 1.", "1")
            return True
        except (OracleUnavailable, OracleMalformedResponse) as e:
            logger.warning(f"Scoring oracle unavailable: {e}")
            return False

    async def close(self) -> None:
        """Close the SDK client and its connection pool.

        Should be called when shutting down the application.
        """
        if self._client is not None:
            await self._client.close()
            self._client = None
        elif self._http_client is not None:
            await self._http_client.aclose()
