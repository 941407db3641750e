"""Scoring oracle protocol.

Defines the interface for the external judge that rates adopter/pet
compatibility. The engine treats it as opaque: it sends a system prompt and a
user prompt and expects a numeric string back.

Implementations can include:
- OpenAI-compatible chat completion APIs
- Ollama (local models)
- Any provider returning a numeric string
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class ScoringOracle(Protocol):
    """Protocol for scoring oracle services.

    Implementations raise OracleUnavailable on transport failure and
    OracleMalformedResponse when the response body has no answer text.
    Interpreting the answer as a score is the caller's job.
    """

    @property
    def model_name(self) -> str:
        """Return the name/identifier of the judging model."""
        ...

    async def judge(self, system_prompt: str, user_prompt: str) -> str:
        """Request a compatibility judgment.

        Args:
            system_prompt: Fixed rubric and output instructions
            user_prompt: Pet, preference and interaction details

        Returns:
            The raw answer text
        """
        ...

    async def is_available(self) -> bool:
        """Check if the oracle can be reached."""
        ...

    async def close(self) -> None:
        """Release network resources."""
        ...
