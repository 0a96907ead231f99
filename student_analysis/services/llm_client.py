"""
Groq API Client

Groq exposes an OpenAI-compatible API, so we use the openai library.

RULES:
- Low temperature for structuring calls, slightly higher for open analysis
- max_retries=0: the fallback ladder decides what happens after a failure
- Every SDK failure surfaces as TransportError
"""
import logging
from dataclasses import dataclass

from openai import AsyncOpenAI, APIError, OpenAIError

from student_analysis.core.config import Settings, get_settings
from student_analysis.core.errors import TransportError

logger = logging.getLogger(__name__)


@dataclass
class AnalysisRequest:
    """One prompt payload. Built per call, discarded after send."""
    system_prompt: str
    user_content: str
    temperature: float = 0.0
    max_tokens: int = 1000


class GroqClient:
    """
    Wrapper for the Groq chat completions API.
    """

    def __init__(self, settings: Settings):
        self.client = AsyncOpenAI(
            api_key=settings.groq_api_key,
            base_url=settings.groq_base_url,
            timeout=settings.analysis_timeout_seconds,
            max_retries=0
        )
        self.model = settings.groq_model

    async def complete(self, request: AnalysisRequest) -> str:
        """
        Send one completion request.
        Returns raw text response ("" when the model sent nothing).
        """
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": request.system_prompt},
                    {"role": "user", "content": request.user_content}
                ],
                max_tokens=request.max_tokens,
                temperature=request.temperature
            )
        except APIError as e:
            raise TransportError(f"Groq request failed: {e}", getattr(e, "status_code", None))
        except OpenAIError as e:
            raise TransportError(f"Groq client error: {e}")

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    async def test_connection(self) -> bool:
        """Test if the Groq API is reachable"""
        try:
            reply = await self.complete(AnalysisRequest(
                "You are a test assistant.",
                "Reply with exactly: OK",
                max_tokens=10
            ))
            return "OK" in reply.upper()
        except TransportError as e:
            logger.warning("Groq connection failed: %s", e)
            return False


# Singleton instance
_groq_client: GroqClient = None


def get_llm_client() -> GroqClient:
    """Get or create Groq client (singleton pattern)"""
    global _groq_client
    if _groq_client is None:
        _groq_client = GroqClient(get_settings())
    return _groq_client
