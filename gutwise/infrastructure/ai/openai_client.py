"""
OpenAI API client for dish analysis.

Async chat client with JSON output mode and per-minute rate limiting.
"""

from __future__ import annotations

import asyncio
import json
import os
import time
from typing import Any, Dict, List, Optional, TYPE_CHECKING

import structlog
from openai import AsyncOpenAI

from gutwise.domain.shared.errors import RemoteAnalysisError

if TYPE_CHECKING:
    from openai.types.chat import ChatCompletion

logger = structlog.get_logger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"


class OpenAIClient:
    """
    Async OpenAI chat client.

    Features:
    - JSON output mode
    - Rate limiting (60 RPM default)
    - Context manager for resource cleanup
    - Injectable AsyncOpenAI for testing

    Retries are left to the caller; the batch analyzer falls back to the
    local scorer instead of retrying.

    Example:
        >>> async with OpenAIClient() as client:
        ...     data = await client.complete_json(
        ...         [
        ...             {"role": "system", "content": "Return JSON"},
        ...             {"role": "user", "content": "Rate this dish"},
        ...         ]
        ...     )
        ...     print(data["safetyScore"])
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        timeout: float = 30.0,
        rpm_limit: int = 60,
        client: Optional[AsyncOpenAI] = None,
    ):
        """
        Initialize OpenAI client.

        Args:
            api_key: OpenAI API key (reads OPENAI_API_KEY if None)
            model: Chat model name
            timeout: Request timeout in seconds
            rpm_limit: Requests per minute limit
            client: Optional pre-configured AsyncOpenAI client (for testing)

        Raises:
            ValueError: If API key not found and client not provided
        """
        if client is not None:
            self._client: Optional[AsyncOpenAI] = client
            self.api_key: str = api_key or "test-key"
        else:
            resolved_key = api_key or os.getenv("OPENAI_API_KEY")
            if not resolved_key:
                raise ValueError(
                    "OPENAI_API_KEY not found in environment. "
                    "Set it in .env file or pass as parameter."
                )
            self.api_key = resolved_key
            self._client = None

        self.model = model
        self.timeout = timeout
        self.rpm_limit = rpm_limit

        self._request_times: List[float] = []
        self._lock = asyncio.Lock()

    async def __aenter__(self) -> OpenAIClient:
        """Async context manager entry."""
        await self.open()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()

    async def open(self) -> None:
        """Create the SDK client if none was injected."""
        if self._client is None:
            # SDK retries disabled: a failed dish falls back locally
            self._client = AsyncOpenAI(
                api_key=self.api_key,
                timeout=self.timeout,
                max_retries=0,
            )

    async def close(self) -> None:
        if self._client:
            await self._client.close()

    async def _rate_limit(self) -> None:
        """
        Enforce rate limiting.

        Keeps request timestamps of the last minute and sleeps until the
        oldest one expires when the limit is reached.
        """
        async with self._lock:
            now = time.time()
            cutoff = now - 60.0
            self._request_times = [t for t in self._request_times if t > cutoff]

            if len(self._request_times) >= self.rpm_limit:
                wait_time = 60.0 - (now - self._request_times[0])
                if wait_time > 0:
                    logger.info("OpenAI rate limit reached, waiting", wait_s=round(wait_time, 2))
                    await asyncio.sleep(wait_time)
                    now = time.time()
                    cutoff = now - 60.0
                    self._request_times = [t for t in self._request_times if t > cutoff]

            self._request_times.append(now)

    async def complete(
        self,
        messages: List[Dict[str, Any]],
        response_format: Optional[Dict[str, str]] = None,
        temperature: float = 0.3,
        max_tokens: int = 800,
    ) -> Dict[str, Any]:
        """
        Send a chat completion request.

        Args:
            messages: Chat messages (system, user, assistant)
            response_format: {"type": "json_object"} for JSON mode
            temperature: Sampling temperature (0.0-2.0)
            max_tokens: Max tokens in response

        Returns:
            Dict with:
            - content: Response text
            - usage: Token usage stats
            - finish_reason: Completion reason

        Raises:
            RuntimeError: If used outside the async context
            openai.OpenAIError: On API failure
        """
        if not self._client:
            raise RuntimeError("Client not initialized. Use async with.")

        await self._rate_limit()

        params: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if response_format:
            params["response_format"] = response_format

        completion: ChatCompletion = await self._client.chat.completions.create(**params)

        choice = completion.choices[0]
        usage = completion.usage
        return {
            "content": choice.message.content or "",
            "finish_reason": choice.finish_reason,
            "usage": {
                "prompt_tokens": usage.prompt_tokens if usage else 0,
                "completion_tokens": usage.completion_tokens if usage else 0,
                "total_tokens": usage.total_tokens if usage else 0,
            },
        }

    async def complete_json(
        self,
        messages: List[Dict[str, Any]],
        max_tokens: int = 800,
    ) -> Dict[str, Any]:
        """
        Chat completion in JSON mode, parsed.

        Returns:
            Parsed JSON object

        Raises:
            RemoteAnalysisError: If the response is not a JSON object

        Example:
            >>> data = await client.complete_json(messages)
            >>> score = data.get("safetyScore")
        """
        response = await self.complete(
            messages=messages,
            response_format={"type": "json_object"},
            max_tokens=max_tokens,
        )

        try:
            data = json.loads(response["content"])
        except json.JSONDecodeError as e:
            raise RemoteAnalysisError(
                f"Invalid JSON response: {response['content'][:200]}"
            ) from e

        if not isinstance(data, dict):
            raise RemoteAnalysisError(
                f"Expected a JSON object, got {type(data).__name__}"
            )
        return data

    def get_stats(self) -> Dict[str, Any]:
        """
        Get client statistics.

        Returns:
            Dict with model, rpm_limit and requests_last_minute
        """
        cutoff = time.time() - 60.0
        recent = [t for t in self._request_times if t > cutoff]
        return {
            "model": self.model,
            "rpm_limit": self.rpm_limit,
            "requests_last_minute": len(recent),
        }
