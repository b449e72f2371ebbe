# tripplanner/llm/client.py
import logging
import math
import time
from typing import Any, Callable, Optional

import httpx
from langchain_core.caches import InMemoryCache
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage
from langchain_mistralai import ChatMistralAI

from tripplanner.config import ConfigurationError, ModelConfig

logger = logging.getLogger(__name__)


class UpstreamError(RuntimeError):
    """The model provider failed (network, non-2xx, timeout) and retries are spent."""

    def __init__(self, message: str, attempts: int = 1):
        super().__init__(message)
        self.attempts = attempts


def build_chat_model(config: ModelConfig) -> BaseChatModel:
    # single transport attempt; ModelClient owns the retry policy
    return ChatMistralAI(
        model=config.model_name,
        api_key=config.api_key,
        temperature=config.temperature,
        timeout=max(1, math.ceil(config.timeout_ms / 1000)),
        max_retries=1,
        cache=InMemoryCache(maxsize=config.cache_size) if config.cache_responses else False,
    )


def _is_transient(exc: Exception) -> bool:
    if isinstance(exc, httpx.HTTPStatusError):
        code = exc.response.status_code
        return code == 429 or code >= 500
    return isinstance(exc, (httpx.TransportError, TimeoutError, ConnectionError))


def _content_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    parts = []
    for part in content or []:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type", "text") == "text":
            parts.append(part.get("text") or "")
    return "".join(parts)


class ModelClient:
    """Uniform invoke(prompt) -> text over a LangChain chat model."""

    def __init__(
        self,
        chat_model: BaseChatModel,
        max_retries: int = 3,
        backoff: float = 0.5,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        self.chat_model = chat_model
        self.max_retries = max_retries
        self.backoff = backoff
        self._sleep = sleep

    @classmethod
    def from_config(cls, config: ModelConfig, chat_model: Optional[BaseChatModel] = None) -> "ModelClient":
        if not (config.api_key or "").strip():
            raise ConfigurationError("MISTRAL_API_KEY not set. Please configure it in environment or .env")
        return cls(
            chat_model or build_chat_model(config),
            max_retries=config.max_retries,
            backoff=config.retry_backoff,
        )

    def invoke(self, prompt: str) -> str:
        delay = self.backoff
        last_exc: Optional[Exception] = None

        for attempt in range(1, self.max_retries + 1):
            try:
                resp = self.chat_model.invoke([HumanMessage(content=prompt)])
            except httpx.HTTPStatusError as e:
                if not _is_transient(e):
                    logger.error("Model request rejected (%s): %s", e.response.status_code, e)
                    raise UpstreamError(str(e), attempts=attempt) from e
                last_exc = e
            except Exception as e:
                if not _is_transient(e):
                    raise
                last_exc = e
            else:
                return _content_text(resp.content)

            logger.warning("Model request failed (attempt %s/%s): %s", attempt, self.max_retries, last_exc)
            if attempt < self.max_retries:
                self._sleep(delay)
                delay *= 2

        logger.error("Model request failed after %s attempts", self.max_retries)
        raise UpstreamError(
            f"Model request failed after {self.max_retries} attempts: {last_exc}",
            attempts=self.max_retries,
        ) from last_exc
