import random
import time
from abc import ABC, abstractmethod
from typing import Optional

from ..cli_display import log


class LLMError(Exception):
    """Raised when a commit message cannot be generated."""


class LLMClient(ABC):
    """One chat-style model endpoint.

    Subclasses implement a single request in ``_generate`` and, when the
    provider supports it, ``_generate_stream``.
    """

    def __init__(self, max_retries: int = 3, retry_delay: float = 2.0,
                 stream: bool = False):
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.stream = stream

    def generate_response(self, prompt: str,
                          system_prompt: Optional[str] = None) -> str:
        """Return the model's reply to *prompt*.

        Transient failures and empty replies are retried with jittered
        exponential backoff. A failed stream is retried without streaming.
        :class:`LLMError` from a subclass (e.g. a rejected API key) is
        raised at once.
        """
        last_error: Exception | None = None
        use_stream = self.stream

        for attempt in range(1, self.max_retries + 1):
            try:
                if use_stream:
                    result = self._generate_stream(prompt, system_prompt)
                else:
                    result = self._generate(prompt, system_prompt)
            except LLMError:
                raise
            except Exception as e:
                last_error = e
                log.warning(f"[LLM] Attempt {attempt}/{self.max_retries} failed: {e}")
                if use_stream:
                    log.warning("[LLM] Retrying without streaming")
                    use_stream = False
                if attempt < self.max_retries:
                    self._sleep(attempt, rate_limited="429" in str(e))
                continue

            if result and result.strip():
                return result

            log.warning(f"[LLM] Empty reply on attempt {attempt}/{self.max_retries}")
            last_error = None
            if attempt < self.max_retries:
                self._sleep(attempt)

        if last_error is None:
            raise LLMError("LLM returned empty response after all retries")
        raise LLMError(f"LLM failed after {self.max_retries} retries: {last_error}")

    def _sleep(self, attempt: int, rate_limited: bool = False) -> None:
        wait = self.retry_delay * (2 ** (attempt - 1))
        wait += wait * 0.1 * random.random()
        if rate_limited:
            wait *= 2
            log.info(f"[LLM] Rate limited (429), backing off {wait:.1f}s")
        time.sleep(wait)

    @abstractmethod
    def _generate(self, prompt: str, system_prompt: Optional[str]) -> str:
        """Send one request and return the full reply."""

    @abstractmethod
    def _generate_stream(self, prompt: str, system_prompt: Optional[str]) -> str:
        """Send one streaming request and return the joined reply."""
