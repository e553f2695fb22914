import json
from typing import Optional

import requests

from .base import LLMClient
from ..cli_display import token_tracker, log


class OllamaClient(LLMClient):
    """Client for Ollama's ``/api/generate`` endpoint."""

    def __init__(self, base_url: str, model: str, **kwargs):
        super().__init__(**kwargs)
        self.base_url = base_url
        self.model = model

    def _post(self, prompt: str, system_prompt: Optional[str],
              stream: bool) -> requests.Response:
        payload = {"model": self.model, "prompt": prompt, "stream": stream}
        if system_prompt:
            payload["system"] = system_prompt
        response = requests.post(self.base_url, json=payload, stream=stream,
                                 timeout=(10, 120))
        response.raise_for_status()
        return response

    @staticmethod
    def _record_usage(data: dict) -> None:
        # counts arrive only on the final object
        token_tracker.record(data.get("prompt_eval_count") or 0,
                             data.get("eval_count") or 0)

    def _generate(self, prompt: str, system_prompt: Optional[str]) -> str:
        data = self._post(prompt, system_prompt, stream=False).json()
        self._record_usage(data)
        message = data.get("response", "")
        log.debug(f"[Ollama] {self.model} replied:\n{message}")
        return message

    def _generate_stream(self, prompt: str, system_prompt: Optional[str]) -> str:
        response = self._post(prompt, system_prompt, stream=True)

        parts: list[str] = []
        for line in response.iter_lines(decode_unicode=True):
            if not line:
                continue
            try:
                chunk = json.loads(line)
            except json.JSONDecodeError:
                continue
            if chunk.get("response"):
                parts.append(chunk["response"])
            if chunk.get("done"):
                self._record_usage(chunk)
                break

        message = "".join(parts)
        log.debug(f"[Ollama] {self.model} streamed:\n{message}")
        return message
