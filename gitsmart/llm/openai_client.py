"""
OpenAI-compatible chat client, used for OpenAI itself and for LM Studio.
"""

import json
from typing import Optional

import requests

from .base import LLMClient, LLMError
from ..cli_display import token_tracker, log


class OpenAIClient(LLMClient):

    def __init__(self, base_url: str, model: str, api_key: str = "", **kwargs):
        super().__init__(**kwargs)
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.api_key = api_key

    def _post(self, prompt: str, system_prompt: Optional[str], stream: bool,
              timeout) -> requests.Response:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        response = requests.post(
            f"{self.base_url}/chat/completions",
            headers=headers,
            json={"model": self.model, "messages": messages, "stream": stream},
            stream=stream,
            timeout=timeout,
        )
        if response.status_code == 401:
            # retrying will not fix a bad key
            raise LLMError("Invalid API key. Please check your settings.")
        response.raise_for_status()
        return response

    def _generate(self, prompt: str, system_prompt: Optional[str]) -> str:
        data = self._post(prompt, system_prompt, stream=False, timeout=(10, 120)).json()

        usage = data.get("usage") or {}
        token_tracker.record(usage.get("prompt_tokens") or 0,
                             usage.get("completion_tokens") or 0)

        message = data["choices"][0]["message"]["content"] or ""
        log.debug(f"[OpenAI] {self.model} replied:\n{message}")
        return message

    def _generate_stream(self, prompt: str, system_prompt: Optional[str]) -> str:
        response = self._post(prompt, system_prompt, stream=True, timeout=(10, 120))

        parts: list[str] = []
        for line in response.iter_lines(decode_unicode=True):
            # server-sent events: "data: {json}" ... "data: [DONE]"
            if not line or not line.startswith("data: "):
                continue
            payload = line[len("data: "):].strip()
            if payload == "[DONE]":
                break
            try:
                delta = json.loads(payload)["choices"][0].get("delta", {})
            except (json.JSONDecodeError, KeyError, IndexError):
                continue
            if delta.get("content"):
                parts.append(delta["content"])

        message = "".join(parts)
        token_tracker.record(0, len(parts))
        log.debug(f"[OpenAI] {self.model} streamed {len(parts)} chunk(s):\n{message}")
        return message
