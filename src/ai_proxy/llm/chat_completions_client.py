"""
OpenAI-compatible chat completions adapters ("choices/message" response family).

Groq and Cerebras expose the same wire contract and differ only in base URL
and default model.

POST {base_url}/chat/completions
Authorization: Bearer <credential>

Request:
{
    "model": "llama-3.3-70b-versatile",
    "messages": [{"role": "user", "content": "..."}],
    "max_tokens": 2048,
    "temperature": 0.7
}

Response:
{
    "choices": [{"message": {"role": "assistant", "content": "..."}}],
    "usage": {"prompt_tokens": 5, "completion_tokens": 12, "total_tokens": 17}
}
"""

from typing import Any, Dict, Optional

from ai_proxy.llm.base_client import BaseProviderAdapter, WireRequest
from ai_proxy.llm.text_utils import TokenUsage, dig, normalize_usage
from ai_proxy.models.enums import ProviderIdentity


class ChatCompletionsClient(BaseProviderAdapter):
    """Shared implementation of the chat completions wire contract."""

    def build_request(self, prompt: str, model: str, credential: str) -> WireRequest:
        return {
            "url": f"{self.base_url}/chat/completions",
            "headers": {
                "Content-Type": "application/json",
                "Authorization": f"Bearer {credential}",
            },
            "json": {
                "model": model,
                "messages": [{"role": "user", "content": prompt}],
                "max_tokens": self.max_tokens,
                "temperature": self.temperature,
            },
        }

    def extract_text(self, data: Dict[str, Any]) -> Optional[str]:
        text = dig(data, ["choices", 0, "message", "content"])
        return text if isinstance(text, str) else None

    def extract_usage(self, prompt: str, text: str, data: Dict[str, Any]) -> TokenUsage:
        usage = data.get("usage") or {}
        if not isinstance(usage, dict):
            usage = {}
        return normalize_usage(
            prompt,
            text,
            prompt_tokens=usage.get("prompt_tokens"),
            completion_tokens=usage.get("completion_tokens"),
            total_tokens=usage.get("total_tokens"),
        )


class GroqClient(ChatCompletionsClient):
    provider = ProviderIdentity.GROQ
    default_model = "llama-3.3-70b-versatile"

    def __init__(self, base_url: str = "https://api.groq.com/openai/v1", **kwargs):
        super().__init__(base_url, **kwargs)


class CerebrasClient(ChatCompletionsClient):
    provider = ProviderIdentity.CEREBRAS
    default_model = "llama3.1-8b"

    def __init__(self, base_url: str = "https://api.cerebras.ai/v1", **kwargs):
        super().__init__(base_url, **kwargs)
