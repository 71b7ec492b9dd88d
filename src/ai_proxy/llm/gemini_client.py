"""
Gemini adapter ("candidates/parts" response family).

POST {base_url}/models/{model}:generateContent?key=<credential>

Request:
{
    "contents": [{"parts": [{"text": "..."}]}],
    "generationConfig": {"maxOutputTokens": 2048, "temperature": 0.7}
}

Response:
{
    "candidates": [{"content": {"parts": [{"text": "..."}]}}],
    "usageMetadata": {
        "promptTokenCount": 5,
        "candidatesTokenCount": 12,
        "totalTokenCount": 17
    }
}
"""

from typing import Any, Dict, Optional

from ai_proxy.llm.base_client import BaseProviderAdapter, WireRequest
from ai_proxy.llm.text_utils import TokenUsage, dig, normalize_usage
from ai_proxy.models.enums import ProviderIdentity


class GeminiClient(BaseProviderAdapter):
    """Google Gemini generateContent adapter; the API key travels in the query string."""

    provider = ProviderIdentity.GEMINI
    default_model = "gemini-2.5-flash-lite"

    def __init__(
        self,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        **kwargs
    ):
        super().__init__(base_url, **kwargs)

    def build_request(self, prompt: str, model: str, credential: str) -> WireRequest:
        return {
            "url": f"{self.base_url}/models/{model}:generateContent",
            "params": {"key": credential},
            "headers": {"Content-Type": "application/json"},
            "json": {
                "contents": [{"parts": [{"text": prompt}]}],
                "generationConfig": {
                    "maxOutputTokens": self.max_tokens,
                    "temperature": self.temperature,
                },
            },
        }

    def extract_text(self, data: Dict[str, Any]) -> Optional[str]:
        text = dig(data, ["candidates", 0, "content", "parts", 0, "text"])
        return text if isinstance(text, str) else None

    def extract_usage(self, prompt: str, text: str, data: Dict[str, Any]) -> TokenUsage:
        usage = data.get("usageMetadata") or {}
        if not isinstance(usage, dict):
            usage = {}
        return normalize_usage(
            prompt,
            text,
            prompt_tokens=usage.get("promptTokenCount"),
            completion_tokens=usage.get("candidatesTokenCount"),
            total_tokens=usage.get("totalTokenCount"),
        )
