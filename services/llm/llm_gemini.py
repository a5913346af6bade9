import json
import logging
from typing import Optional

import httpx

from config.settings import settings
from services.llm.base import LLMClient, LLMError

logger = logging.getLogger(__name__)

GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"


class GeminiClient(LLMClient):
    """Gemini REST(generateContent)를 httpx로 직접 호출"""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None,
                 timeout: Optional[float] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_key = settings.GEMINI_API_KEY if api_key is None else api_key
        self.model = model or settings.GEMINI_MODEL
        self.timeout = float(timeout or settings.LLM_TIMEOUT)
        self._transport = transport  # 테스트에서 MockTransport 주입

    @property
    def url(self) -> str:
        return GEMINI_URL.format(model=self.model)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=httpx.Timeout(self.timeout, connect=10.0), transport=self._transport)

    async def generate(self, prompt: str, temperature: float | None = None,
                       max_tokens: int | None = None) -> str:
        if not self.api_key:
            raise LLMError("GEMINI_API_KEY is not configured")

        t = settings.LLM_TEMPERATURE if temperature is None else float(temperature)
        mx = settings.LLM_MAX_TOKENS if max_tokens is None else int(max_tokens)
        body = {
            "generationConfig": {"temperature": t, "maxOutputTokens": mx},
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        }

        try:
            async with self._client() as client:
                r = await client.post(self.url, params={"key": self.api_key}, json=body)
                r.raise_for_status()
                data = r.json()
        except (httpx.HTTPError, ValueError) as e:
            raise LLMError(f"Gemini request failed: {e}") from e

        # ✅ 응답 전체 로그 (디버그용)
        logger.debug("===== GEMINI RAW RESPONSE =====")
        logger.debug(json.dumps(data, ensure_ascii=False, indent=2))

        return self._extract_text(data)

    @staticmethod
    def _extract_text(data: dict) -> str:
        """candidates[0].content.parts[*].text 이어붙이기"""
        try:
            parts = data["candidates"][0]["content"]["parts"]
            text = "".join(p.get("text", "") for p in parts)
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            raise LLMError(f"Unexpected Gemini response shape: {e}") from e
        if not text.strip():
            raise LLMError("Gemini returned an empty response")
        return text
