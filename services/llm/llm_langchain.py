import logging
from typing import Optional

from langchain_google_genai import ChatGoogleGenerativeAI

from config.settings import settings
from services.llm.base import LLMClient, LLMError

logger = logging.getLogger(__name__)


class LangChainGeminiClient(LLMClient):
    """LangChain ChatGoogleGenerativeAI 기반 호출"""

    def __init__(self, model: Optional[ChatGoogleGenerativeAI] = None):
        self._model = model

    def _get_model(self) -> ChatGoogleGenerativeAI:
        # 첫 호출 시점에 생성 (API 키 누락이면 여기서 실패)
        if self._model is None:
            if not settings.GEMINI_API_KEY:
                raise LLMError("GEMINI_API_KEY is not configured")
            self._model = ChatGoogleGenerativeAI(
                model=settings.GEMINI_MODEL,
                google_api_key=settings.GEMINI_API_KEY,
                temperature=settings.LLM_TEMPERATURE,
                max_output_tokens=settings.LLM_MAX_TOKENS,
                timeout=settings.LLM_TIMEOUT,
            )
        return self._model

    async def generate(self, prompt: str, **kwargs) -> str:
        model = self._get_model()
        try:
            response = await model.ainvoke(prompt)
        except Exception as e:
            raise LLMError(f"LangChain Gemini call failed: {e}") from e

        content = getattr(response, "content", "") or ""
        if isinstance(content, list):
            # 멀티파트 응답 → 텍스트만
            content = "".join(c if isinstance(c, str) else c.get("text", "") for c in content)
        logger.debug(f"LangChain Gemini response: {content}")
        return content
