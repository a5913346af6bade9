from config.settings import settings
from services.llm.base import LLMClient


def get_llm_client() -> LLMClient:
    """설정(LLM_PROVIDER)에 따라 LLM 클라이언트 선택"""
    if settings.LLM_PROVIDER == "langchain":
        from services.llm.llm_langchain import LangChainGeminiClient
        return LangChainGeminiClient()

    from services.llm.llm_gemini import GeminiClient
    return GeminiClient()
