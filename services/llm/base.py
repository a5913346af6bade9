from abc import ABC, abstractmethod


class LLMError(Exception):
    """외부 텍스트 생성 호출 실패 (네트워크/HTTP/응답 구조 오류 등)"""
    pass


class LLMClient(ABC):
    @abstractmethod
    async def generate(self, prompt: str, **kwargs) -> str:
        """프롬프트를 보내고 모델이 만든 원문 텍스트를 반환 (실패 시 LLMError)"""
        ...
