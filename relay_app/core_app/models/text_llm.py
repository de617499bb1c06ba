from typing import Optional

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage
from langchain_openai import ChatOpenAI

from relay_app.core_app.exceptions import CompletionError
from relay_app.core_app.tools.setup_logger import setup_logger

logger = setup_logger(__name__.upper())

FALLBACK_REPLY = "No response from AI"


class CompletionClient:
    """Single-turn, non-streaming completion over a LangChain chat model."""

    def __init__(self, model: BaseChatModel):
        self.model = model

    @classmethod
    def from_credentials(cls, api_key: Optional[str], model_name: str = "gpt-4") -> "CompletionClient":
        if not api_key:
            raise ValueError("OPEN_AI_KEY environment variable is not set")

        return cls(ChatOpenAI(model=model_name, api_key=api_key, max_retries=0))

    async def complete(self, prompt: str) -> str:
        try:
            result = await self.model.ainvoke([HumanMessage(content=prompt)])
        except Exception as e:
            logger.error(f"[LLM] Model invocation failed: {e}")
            raise CompletionError("model invocation failed") from e

        content = result.content
        if isinstance(content, list):
            content = "".join(
                part.get("text", "") if isinstance(part, dict) else str(part) for part in content
            )
        if not content:
            logger.warning("[LLM] Empty content in model response, using fallback reply")
            return FALLBACK_REPLY
        return content
