"""回复生成服务"""

from typing import AsyncIterator, Dict, List, Optional, Sequence, Tuple

from common.exceptions import InputValidationError
from common.logger import get_logger
from services.llm_service import LLMService
from storage.models.message import Message

logger = get_logger(__name__)


def build_contents(messages: Sequence[Message]) -> List[Dict]:
    """
    对话历史 → Gemini contents。

    assistant 映射为 model；相邻同角色消息合并为一条
    （例如上一轮流式失败只留下了用户消息）。
    """
    contents: List[Dict] = []
    for msg in messages:
        role = "model" if msg.role == "assistant" else "user"
        if contents and contents[-1]["role"] == role:
            contents[-1]["parts"].append(msg.content)
        else:
            contents.append({"role": role, "parts": [msg.content]})
    return contents


class GenerationService:
    """回复生成服务"""

    def __init__(self, llm_service: LLMService):
        self._llm = llm_service

    def build_request(self, messages: Sequence[Message]) -> Tuple[List[Dict], str]:
        """
        拆出本轮 prompt 和之前的 history

        返回: (history, prompt)
        """
        contents = build_contents(messages)
        if not contents or contents[-1]["role"] != "user":
            raise InputValidationError("Conversation must end with a user message")
        last = contents.pop()
        return contents, "\n\n".join(last["parts"])

    async def open_stream(
        self,
        system_prompt: str,
        messages: Sequence[Message],
        model: Optional[str] = None,
    ) -> AsyncIterator[str]:
        """带完整历史发起流式生成"""
        history, prompt = self.build_request(messages)
        logger.debug(f"Opening stream with {len(history)} history turns")
        return await self._llm.open_stream(
            prompt=prompt,
            model=model,
            system_instruction=system_prompt,
            history=history,
        )
