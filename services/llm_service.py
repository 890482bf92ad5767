"""LLM 调用封装"""

import asyncio
from typing import Any, AsyncIterator, Dict, List, Optional

import google.generativeai as genai

from common.config import LLMConfig, settings
from common.exceptions import LLMError, LLMTimeoutError
from common.logger import get_logger

logger = get_logger(__name__)


class LLMService:
    """LLM 服务封装（Gemini）"""

    def __init__(self, config: Optional[LLMConfig] = None, api_key: Optional[str] = None):
        self.config = config or settings.llm
        genai.configure(api_key=api_key or settings.google_api_key)
        self._models: Dict[str, genai.GenerativeModel] = {}

    def _get_model(
        self, model_name: str, system_instruction: Optional[str] = None
    ) -> genai.GenerativeModel:
        """获取或创建模型实例；带 system instruction 时每次新建"""
        if system_instruction:
            return genai.GenerativeModel(model_name, system_instruction=system_instruction)
        if model_name not in self._models:
            self._models[model_name] = genai.GenerativeModel(model_name)
        return self._models[model_name]

    def _generation_config(
        self, temperature: Optional[float], max_output_tokens: Optional[int]
    ) -> Any:
        return genai.types.GenerationConfig(
            temperature=self.config.temperature if temperature is None else temperature,
            max_output_tokens=max_output_tokens or self.config.max_output_tokens,
        )

    async def generate(
        self,
        prompt: str,
        model: Optional[str] = None,
        system_instruction: Optional[str] = None,
        history: Optional[List[Dict]] = None,
        temperature: Optional[float] = None,
        max_output_tokens: Optional[int] = None,
    ) -> str:
        """生成回复（非流式）"""
        model_name = model or self.config.default_model

        try:
            chat = self._get_model(model_name, system_instruction).start_chat(
                history=history or []
            )
            response = await asyncio.wait_for(
                chat.send_message_async(
                    prompt,
                    generation_config=self._generation_config(
                        temperature, max_output_tokens
                    ),
                ),
                timeout=self.config.timeout_seconds,
            )
            return response.text

        except asyncio.TimeoutError as e:
            logger.error("LLM generation timed out", extra={"model": model_name})
            raise LLMTimeoutError(
                "Generation timed out", detail=f"{self.config.timeout_seconds}s"
            ) from e
        except Exception as e:
            logger.error(f"LLM generation failed: {e}", extra={"model": model_name})
            raise LLMError("Generation failed", detail=str(e)) from e

    async def open_stream(
        self,
        prompt: str,
        model: Optional[str] = None,
        system_instruction: Optional[str] = None,
        history: Optional[List[Dict]] = None,
        temperature: Optional[float] = None,
        max_output_tokens: Optional[int] = None,
    ) -> AsyncIterator[str]:
        """
        发起流式请求，返回文本增量的异步迭代器。

        建立连接阶段的失败在这里直接抛出（此时还没有向客户端写任何字节），
        迭代阶段的失败在迭代时抛出 LLMError。
        """
        model_name = model or self.config.default_model

        try:
            chat = self._get_model(model_name, system_instruction).start_chat(
                history=history or []
            )
            response = await asyncio.wait_for(
                chat.send_message_async(
                    prompt,
                    generation_config=self._generation_config(
                        temperature, max_output_tokens
                    ),
                    stream=True,
                ),
                timeout=self.config.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            logger.error("LLM stream open timed out", extra={"model": model_name})
            raise LLMTimeoutError(
                "Stream timed out", detail=f"{self.config.timeout_seconds}s"
            ) from e
        except Exception as e:
            logger.error(f"LLM stream failed: {e}", extra={"model": model_name})
            raise LLMError("Stream generation failed", detail=str(e)) from e

        return self._iter_chunks(response, model_name)

    async def _iter_chunks(self, response: Any, model_name: str) -> AsyncIterator[str]:
        """逐块读取，每块都受超时限制"""
        chunks = response.__aiter__()
        while True:
            try:
                chunk = await asyncio.wait_for(
                    chunks.__anext__(), timeout=self.config.timeout_seconds
                )
            except StopAsyncIteration:
                return
            except asyncio.TimeoutError as e:
                logger.error("LLM stream stalled", extra={"model": model_name})
                raise LLMTimeoutError(
                    "Stream timed out", detail=f"{self.config.timeout_seconds}s"
                ) from e
            except Exception as e:
                logger.error(f"LLM stream broke: {e}", extra={"model": model_name})
                raise LLMError("Stream generation failed", detail=str(e)) from e

            try:
                text = chunk.text
            except ValueError:
                # 没有文本 part 的块（如安全过滤的结束块）
                continue
            if text:
                yield text

    async def extract(self, prompt: str, model: Optional[str] = None) -> str:
        """使用学习模型生成（低温度，短输出）"""
        return await self.generate(
            prompt,
            model=model or self.config.learning_model,
            temperature=self.config.learning_temperature,
            max_output_tokens=self.config.learning_max_tokens,
        )
