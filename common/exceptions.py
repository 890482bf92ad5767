"""自定义异常类"""


class RubiBaseError(Exception):
    """Rubi 基础异常"""

    def __init__(self, message: str = "", detail: str = ""):
        self.message = message
        self.detail = detail
        super().__init__(message)


class InputValidationError(RubiBaseError):
    """请求参数不合法（未产生任何副作用）"""
    pass


class NotFoundError(RubiBaseError):
    """资源不存在"""
    pass


class ConversationNotFoundError(NotFoundError):
    """对话不存在或不属于当前用户（两者不可区分）"""
    pass


class LLMError(RubiBaseError):
    """LLM 调用失败"""
    pass


class LLMTimeoutError(LLMError):
    """LLM 调用超时"""
    pass


class PersistenceError(RubiBaseError):
    """存储写入失败"""
    pass


class ConfigError(RubiBaseError):
    """配置错误"""
    pass
