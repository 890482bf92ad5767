"""文本处理工具"""

import re

# 标题中只保留字母、数字和空白
_TITLE_STRIP = re.compile(r"[^\w\s]|_")
_WHITESPACE = re.compile(r"\s+")


def derive_title(text: str, max_length: int = 50) -> str:
    """
    从回复开头截取对话标题。

    先截断到 max_length，再去掉非字母数字字符并压缩空白；
    结果为空时返回空字符串，由调用方决定是否保留原标题。
    """
    head = text[:max_length]
    head = _TITLE_STRIP.sub("", head)
    return _WHITESPACE.sub(" ", head).strip()
