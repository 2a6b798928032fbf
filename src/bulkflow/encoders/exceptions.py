"""文档编码器异常定义模块."""

from typing import Any

from ..exceptions import BulkFlowError


class EncoderError(BulkFlowError):
    """编码器基础异常类."""

    pass


class EncodingError(EncoderError):
    """文档编码异常.

    当文档无法序列化（包含不支持的值、超出大小限制等）时抛出。
    该异常在任何写入之前抛出，缓冲区不受影响。

    Attributes:
        document: 编码失败的原始文档
    """

    def __init__(self, message: str, document: Any = None) -> None:
        super().__init__(message)
        self.document = document
