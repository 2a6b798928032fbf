"""批量写入器异常定义模块."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..exceptions import BulkFlowError

if TYPE_CHECKING:
    from .models import BatchWriteResult


class BatchWriterError(BulkFlowError):
    """批量写入器基础异常类."""

    pass


class BatchWriteError(BatchWriterError):
    """批量写入异常.

    批次中一个或多个文档写入失败时抛出。写入器在整体失败（如连接中断）时抛出，
    BufferedInserter 在配置了 raise_on_error 且结果含失败时也会抛出。

    注意：抛出该异常时缓冲区已经清空，失败的文档只能从 result 中获取错误信息，
    无法再从 BufferedInserter 中找回。

    Attributes:
        result: 批量写入结果，包含逐文档的错误详情
    """

    def __init__(self, message: str, result: BatchWriteResult | None = None) -> None:
        super().__init__(message)
        self.result = result
