"""批量写入器协议定义模块."""

from typing import Protocol

from ..encoders import DocumentEncoder
from ..typing import EncodedDocument
from .models import BatchWriteResult


class BatchWriter(Protocol):
    """批量写入器协议.

    对目标集合/索引执行一次批量写入。实现需满足：

    - 全部成功：返回 failed == 0 的结果
    - 部分成功：返回带逐文档错误的结果；无序模式尝试全部文档，
      有序模式在第一个失败处停止，其余文档计入 skipped
    - 整体失败（如连接中断）：抛出 BatchWriteError，result 中没有确认写入的文档

    写入器不做任何重试，超时由底层客户端决定。

    Attributes:
        encoder: 与目标存储格式匹配的默认文档编码器
    """

    encoder: DocumentEncoder

    @property
    def name(self) -> str:
        """目标集合/索引名称，用于日志."""
        ...

    def write(
        self,
        documents: list[EncodedDocument],
        ordered: bool,
        bypass_document_validation: bool,
    ) -> BatchWriteResult:
        """执行一次批量写入."""
        ...
