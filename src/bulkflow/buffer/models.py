"""缓冲插入器数据模型定义模块."""

from dataclasses import dataclass

from .exceptions import InserterConfigError


@dataclass
class InserterConfig:
    """缓冲插入器配置模型.

    Attributes:
        limit: 触发自动刷新的文档数阈值，默认 1000，必须 >= 1
        ordered: 是否有序写入（遇到第一个错误即停止），默认 True
        bypass_document_validation: 是否跳过服务端文档校验，默认 False
        max_batch_bytes: 触发自动刷新的编码字节数阈值，None 表示不限制
        raise_on_error: 刷新结果含失败时是否抛出 BatchWriteError，默认 False

    Raises:
        InserterConfigError: 当参数不合法时抛出

    Examples:
        >>> config = InserterConfig(limit=500, ordered=False)
    """

    limit: int = 1000
    ordered: bool = True
    bypass_document_validation: bool = False
    max_batch_bytes: int | None = None
    raise_on_error: bool = False

    def __post_init__(self) -> None:
        """校验配置参数合法性."""
        if self.limit < 1:
            raise InserterConfigError(f"limit 必须 >= 1，当前值: {self.limit}")
        if self.max_batch_bytes is not None and self.max_batch_bytes < 1:
            raise InserterConfigError(
                f"max_batch_bytes 必须 >= 1，当前值: {self.max_batch_bytes}"
            )
