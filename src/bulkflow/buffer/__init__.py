"""缓冲插入器模块.

该模块提供批量插入的写缓冲功能，包括：
- 逐条缓冲已编码文档
- 达到文档数或字节数阈值时自动批量写入
- 显式刷新剩余文档
- 有序/无序写入与跳过文档校验配置

注意：对象销毁时不会自动刷新，处理结束时必须显式调用 flush。

示例用法:
    >>> from bulkflow.buffer import BufferedInserter
    >>> inserter = BufferedInserter.for_collection(collection, limit=1000)
    >>> for doc in documents:
    ...     inserter.insert(doc)
    >>> result = inserter.flush()
    >>> print(f"成功: {inserter.totals.success}, 失败: {inserter.totals.failed}")
"""

from .exceptions import InserterConfigError, InserterError
from .models import InserterConfig
from .tool import BufferedInserter

__all__ = [
    "BufferedInserter",
    "InserterConfig",
    "InserterError",
    "InserterConfigError",
]
