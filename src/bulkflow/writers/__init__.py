"""批量写入器模块.

对目标集合/索引执行一次批量写入，供 BufferedInserter 在刷新时调用：
- MongoBatchWriter: MongoDB 集合（insert_many）
- ElasticsearchBatchWriter: Elasticsearch 索引（streaming_bulk）

示例用法:
    >>> from bulkflow.writers import MongoBatchWriter
    >>> writer = MongoBatchWriter(collection)
    >>> result = writer.write(raw_docs, ordered=True, bypass_document_validation=False)
    >>> print(f"成功: {result.success}, 失败: {result.failed}")
"""

from .base import BatchWriter
from .es_writer import ElasticsearchBatchWriter
from .exceptions import BatchWriteError, BatchWriterError
from .models import BatchWriteResult, WriteErrorItem
from .mongo_writer import MongoBatchWriter

__all__ = [
    "BatchWriter",
    "MongoBatchWriter",
    "ElasticsearchBatchWriter",
    "BatchWriteResult",
    "WriteErrorItem",
    "BatchWriterError",
    "BatchWriteError",
]
