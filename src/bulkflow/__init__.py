"""bulkflow - Buffered Bulk Insert Toolkit for Document Databases.

这是一个用于向文档型数据库批量插入文档的写缓冲库。

主要功能:
    - BufferedInserter: 缓冲文档，达到阈值时自动批量写入
    - MongoBatchWriter / ElasticsearchBatchWriter: 批量写入器
    - BsonEncoder / JsonEncoder: 文档编码器

使用示例:
    from bulkflow import BufferedInserter

    inserter = BufferedInserter.for_collection(collection, limit=1000)
    for doc in documents:
        inserter.insert(doc)
    inserter.flush()
"""

__version__ = "0.1.0"

# 导出缓冲插入器
from bulkflow.buffer import BufferedInserter, InserterConfig

# 导出编码器
from bulkflow.encoders import BsonEncoder, DocumentEncoder, JsonEncoder

# 导出异常
from bulkflow.buffer import InserterConfigError, InserterError
from bulkflow.encoders import EncoderError, EncodingError
from bulkflow.exceptions import BulkFlowError
from bulkflow.writers import BatchWriteError, BatchWriterError

# 导出写入器
from bulkflow.writers import (
    BatchWriter,
    BatchWriteResult,
    ElasticsearchBatchWriter,
    MongoBatchWriter,
    WriteErrorItem,
)

__all__ = [
    # 版本
    "__version__",
    # 缓冲插入器
    "BufferedInserter",
    "InserterConfig",
    # 编码器
    "DocumentEncoder",
    "BsonEncoder",
    "JsonEncoder",
    # 写入器
    "BatchWriter",
    "MongoBatchWriter",
    "ElasticsearchBatchWriter",
    "BatchWriteResult",
    "WriteErrorItem",
    # 异常
    "BulkFlowError",
    "InserterError",
    "InserterConfigError",
    "EncoderError",
    "EncodingError",
    "BatchWriterError",
    "BatchWriteError",
]
