"""文档编码器模块.

将结构化文档编码为目标存储的字节表示，供 BufferedInserter 缓冲：
- BsonEncoder: MongoDB（BSON）
- JsonEncoder: Elasticsearch（JSON）

示例用法:
    >>> from bulkflow.encoders import BsonEncoder
    >>> encoder = BsonEncoder()
    >>> raw = encoder.encode({"name": "Alice"})
"""

from .exceptions import EncoderError, EncodingError
from .tool import DEFAULT_MAX_BSON_SIZE, BsonEncoder, DocumentEncoder, JsonEncoder

__all__ = [
    "DocumentEncoder",
    "BsonEncoder",
    "JsonEncoder",
    "DEFAULT_MAX_BSON_SIZE",
    "EncoderError",
    "EncodingError",
]
