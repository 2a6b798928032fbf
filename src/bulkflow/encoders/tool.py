"""文档编码器模块.

提供将结构化文档编码为目标存储所使用字节格式的编码器：
- BsonEncoder: MongoDB 使用的 BSON 编码
- JsonEncoder: Elasticsearch 使用的 JSON 编码
"""

from collections.abc import Mapping
from typing import Any, Protocol

import bson
from bson.codec_options import DEFAULT_CODEC_OPTIONS, CodecOptions
from bson.errors import BSONError
from elasticsearch.exceptions import SerializationError
from elasticsearch.serializer import JSONSerializer

from ..typing import EncodedDocument
from .exceptions import EncodingError

# MongoDB 单文档最大 BSON 大小（16 MiB）
DEFAULT_MAX_BSON_SIZE = 16 * 1024 * 1024


class DocumentEncoder(Protocol):
    """文档编码器协议."""

    def encode(self, document: Any) -> EncodedDocument:
        """将文档编码为字节，失败时抛出 EncodingError."""
        ...


def _check_size(
    data: bytes, max_document_size: int | None, document: Any
) -> None:
    if max_document_size is not None and len(data) > max_document_size:
        raise EncodingError(
            f"文档编码后大小 {len(data)} 字节超过限制 {max_document_size} 字节",
            document=document,
        )


class BsonEncoder:
    """BSON 文档编码器.

    Args:
        codec_options: BSON 编解码选项，默认为 bson.DEFAULT_CODEC_OPTIONS
        max_document_size: 单文档最大字节数，默认为 16 MiB，None 表示不限制

    Example:
        >>> encoder = BsonEncoder()
        >>> data = encoder.encode({"name": "Alice"})
    """

    def __init__(
        self,
        codec_options: CodecOptions | None = None,
        max_document_size: int | None = DEFAULT_MAX_BSON_SIZE,
    ):
        self.codec_options = codec_options or DEFAULT_CODEC_OPTIONS
        self.max_document_size = max_document_size

    def encode(self, document: Any) -> EncodedDocument:
        """将文档编码为 BSON 字节.

        Args:
            document: 映射类型的文档

        Returns:
            BSON 字节

        Raises:
            EncodingError: 文档包含无法编码的值或超出大小限制
        """
        try:
            data = bson.encode(document, codec_options=self.codec_options)
        except (BSONError, TypeError, OverflowError) as e:
            raise EncodingError(f"bson 编码失败: {e}", document=document) from e

        _check_size(data, self.max_document_size, document)
        return data


class JsonEncoder:
    """JSON 文档编码器.

    使用 elasticsearch 客户端自带的 JSONSerializer，支持日期、Decimal、UUID 等类型。

    Args:
        serializer: 序列化器实例，默认为 JSONSerializer()
        max_document_size: 单文档最大字节数，None 表示不限制
    """

    def __init__(
        self,
        serializer: JSONSerializer | None = None,
        max_document_size: int | None = None,
    ):
        self.serializer = serializer or JSONSerializer()
        self.max_document_size = max_document_size

    def encode(self, document: Any) -> EncodedDocument:
        """将文档编码为 UTF-8 JSON 字节."""
        if not isinstance(document, Mapping):
            raise EncodingError(
                f"json 编码需要映射类型文档，实际类型: {type(document).__name__}",
                document=document,
            )

        try:
            data = self.serializer.dumps(document)
        except (SerializationError, TypeError, ValueError) as e:
            raise EncodingError(f"json 编码失败: {e}", document=document) from e

        if isinstance(data, str):
            data = data.encode("utf-8")

        _check_size(data, self.max_document_size, document)
        return data
