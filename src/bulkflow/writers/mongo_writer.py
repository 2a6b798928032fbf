"""MongoDB 批量写入器模块."""

import time
import logging
from typing import Any

from bson.errors import BSONError
from bson.raw_bson import RawBSONDocument
from pymongo.collection import Collection
from pymongo.errors import BulkWriteError, PyMongoError

from ..encoders import BsonEncoder
from ..typing import EncodedDocument
from .exceptions import BatchWriteError
from .models import BatchWriteResult

logger = logging.getLogger(__name__)


class MongoBatchWriter:
    """MongoDB 集合批量写入器.

    使用 Collection.insert_many 执行批量插入，已编码的 BSON 字节以
    RawBSONDocument 形式发送，不再重复编码。

    集合对象由调用方创建和持有，写入器不负责打开或关闭连接。

    Args:
        collection: pymongo 集合对象
        encoder: 文档编码器，默认为 BsonEncoder()

    Example:
        >>> from pymongo import MongoClient
        >>> collection = MongoClient()["app"]["users"]
        >>> writer = MongoBatchWriter(collection)
    """

    def __init__(self, collection: Collection, encoder: BsonEncoder | None = None):
        self.collection = collection
        self.encoder = encoder or BsonEncoder()

    @property
    def name(self) -> str:
        """集合完整名称（db.collection）."""
        return self.collection.full_name

    def write(
        self,
        documents: list[EncodedDocument],
        ordered: bool,
        bypass_document_validation: bool,
    ) -> BatchWriteResult:
        """执行一次 insert_many 批量插入.

        Args:
            documents: BSON 字节列表
            ordered: 是否有序写入（遇到第一个错误即停止）
            bypass_document_validation: 是否跳过服务端文档校验

        Returns:
            批量写入结果。部分失败不会抛出异常，而是体现在结果的 errors 中

        Raises:
            BatchWriteError: 整体失败，例如连接中断
        """
        total = len(documents)
        start_time = time.time()

        try:
            raw_documents = [RawBSONDocument(doc) for doc in documents]
            insert_result = self.collection.insert_many(
                raw_documents,
                ordered=ordered,
                bypass_document_validation=bypass_document_validation,
            )
        except BulkWriteError as e:
            result = self._build_partial_result(e.details, total, ordered)
        except (PyMongoError, BSONError) as e:
            logger.error(f"集合 {self.name} 批量插入失败: {str(e)}")
            result = BatchWriteResult(total=total, failed=total, batch_count=1)
            result.add_error(
                index=0,
                code=getattr(e, "code", None),
                error_type=type(e).__name__,
                error_reason=str(e),
            )
            result.took = time.time() - start_time
            raise BatchWriteError(
                f"集合 {self.name} 批量插入失败: {str(e)}", result=result
            ) from e
        else:
            result = BatchWriteResult(
                total=total,
                success=total,
                batch_count=1,
                acknowledged=insert_result.acknowledged,
            )

        result.took = time.time() - start_time
        return result

    def _build_partial_result(
        self,
        details: dict[str, Any],
        total: int,
        ordered: bool,
    ) -> BatchWriteResult:
        """将 BulkWriteError.details 转换为批量写入结果.

        Args:
            details: BulkWriteError 的详情字典
            total: 批次文档总数
            ordered: 是否有序写入

        Returns:
            批量写入结果
        """
        write_errors = details.get("writeErrors", [])
        inserted = details.get("nInserted", 0)

        result = BatchWriteResult(
            total=total,
            success=inserted,
            failed=len(write_errors),
            batch_count=1,
        )
        if ordered:
            # 有序模式在第一个错误处停止，后续文档未被尝试
            result.skipped = max(total - inserted - len(write_errors), 0)

        for error in write_errors:
            op = error.get("op")
            doc_id = op.get("_id") if op is not None else None

            caused_by = None
            if "errInfo" in error:
                caused_by = str(error["errInfo"])

            result.add_error(
                index=error.get("index", 0),
                code=error.get("code"),
                error_type=error.get("codeName", "WriteError"),
                error_reason=error.get("errmsg", "unknown error"),
                doc_id=doc_id,
                caused_by=caused_by,
            )

        for concern_error in details.get("writeConcernErrors", []):
            result.add_warning(
                f"写关注错误 ({concern_error.get('code')}): "
                f"{concern_error.get('errmsg', 'unknown error')}"
            )

        logger.warning(
            f"集合 {self.name} 批量插入部分失败: 成功 {result.success}, "
            f"失败 {result.failed}, 未尝试 {result.skipped}"
        )
        return result
