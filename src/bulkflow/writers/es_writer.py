"""Elasticsearch 批量写入器模块."""

import time
import logging
from typing import Any

from elasticsearch import Elasticsearch
from elasticsearch.exceptions import ApiError, TransportError
from elasticsearch.helpers import streaming_bulk

from ..encoders import JsonEncoder
from ..typing import EncodedDocument
from .exceptions import BatchWriteError
from .models import BatchWriteResult

logger = logging.getLogger(__name__)


class ElasticsearchBatchWriter:
    """Elasticsearch 索引批量写入器.

    通过 elasticsearch.helpers.streaming_bulk 将已编码的 JSON 文档写入指定索引，
    单次 write 调用可能按 chunk_size / max_chunk_bytes 拆分为多个 _bulk 请求。

    有序模式下，遇到第一个失败的文档即停止消费结果流，后续分块不再发送；
    失败文档之后的文档计入 skipped。注意 Elasticsearch 无法在单个 _bulk 请求内
    中途停止，与失败文档处于同一请求中的后续文档可能已经写入，但不会被确认。

    Elasticsearch 没有文档校验机制，bypass_document_validation 参数会被忽略。

    Args:
        es_client: Elasticsearch 客户端实例
        index_name: 目标索引名称
        chunk_size: 单个 _bulk 请求的最大文档数，默认为 500
        max_chunk_bytes: 单个 _bulk 请求的最大字节数，默认为 100 MiB
        encoder: 文档编码器，默认为 JsonEncoder()
    """

    def __init__(
        self,
        es_client: Elasticsearch,
        index_name: str,
        chunk_size: int = 500,
        max_chunk_bytes: int = 100 * 1024 * 1024,
        encoder: JsonEncoder | None = None,
    ):
        self.es_client = es_client
        self.index_name = index_name
        self.chunk_size = chunk_size
        self.max_chunk_bytes = max_chunk_bytes
        self.encoder = encoder or JsonEncoder()

    @property
    def name(self) -> str:
        """目标索引名称."""
        return self.index_name

    def write(
        self,
        documents: list[EncodedDocument],
        ordered: bool,
        bypass_document_validation: bool,
    ) -> BatchWriteResult:
        """执行一次批量索引.

        Args:
            documents: JSON 字节列表
            ordered: 是否在第一个失败处停止
            bypass_document_validation: Elasticsearch 不支持，忽略

        Returns:
            批量写入结果

        Raises:
            BatchWriteError: 连接或传输层失败
        """
        if bypass_document_validation:
            logger.debug(
                f"索引 {self.index_name} 不支持 bypass_document_validation，已忽略"
            )

        total = len(documents)
        result = BatchWriteResult(total=total, batch_count=1)
        start_time = time.time()
        processed = 0

        try:
            for ok, item in streaming_bulk(
                self.es_client,
                documents,
                index=self.index_name,
                chunk_size=self.chunk_size,
                max_chunk_bytes=self.max_chunk_bytes,
                max_retries=0,
                raise_on_error=False,
                raise_on_exception=False,
            ):
                position = processed
                processed += 1
                if ok:
                    result.success += 1
                    continue

                result.failed += 1
                self._add_item_error(result, position, item)

                if ordered:
                    result.skipped = total - processed
                    logger.warning(
                        f"索引 {self.index_name} 有序写入在第 {position} 个文档处停止，"
                        f"{result.skipped} 个文档未确认"
                    )
                    break

        except (TransportError, ApiError) as e:
            result.failed = total - result.success
            result.took = time.time() - start_time
            result.add_error(
                index=processed,
                code=getattr(e, "status_code", None),
                error_type=type(e).__name__,
                error_reason=str(e),
            )
            logger.error(f"索引 {self.index_name} 批量写入失败: {str(e)}")
            raise BatchWriteError(
                f"索引 {self.index_name} 批量写入失败: {str(e)}", result=result
            ) from e

        result.took = time.time() - start_time

        if result.failed > 0 and not ordered:
            logger.warning(
                f"索引 {self.index_name} 批量写入部分失败: "
                f"成功 {result.success}, 失败 {result.failed}"
            )

        return result

    def _add_item_error(
        self,
        result: BatchWriteResult,
        position: int,
        item: dict[str, Any],
    ) -> None:
        """解析单个失败项并添加到结果中.

        Args:
            result: 批量写入结果
            position: 文档在批次中的位置
            item: streaming_bulk 返回的失败项，格式类似
                {"index": {"_index": "xxx", "_id": "xxx", "status": 400, "error": {...}}}
        """
        info = next(iter(item.values()), {}) if item else {}
        error_info = info.get("error", {})

        if isinstance(error_info, dict):
            error_type = error_info.get("type", "unknown")
            error_reason = error_info.get("reason", "unknown error")
            caused_by = None
            if "caused_by" in error_info:
                caused_by_info = error_info["caused_by"]
                caused_by = f"{caused_by_info.get('type', '')}: {caused_by_info.get('reason', '')}"
        else:
            # 传输层异常时 error 为字符串
            error_type = "unknown"
            error_reason = str(error_info)
            caused_by = None

        status = info.get("status")
        result.add_error(
            index=position,
            code=status if isinstance(status, int) else None,
            error_type=error_type,
            error_reason=error_reason,
            doc_id=info.get("_id"),
            caused_by=caused_by,
        )
