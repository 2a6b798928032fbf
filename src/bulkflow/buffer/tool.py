"""缓冲插入器核心工具类."""

import logging
from dataclasses import replace
from typing import Any
from collections.abc import Callable, Iterable
from elasticsearch import Elasticsearch
from pymongo.collection import Collection

from ..encoders import DocumentEncoder
from ..typing import Document, EncodedDocument
from ..writers import (
    BatchWriteError,
    BatchWriter,
    BatchWriteResult,
    ElasticsearchBatchWriter,
    MongoBatchWriter,
)
from .models import InserterConfig

logger = logging.getLogger(__name__)


class BufferedInserter:
    """缓冲批量插入器.

    类似 io.BufferedWriter 的设计：逐条接收文档并缓存在内存中，缓冲文档数达到
    limit（或编码字节数达到 max_batch_bytes）时自动执行一次批量写入。

    - insert / insert_encoded 在达到阈值时会同步执行批量写入（阻塞网络调用），
      此时返回该次写入的结果；否则返回空操作结果（total == 0）
    - flush 无论写入成功、部分失败还是整体失败，都会清空缓冲区。
      失败的文档不会重新进入缓冲区，也不会被重试，调用方必须在下一次 flush
      之前从返回结果（或 BatchWriteError.result）中获取错误信息
    - 对象销毁时不会自动刷新，调用方必须在处理结束时显式调用 flush，
      否则缓冲区中剩余的文档会丢失

    实例不是线程安全的，多个工作线程应各自使用独立的实例。

    Args:
        writer: 批量写入器，由调用方创建和持有
        limit: 触发自动刷新的文档数阈值，默认为 1000
        ordered: 是否有序写入，默认为 True
        bypass_document_validation: 是否跳过服务端文档校验，默认为 False
        max_batch_bytes: 触发自动刷新的编码字节数阈值，默认为 None（不限制）
        raise_on_error: 刷新结果含失败时是否抛出 BatchWriteError，默认为 False
        encoder: 文档编码器，默认使用 writer.encoder

    Example:
        >>> inserter = BufferedInserter.for_collection(collection, limit=1000)
        >>> for doc in documents:
        ...     inserter.insert(doc)
        >>> result = inserter.flush()
    """

    def __init__(
        self,
        writer: BatchWriter,
        limit: int = 1000,
        ordered: bool = True,
        bypass_document_validation: bool = False,
        max_batch_bytes: int | None = None,
        raise_on_error: bool = False,
        encoder: DocumentEncoder | None = None,
    ):
        self._config = InserterConfig(
            limit=limit,
            ordered=ordered,
            bypass_document_validation=bypass_document_validation,
            max_batch_bytes=max_batch_bytes,
            raise_on_error=raise_on_error,
        )
        self.writer = writer
        self.encoder = encoder or writer.encoder
        self._pending: list[EncodedDocument] = []
        self._pending_bytes = 0
        self.totals = BatchWriteResult()
        logger.info(
            f"初始化缓冲插入器: target={writer.name}, limit={limit}, "
            f"ordered={ordered}, max_batch_bytes={max_batch_bytes}"
        )

    @classmethod
    def from_config(
        cls,
        writer: BatchWriter,
        config: InserterConfig,
        encoder: DocumentEncoder | None = None,
    ) -> "BufferedInserter":
        """根据配置模型创建插入器."""
        return cls(
            writer,
            limit=config.limit,
            ordered=config.ordered,
            bypass_document_validation=config.bypass_document_validation,
            max_batch_bytes=config.max_batch_bytes,
            raise_on_error=config.raise_on_error,
            encoder=encoder,
        )

    @classmethod
    def ordered_inserter(cls, writer: BatchWriter, limit: int) -> "BufferedInserter":
        """创建有序写入的插入器."""
        return cls(writer, limit=limit, ordered=True)

    @classmethod
    def unordered_inserter(cls, writer: BatchWriter, limit: int) -> "BufferedInserter":
        """创建无序写入的插入器."""
        return cls(writer, limit=limit, ordered=False)

    @classmethod
    def for_collection(
        cls,
        collection: Collection,
        limit: int,
        ordered: bool = True,
    ) -> "BufferedInserter":
        """创建写入 MongoDB 集合的插入器.

        Args:
            collection: pymongo 集合对象
            limit: 触发自动刷新的文档数阈值
            ordered: 是否有序写入

        Returns:
            使用 MongoBatchWriter 和 BsonEncoder 的插入器
        """
        return cls(MongoBatchWriter(collection), limit=limit, ordered=ordered)

    @classmethod
    def for_index(
        cls,
        es_client: Elasticsearch,
        index_name: str,
        limit: int,
        ordered: bool = True,
    ) -> "BufferedInserter":
        """创建写入 Elasticsearch 索引的插入器.

        Args:
            es_client: Elasticsearch 客户端实例
            index_name: 目标索引名称
            limit: 触发自动刷新的文档数阈值
            ordered: 是否在第一个失败处停止

        Returns:
            使用 ElasticsearchBatchWriter 和 JsonEncoder 的插入器
        """
        writer = ElasticsearchBatchWriter(es_client, index_name, chunk_size=limit)
        return cls(writer, limit=limit, ordered=ordered)

    @property
    def config(self) -> InserterConfig:
        """当前配置."""
        return self._config

    @property
    def limit(self) -> int:
        return self._config.limit

    @property
    def pending_count(self) -> int:
        """缓冲区中待写入的文档数."""
        return len(self._pending)

    @property
    def pending_bytes(self) -> int:
        """缓冲区中待写入文档的编码总字节数."""
        return self._pending_bytes

    def __len__(self) -> int:
        return len(self._pending)

    def is_empty(self) -> bool:
        return not self._pending

    def set_ordered(self, ordered: bool) -> "BufferedInserter":
        """设置有序写入模式，仅影响之后的刷新. 支持链式调用."""
        self._config = replace(self._config, ordered=ordered)
        return self

    def set_bypass_document_validation(self, bypass: bool) -> "BufferedInserter":
        """设置是否跳过服务端文档校验，仅影响之后的刷新. 支持链式调用."""
        self._config = replace(self._config, bypass_document_validation=bypass)
        return self

    def set_config(
        self,
        ordered: bool | None = None,
        bypass_document_validation: bool | None = None,
        max_batch_bytes: int | None = None,
        raise_on_error: bool | None = None,
    ) -> None:
        """更新插入器配置.

        limit 在构造后固定，不能修改。参数为 None 时保持原值。

        Args:
            ordered: 是否有序写入
            bypass_document_validation: 是否跳过服务端文档校验
            max_batch_bytes: 触发自动刷新的编码字节数阈值
            raise_on_error: 刷新结果含失败时是否抛出异常

        Raises:
            InserterConfigError: 参数不合法
        """
        changes: dict[str, Any] = {}
        if ordered is not None:
            changes["ordered"] = ordered
        if bypass_document_validation is not None:
            changes["bypass_document_validation"] = bypass_document_validation
        if max_batch_bytes is not None:
            changes["max_batch_bytes"] = max_batch_bytes
        if raise_on_error is not None:
            changes["raise_on_error"] = raise_on_error

        self._config = replace(self._config, **changes)

        logger.info(
            f"更新配置: ordered={self._config.ordered}, "
            f"bypass_document_validation={self._config.bypass_document_validation}, "
            f"max_batch_bytes={self._config.max_batch_bytes}, "
            f"raise_on_error={self._config.raise_on_error}"
        )

    def insert(self, document: Document) -> BatchWriteResult:
        """编码并缓冲一个文档.

        Args:
            document: 结构化文档

        Returns:
            达到阈值时为本次批量写入的结果，否则为空操作结果

        Raises:
            EncodingError: 文档无法编码，此时缓冲区不变，也不会发起写入
            BatchWriteError: 触发的批量写入整体失败
        """
        data = self.encoder.encode(document)
        return self.insert_encoded(data)

    def insert_encoded(self, data: EncodedDocument) -> BatchWriteResult:
        """缓冲一个已编码的文档，不再校验其内容.

        缓冲文档数达到 limit（或编码字节数达到 max_batch_bytes）时立即执行 flush。

        Args:
            data: 已编码的文档字节

        Returns:
            达到阈值时为本次批量写入的结果，否则为空操作结果
        """
        self._pending.append(data)
        self._pending_bytes += len(data)

        if self._is_full():
            return self.flush()

        return BatchWriteResult()

    def insert_stream(
        self,
        documents: Iterable[Document],
        progress_callback: Callable[[int, int, BatchWriteResult], None] | None = None,
    ) -> BatchWriteResult:
        """逐个插入文档流，并在结束时刷新剩余文档.

        适用于处理超大量数据，不需要将所有数据加载到内存。

        Args:
            documents: 文档迭代器
            progress_callback: 进度回调函数，每次刷新后调用，
                参数为 (已插入文档数, 已知总数或-1, 当前批次结果)

        Returns:
            本次调用中所有刷新结果的合并

        Raises:
            EncodingError: 某个文档无法编码，此前已缓冲的文档仍留在缓冲区中
            BatchWriteError: 某次批量写入整体失败

        Example:
            >>> def progress_callback(current, total, result):
            ...     print(f"已处理: {current}, 成功: {result.success}")
            >>>
            >>> result = inserter.insert_stream(
            ...     iter_documents(), progress_callback=progress_callback
            ... )
        """
        result = BatchWriteResult()
        processed_count = 0

        for document in documents:
            batch_result = self.insert(document)
            processed_count += 1

            if not batch_result.is_noop():
                result.merge(batch_result)
                if progress_callback:
                    progress_callback(processed_count, -1, batch_result)

        # 处理剩余的文档
        batch_result = self.flush()
        if not batch_result.is_noop():
            result.merge(batch_result)
            if progress_callback:
                progress_callback(processed_count, -1, batch_result)

        return result

    def flush(self) -> BatchWriteResult:
        """将缓冲区中的全部文档作为一次批量写入，然后清空缓冲区.

        缓冲区为空时直接返回空操作结果，不访问目标存储。

        无论写入结果如何，缓冲区都会被清空，失败的文档不会被重试。

        Returns:
            写入器返回的批量写入结果

        Raises:
            BatchWriteError: 写入整体失败；或配置了 raise_on_error 且结果含失败
        """
        if not self._pending:
            return BatchWriteResult()

        documents = self._pending
        logger.debug(f"刷新 {len(documents)} 个文档到 {self.writer.name}")

        try:
            result = self.writer.write(
                documents,
                ordered=self._config.ordered,
                bypass_document_validation=self._config.bypass_document_validation,
            )
        except BatchWriteError as e:
            if e.result is not None:
                self.totals.merge(e.result)
            raise
        finally:
            self._reset()

        self.totals.merge(result)

        if self._config.raise_on_error and not result.is_success():
            raise BatchWriteError(
                f"批量写入完成，但有 {result.failed} 个失败、{result.skipped} 个未尝试: "
                f"{result.get_error_summary()}",
                result=result,
            )

        return result

    def _is_full(self) -> bool:
        if len(self._pending) >= self._config.limit:
            return True
        max_batch_bytes = self._config.max_batch_bytes
        return max_batch_bytes is not None and self._pending_bytes >= max_batch_bytes

    def _reset(self) -> None:
        # 重新绑定列表而非原地清空，已交给写入器的列表保持不变
        self._pending = []
        self._pending_bytes = 0
