"""MongoDB 批量写入器单元测试."""

from unittest.mock import MagicMock

import bson
import pytest
from bson.raw_bson import RawBSONDocument
from pymongo.collection import Collection
from pymongo.errors import AutoReconnect, BulkWriteError
from pymongo.results import InsertManyResult

from bulkflow.encoders import BsonEncoder
from bulkflow.writers import BatchWriteError, MongoBatchWriter


# ============================================================
# 辅助 fixtures
# ============================================================


@pytest.fixture
def collection() -> MagicMock:
    """创建模拟集合."""
    mock = MagicMock(spec=Collection)
    mock.full_name = "app.users"
    return mock


@pytest.fixture
def writer(collection: MagicMock) -> MongoBatchWriter:
    """创建写入器."""
    return MongoBatchWriter(collection)


def encode_all(*ids: int) -> list[bytes]:
    return [bson.encode({"_id": i}) for i in ids]


def write_error(index: int, code: int, errmsg: str, doc_id: int, **extra) -> dict:
    error = {
        "index": index,
        "code": code,
        "errmsg": errmsg,
        "op": RawBSONDocument(bson.encode({"_id": doc_id})),
    }
    error.update(extra)
    return error


# ============================================================
# 写入测试
# ============================================================


class TestMongoBatchWriter:
    """MongoBatchWriter 测试."""

    def test_default_encoder(self, writer: MongoBatchWriter) -> None:
        """测试默认编码器."""
        assert isinstance(writer.encoder, BsonEncoder)
        assert writer.name == "app.users"

    def test_write_success(
        self, writer: MongoBatchWriter, collection: MagicMock
    ) -> None:
        """测试全部成功."""
        collection.insert_many.return_value = InsertManyResult([1, 2], True)
        documents = encode_all(1, 2)

        result = writer.write(documents, ordered=True, bypass_document_validation=True)

        assert result.total == 2
        assert result.success == 2
        assert result.failed == 0
        assert result.batch_count == 1
        assert result.is_success()

        args, kwargs = collection.insert_many.call_args
        sent = args[0]
        assert all(isinstance(doc, RawBSONDocument) for doc in sent)
        assert [doc.raw for doc in sent] == documents
        assert kwargs == {"ordered": True, "bypass_document_validation": True}

    def test_write_unacknowledged(
        self, writer: MongoBatchWriter, collection: MagicMock
    ) -> None:
        """测试未确认的写入."""
        collection.insert_many.return_value = InsertManyResult([], False)

        result = writer.write(
            encode_all(1), ordered=False, bypass_document_validation=False
        )

        assert result.acknowledged is False

    def test_unordered_partial_failure(
        self, writer: MongoBatchWriter, collection: MagicMock
    ) -> None:
        """测试无序写入时第二个文档校验失败."""
        collection.insert_many.side_effect = BulkWriteError(
            {
                "writeErrors": [
                    write_error(
                        1,
                        121,
                        "Document failed validation",
                        2,
                        errInfo={"failingDocumentId": 2},
                    )
                ],
                "writeConcernErrors": [],
                "nInserted": 1,
            }
        )

        result = writer.write(
            encode_all(1, 2), ordered=False, bypass_document_validation=False
        )

        assert result.success == 1
        assert result.failed == 1
        assert result.skipped == 0
        error = result.errors[0]
        assert error.index == 1
        assert error.code == 121
        assert error.doc_id == 2
        assert error.error_reason == "Document failed validation"
        assert "failingDocumentId" in error.caused_by

    def test_ordered_partial_failure(
        self, writer: MongoBatchWriter, collection: MagicMock
    ) -> None:
        """测试有序写入在第一个错误处停止."""
        collection.insert_many.side_effect = BulkWriteError(
            {
                "writeErrors": [write_error(1, 11000, "E11000 duplicate key", 2)],
                "writeConcernErrors": [],
                "nInserted": 1,
            }
        )

        result = writer.write(
            encode_all(1, 2, 3, 4), ordered=True, bypass_document_validation=False
        )

        assert result.success == 1
        assert result.failed == 1
        assert result.skipped == 2
        assert not result.is_success()

    def test_write_concern_errors(
        self, writer: MongoBatchWriter, collection: MagicMock
    ) -> None:
        """测试写关注错误记录为警告."""
        collection.insert_many.side_effect = BulkWriteError(
            {
                "writeErrors": [],
                "writeConcernErrors": [{"code": 64, "errmsg": "waiting for replication timed out"}],
                "nInserted": 2,
            }
        )

        result = writer.write(
            encode_all(1, 2), ordered=True, bypass_document_validation=False
        )

        assert result.success == 2
        assert result.failed == 0
        assert len(result.warnings) == 1
        assert "waiting for replication" in result.warnings[0]

    def test_total_failure(
        self, writer: MongoBatchWriter, collection: MagicMock
    ) -> None:
        """测试连接中断时整体失败."""
        collection.insert_many.side_effect = AutoReconnect("connection closed")

        with pytest.raises(BatchWriteError) as exc_info:
            writer.write(
                encode_all(1, 2, 3), ordered=True, bypass_document_validation=False
            )

        result = exc_info.value.result
        assert result.total == 3
        assert result.success == 0
        assert result.failed == 3
        assert result.errors[0].error_type == "AutoReconnect"
        assert isinstance(exc_info.value.__cause__, AutoReconnect)

    def test_malformed_bytes(
        self, writer: MongoBatchWriter, collection: MagicMock
    ) -> None:
        """测试无法解析的 BSON 字节."""
        with pytest.raises(BatchWriteError):
            writer.write([b"\x01\x02"], ordered=True, bypass_document_validation=False)

        collection.insert_many.assert_not_called()
