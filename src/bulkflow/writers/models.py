"""批量写入器数据模型定义模块."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class WriteErrorItem:
    """单个文档写入错误项.

    Attributes:
        index: 文档在所属批次中的位置（从 0 开始）
        code: 错误码（MongoDB 错误码或 HTTP 状态码）
        error_type: 错误类型
        error_reason: 错误原因
        doc_id: 文档ID（如果能够获取）
        caused_by: 根本原因
    """

    index: int
    code: int | None
    error_type: str
    error_reason: str
    doc_id: Any = None
    caused_by: str | None = None


@dataclass
class BatchWriteResult:
    """批量写入结果数据类.

    total 为 0 表示没有执行任何写入（空操作成功）。

    Attributes:
        total: 提交的文档总数
        success: 确认写入成功的文档数
        failed: 写入失败的文档数
        skipped: 有序模式下因前面的失败而未尝试的文档数
        errors: 错误详情列表
        warnings: 警告信息列表（例如写关注错误）
        took: 耗时（秒）
        batch_count: 批量写入次数
        acknowledged: 服务端是否确认了写入
    """

    total: int = 0
    success: int = 0
    failed: int = 0
    skipped: int = 0
    errors: list[WriteErrorItem] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    took: float = 0.0
    batch_count: int = 0
    acknowledged: bool = True

    def is_success(self) -> bool:
        """判断是否全部成功."""
        return self.failed == 0 and self.skipped == 0

    def is_noop(self) -> bool:
        """判断是否为空操作（没有执行写入）."""
        return self.total == 0

    def add_error(
        self,
        index: int,
        code: int | None,
        error_type: str,
        error_reason: str,
        doc_id: Any = None,
        caused_by: str | None = None,
    ) -> None:
        """添加错误项."""
        self.errors.append(
            WriteErrorItem(
                index=index,
                code=code,
                error_type=error_type,
                error_reason=error_reason,
                doc_id=doc_id,
                caused_by=caused_by,
            )
        )

    def add_warning(self, warning: str) -> None:
        """添加警告信息."""
        self.warnings.append(warning)

    def merge(self, other: "BatchWriteResult") -> None:
        """将另一个批次的结果累加到当前结果."""
        self.total += other.total
        self.success += other.success
        self.failed += other.failed
        self.skipped += other.skipped
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        self.took += other.took
        self.batch_count += other.batch_count
        self.acknowledged = self.acknowledged and other.acknowledged

    def get_error_summary(self) -> str:
        """获取错误摘要."""
        if not self.errors:
            return "No errors"
        summary = f"Total errors: {len(self.errors)}\n"
        for i, error in enumerate(self.errors[:10], 1):  # 只显示前10个错误
            summary += (
                f"{i}. [#{error.index}] DocID: {error.doc_id}, "
                f"Code: {error.code}, Type: {error.error_type}, "
                f"Reason: {error.error_reason}\n"
            )
        if len(self.errors) > 10:
            summary += f"... and {len(self.errors) - 10} more errors\n"
        return summary
