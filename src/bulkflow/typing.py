"""bulkflow 类型定义模块."""

from typing import Any, Mapping

# 结构化文档类型
Document = Mapping[str, Any]

# 已编码文档类型（BSON 或 JSON 字节）
EncodedDocument = bytes
