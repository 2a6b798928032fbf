"""缓冲插入器异常定义模块."""

from ..exceptions import BulkFlowError


class InserterError(BulkFlowError):
    """缓冲插入器基础异常类."""

    pass


class InserterConfigError(InserterError):
    """缓冲插入器配置校验异常.

    当配置参数不合法时抛出，例如 limit 小于 1。
    """

    pass
