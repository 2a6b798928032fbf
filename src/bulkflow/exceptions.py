"""bulkflow 异常定义模块."""


class BulkFlowError(Exception):
    """bulkflow 基础异常类.

    库内所有异常的根类，调用方可以用它统一捕获。
    """

    pass
