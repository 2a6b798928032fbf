"""缓冲插入器使用示例.

本文件展示了如何使用 BufferedInserter 向 MongoDB 集合和 Elasticsearch 索引批量插入文档。
"""

from elasticsearch import Elasticsearch
from pymongo import MongoClient

from bulkflow import BatchWriteError, BufferedInserter, EncodingError

# 创建 MongoDB 客户端连接（由调用方持有和关闭）
mongo_client = MongoClient("mongodb://localhost:27017")
collection = mongo_client["app"]["users"]

# 创建 Elasticsearch 客户端连接
es_client = Elasticsearch(["http://localhost:9200"])


# ==================== 示例1：逐条插入并显式刷新 ====================
def example_insert_and_flush():
    """逐条插入文档，结束时显式刷新剩余文档."""
    inserter = BufferedInserter.for_collection(
        collection,
        limit=1000,  # 每1000条执行一次批量写入
        ordered=True,  # 遇到第一个错误即停止
    )

    documents = [
        {"_id": 1, "name": "张三", "age": 25, "city": "北京"},
        {"_id": 2, "name": "李四", "age": 30, "city": "上海"},
        {"_id": 3, "name": "王五", "age": 28, "city": "广州"},
    ]

    for doc in documents:
        try:
            result = inserter.insert(doc)
        except EncodingError as e:
            print(f"  编码失败，跳过: {e}")
            continue
        if not result.is_noop():
            print(f"  自动刷新: 成功={result.success}, 失败={result.failed}")

    # 必须显式刷新，否则缓冲区中的文档会丢失
    result = inserter.flush()
    print(f"  最终刷新: 成功={result.success}, 失败={result.failed}")

    if result.failed > 0:
        print(f"  错误摘要:\n{result.get_error_summary()}")

    totals = inserter.totals
    print(f"  {totals.success} 个文档写入成功，{totals.failed} 个文档写入失败")
    return totals


# ==================== 示例2：无序写入与跳过校验 ====================
def example_unordered_bypass():
    """无序写入并跳过服务端文档校验."""
    inserter = BufferedInserter.for_collection(
        collection, limit=500, ordered=False
    ).set_bypass_document_validation(True)

    for i in range(1200):
        inserter.insert({"seq": i, "level": ["INFO", "WARNING", "ERROR"][i % 3]})

    inserter.flush()
    print(
        f"  批次: {inserter.totals.batch_count}, "
        f"成功: {inserter.totals.success}, 失败: {inserter.totals.failed}"
    )
    return inserter.totals


# ==================== 示例3：流式写入 Elasticsearch ====================
def example_insert_stream():
    """使用流式插入处理大量数据."""
    inserter = BufferedInserter.for_index(es_client, "logs", limit=1000, ordered=False)

    # 生成大量模拟数据（100000条）
    def generate_documents():
        for i in range(100000):
            yield {
                "timestamp": f"2024-01-{i % 31 + 1:02d}T{i % 24:02d}:00:00",
                "level": ["INFO", "WARNING", "ERROR"][i % 3],
                "message": f"日志消息 {i}",
            }

    # 定义进度回调函数
    def progress_callback(current, total, batch_result):
        print(
            f"已处理: {current}, "
            f"当前批次成功: {batch_result.success}, "
            f"当前批次失败: {batch_result.failed}"
        )

    try:
        result = inserter.insert_stream(
            generate_documents(), progress_callback=progress_callback
        )
    except BatchWriteError as e:
        print(f"流式处理中断: {e}")
        return e.result

    print(
        f"流式处理完成: 总数={result.total}, 成功={result.success}, 失败={result.failed}"
    )
    return result


def main():
    """运行所有示例."""
    print("=" * 50)
    print("缓冲插入器示例")
    print("=" * 50)

    print("\n1. 逐条插入并显式刷新示例")
    print("-" * 50)
    example_insert_and_flush()

    print("\n2. 无序写入与跳过校验示例")
    print("-" * 50)
    example_unordered_bypass()

    print("\n3. 流式写入 Elasticsearch 示例")
    print("-" * 50)
    # 取消注释以下代码以运行流式处理示例
    # example_insert_stream()

    print("\n" + "=" * 50)
    print("所有示例运行完成！")
    print("=" * 50)

    mongo_client.close()


if __name__ == "__main__":
    main()
