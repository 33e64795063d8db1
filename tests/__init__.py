"""
测试集合

1. test_similarity.py - 归一化与 n 元组 Jaccard 相似度
2. test_splitter.py - 分句（含行号）与分小句
3. test_config.py - 选项校验
4. test_aligner.py - 句子对齐（匹配、删除、插入、移动）
5. test_errata.py - 小句对齐、替换提取与错误收集
6. test_output.py - CSV 与报告输出
7. test_api.py - 高层 API 与命令行

运行所有测试:
  python -m pytest tests/ -v
"""
