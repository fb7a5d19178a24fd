"""数据处理模块.""" 

"""
docfill/data/
├── __init__.py
├── models.py              # 数据模型定义
├── placeholder_detector/  # 占位符识别器
│   ├── __init__.py
│   ├── base_detector.py
│   ├── bracket_detector.py
│   ├── dollar_detector.py
│   └── signature_detector.py
├── extractor.py           # 占位符提取
├── reconstructor.py       # 文档回填
├── document_io.py         # 文本提取与下载文件生成
└── report_generator.py    # 报告生成
"""
