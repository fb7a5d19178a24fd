"""异常定义."""

from typing import Optional


class DocfillError(ValueError):
    """docfill 异常基类."""


class ExtractionError(DocfillError):
    """文本提取失败或未检测到任何占位符.

    Attributes:
        sample: 提取到的文本样例，便于排查
    """

    def __init__(self, message: str, sample: Optional[str] = None) -> None:
        super().__init__(message)
        self.sample = sample


class EncodingError(DocfillError):
    """生成下载文件失败."""


class SessionStateError(DocfillError):
    """当前会话状态不接受该操作."""
