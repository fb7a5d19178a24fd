"""方括号占位符识别器."""

import re
from typing import Iterator, Optional

from docfill.config.settings import DetectionConfig, settings
from docfill.data.models import PatternMatch, classify_kind
from docfill.data.placeholder_detector.base_detector import PlaceholderDetector

BRACKET_PATTERN = re.compile(r"\[([^\]]+)\]")
_LETTER = re.compile(r"[a-zA-Z]")
_NON_PRINTABLE_ASCII = re.compile(r"[^\x20-\x7E]")


class BracketDetector(PlaceholderDetector):
    """方括号占位符识别器.
    
    识别 [COMPANY NAME] 形式的字段。内部文本必须非空、长度小于上限、
    至少包含一个英文字母且只含可打印 ASCII 字符，用于排除脚注标记
    和非拉丁文本造成的误检。
    """
    
    def __init__(self, config: Optional[DetectionConfig] = None):
        """初始化方括号占位符识别器.
        
        Args:
            config: 检测配置，默认使用全局配置
        """
        self.config = config or settings.detection
    
    def detect(self, text: str) -> Iterator[PatternMatch]:
        for match in BRACKET_PATTERN.finditer(text):
            inner = match.group(1)
            if not self.is_valid(inner):
                continue
            full_text = match.group(0)
            yield PatternMatch(
                text=full_text,
                inner=inner,
                start=match.start(),
                kind=classify_kind(full_text),
                description=f"Please provide a value for: {inner}",
            )
    
    def is_valid(self, inner: str) -> bool:
        """判断方括号内文本是否为有效字段名."""
        return (
            0 < len(inner) < self.config.max_bracket_length
            and _LETTER.search(inner) is not None
            and _NON_PRINTABLE_ASCII.search(inner) is None
        )
