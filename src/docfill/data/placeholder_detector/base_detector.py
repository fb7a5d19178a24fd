"""占位符识别器基类."""

from abc import ABC, abstractmethod
from typing import Iterator

from docfill.data.models import PatternMatch


class PlaceholderDetector(ABC):
    """占位符识别器基类."""
    
    @abstractmethod
    def detect(self, text: str) -> Iterator[PatternMatch]:
        """识别文本中的占位符.
        
        按位置顺序惰性产出匹配，只能遍历一次。
        
        Args:
            text: 文档纯文本
            
        Returns:
            匹配结果迭代器
        """
        pass
