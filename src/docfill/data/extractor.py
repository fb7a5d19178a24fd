"""占位符提取模块."""

from typing import List, Optional, Sequence, Set, Tuple

from loguru import logger

from docfill.config.settings import DetectionConfig
from docfill.data.models import Placeholder
from docfill.data.placeholder_detector import (
    BracketDetector,
    DollarDetector,
    PlaceholderDetector,
    SignatureDetector,
)


class PlaceholderExtractor:
    """占位符提取器.

    按优先级（方括号 -> 金额 -> 签名区）依次运行各识别器，以
    (占位符文本, 起始位置) 去重，先被接受的匹配保留，后出现的同键匹配丢弃。
    id 按接受顺序分配，因此规范顺序是"识别器优先级，其次位置"，
    而不是纯粹的文档顺序。
    """

    def __init__(
        self,
        detectors: Optional[Sequence[PlaceholderDetector]] = None,
        config: Optional[DetectionConfig] = None,
    ) -> None:
        """初始化占位符提取器.

        Args:
            detectors: 识别器列表（按优先级排列），默认使用内置三种识别器
            config: 检测配置，传给默认识别器
        """
        if detectors is None:
            detectors = [
                BracketDetector(config),
                DollarDetector(),
                SignatureDetector(config),
            ]
        self.detectors = list(detectors)

    def extract(self, text: str) -> List[Placeholder]:
        """提取文本中的占位符.

        Args:
            text: 文档纯文本

        Returns:
            按规范顺序排列的占位符列表，未检测到时为空列表
        """
        placeholders: List[Placeholder] = []
        seen: Set[Tuple[str, int]] = set()

        for detector in self.detectors:
            accepted = 0
            for match in detector.detect(text):
                key = (match.text, match.start)
                if key in seen:
                    logger.debug(f"跳过重复占位符: '{match.text}' (位置 {match.start})")
                    continue
                seen.add(key)
                placeholders.append(
                    Placeholder(
                        id=f"placeholder_{len(placeholders) + 1}",
                        text=match.text,
                        description=match.description,
                        source_position=match.start,
                        kind=match.kind,
                        field_name=match.field_name,
                    )
                )
                accepted += 1
            logger.info(f"使用 {detector.__class__.__name__} 找到 {accepted} 个占位符")

        logger.info(f"总共找到 {len(placeholders)} 个占位符")
        return placeholders


def extract_placeholders(text: str) -> List[Placeholder]:
    """使用默认识别器提取占位符."""
    return PlaceholderExtractor().extract(text)
