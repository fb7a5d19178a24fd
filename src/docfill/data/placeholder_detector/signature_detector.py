"""签名区字段识别器."""

import re
from typing import Iterator, List, Optional, Set

from loguru import logger

from docfill.config.settings import DetectionConfig, settings
from docfill.data.models import SIGNATURE_SUFFIX, PatternMatch, PlaceholderKind, classify_kind
from docfill.data.placeholder_detector.base_detector import PlaceholderDetector


class SignatureDetector(PlaceholderDetector):
    """签名区字段识别器.

    依次执行三轮识别：
    1. 显式字段：同一行内"字段名: ___"（至少 min_label_underscores 个下划线）
    2. 签名区字段行：By/Name/Title/Address/Email 加冒号，行尾只有空白或下划线
    3. 签名下划线行：整行下划线，且上一行是签名区字段行

    第 2、3 轮只在文档像是包含签名区时执行（见 has_signature_section），
    两轮产出的规范文本均为 "字段名: ____"。
    """

    def __init__(self, config: Optional[DetectionConfig] = None):
        """初始化签名区字段识别器.

        Args:
            config: 检测配置，默认使用全局配置
        """
        self.config = config or settings.detection
        labels = "|".join(re.escape(label) for label in self.config.signature_labels)

        self.label_pattern = re.compile(
            rf"([A-Za-z][A-Za-z \t]*):[ \t]*_{{{self.config.min_label_underscores},}}"
        )
        self.label_line_pattern = re.compile(
            rf"^[ \t]*({labels}):[ \t_]*$", re.MULTILINE | re.IGNORECASE
        )
        self.label_only_pattern = re.compile(rf"^({labels}):\s*$", re.IGNORECASE)
        self.underscore_line_pattern = re.compile(
            rf"^_{{{self.config.min_signature_line_underscores},}}$"
        )

    def detect(self, text: str) -> Iterator[PatternMatch]:
        # 第 1 轮已认领的字段名位置，后两轮不再重复产出同一字段
        claimed: Set[int] = set()

        for match in self._detect_labels(text):
            claimed.add(match.start)
            yield match

        if not self.has_signature_section(text):
            logger.debug("文档不包含签名区，跳过签名区字段识别")
            return

        for match in self._detect_label_lines(text):
            if match.start not in claimed:
                yield match

        for match in self._detect_underscore_lines(text):
            if match.start not in claimed:
                yield match

    def has_signature_section(self, text: str) -> bool:
        """判断文档是否包含签名区.

        Args:
            text: 文档纯文本

        Returns:
            关闭门控时总是 True
        """
        if not self.config.signature_gate_enabled:
            return True
        lowered = text.lower()
        if any(word.lower() in lowered for word in self.config.signature_gate_words):
            return True
        return any(token in text for token in self.config.signature_gate_tokens)

    def _detect_labels(self, text: str) -> Iterator[PatternMatch]:
        """第 1 轮：显式 "字段名: ___"."""
        for match in self.label_pattern.finditer(text):
            full_text = match.group(0)
            label = match.group(1).strip()
            kind = classify_kind(full_text)
            yield PatternMatch(
                text=full_text,
                inner=label,
                start=match.start(),
                kind=kind,
                description=f"Please provide a value for: {label}",
                field_name=label if kind == PlaceholderKind.SIGNATURE_FIELD else None,
            )

    def _detect_label_lines(self, text: str) -> Iterator[PatternMatch]:
        """第 2 轮：签名区字段行，按配置的字段名顺序逐个识别."""
        matches: List[re.Match] = list(self.label_line_pattern.finditer(text))
        for label in self.config.signature_labels:
            for match in matches:
                field_name = match.group(1)
                if field_name.lower() != label.lower():
                    continue
                yield self._signature_match(field_name, match.start(1))

    def _detect_underscore_lines(self, text: str) -> Iterator[PatternMatch]:
        """第 3 轮：整行下划线，字段名取自上一行."""
        lines = text.split("\n")
        offsets = []
        offset = 0
        for line in lines:
            offsets.append(offset)
            offset += len(line) + 1

        for index in range(1, len(lines)):
            if not self.underscore_line_pattern.match(lines[index].strip()):
                continue
            prev_line = lines[index - 1]
            if not self.label_only_pattern.match(prev_line.strip()):
                continue
            field_name = prev_line.replace(":", "").strip()
            label_offset = offsets[index - 1] + (len(prev_line) - len(prev_line.lstrip()))
            yield self._signature_match(field_name, label_offset)

    @staticmethod
    def _signature_match(field_name: str, start: int) -> PatternMatch:
        return PatternMatch(
            text=f"{field_name}{SIGNATURE_SUFFIX}",
            inner=field_name,
            start=start,
            kind=PlaceholderKind.SIGNATURE_FIELD,
            description=f"Please provide the {field_name.lower()}",
            field_name=field_name,
        )
