"""文档回填模块."""

import re
from dataclasses import dataclass, field
from typing import Iterable, List, Pattern, Tuple

from loguru import logger

from docfill.data.models import SIGNATURE_SUFFIX, Placeholder, PlaceholderKind

# 字段名须位于行首或非字母字符之后，不能是更长字段名（如 Company Name）的后半段
LABEL_LEAD = r"(?P<lead>(?:^|(?<=[^A-Za-z \t]))[ \t]*)"


@dataclass(frozen=True)
class SubstitutionMiss:
    """未能回填的占位符."""

    placeholder_id: str
    text: str
    value: str


@dataclass
class ReconstructionResult:
    """回填结果."""

    text: str
    misses: List[SubstitutionMiss] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.misses


class DocumentReconstructor:
    """文档回填器.

    将已填写的占位符值替换回原文。按占位符文本长度降序处理，避免短占位符
    （如 [CO]）破坏包含它的长占位符（如 [COMPANY]）。每个占位符只替换第一处
    匹配，替换在当前（可能已部分替换的）文本上进行。
    """

    def reconstruct(self, original_text: str, placeholders: Iterable[Placeholder]) -> ReconstructionResult:
        """回填文档.

        Args:
            original_text: 原始纯文本
            placeholders: 占位符列表，未填写的占位符保持原样

        Returns:
            回填结果，包含最终文本和未能回填的占位符
        """
        filled = [p for p in placeholders if p.is_filled]
        ordered = sorted(filled, key=lambda p: len(p.text), reverse=True)

        text = original_text
        misses: List[SubstitutionMiss] = []
        for placeholder in ordered:
            text, replaced = self._substitute(text, placeholder)
            if replaced:
                logger.debug(f"已将 '{placeholder.text}' 替换为 '{placeholder.value}'")
            else:
                logger.warning(f"未能回填占位符 '{placeholder.text}' ({placeholder.id})")
                misses.append(SubstitutionMiss(placeholder.id, placeholder.text, placeholder.value))

        return ReconstructionResult(text=text, misses=misses)

    def _substitute(self, text: str, placeholder: Placeholder) -> Tuple[str, bool]:
        """根据占位符类型选择替换策略."""
        if placeholder.kind == PlaceholderKind.SIGNATURE_FIELD:
            return self._substitute_signature(text, placeholder)
        # 方括号、金额、下划线及其它类型均按原文字面替换
        return self._replace_first(self._literal(placeholder.text), text, placeholder.value)

    def _substitute_signature(self, text: str, placeholder: Placeholder) -> Tuple[str, bool]:
        """签名区字段：依次尝试精确匹配和三种宽松匹配，首个命中的生效."""
        field_name = signature_field_name(placeholder)
        replacement = f"{field_name}: {placeholder.value}"
        escaped = re.escape(field_name)

        strategies = [
            re.compile(LABEL_LEAD + re.escape(placeholder.text), re.MULTILINE),
            re.compile(rf"{LABEL_LEAD}{escaped}:\s*_{{2,}}", re.IGNORECASE | re.MULTILINE),
            re.compile(rf"{LABEL_LEAD}{escaped}:\s*[_\s]*$", re.IGNORECASE | re.MULTILINE),
            re.compile(rf"{LABEL_LEAD}{escaped}:\s*$", re.IGNORECASE | re.MULTILINE),
        ]
        for index, pattern in enumerate(strategies, 1):
            text, replaced = self._replace_first(pattern, text, replacement)
            if replaced:
                logger.debug(f"签名区字段 '{field_name}' 使用策略 {index} 替换")
                return text, True
        return text, False

    @staticmethod
    def _literal(text: str) -> Pattern:
        return re.compile(re.escape(text))

    @staticmethod
    def _replace_first(pattern: Pattern, text: str, replacement: str) -> Tuple[str, bool]:
        # 用函数作为替换值，避免值中的反斜杠被当作分组引用；保留字段名前的缩进
        new_text, count = pattern.subn(lambda m: (m.groupdict().get("lead") or "") + replacement, text, count=1)
        return new_text, count > 0


def signature_field_name(placeholder: Placeholder) -> str:
    """取得签名区字段名."""
    if placeholder.field_name:
        return placeholder.field_name
    if placeholder.text.endswith(SIGNATURE_SUFFIX):
        return placeholder.text[: -len(SIGNATURE_SUFFIX)]
    return placeholder.text.split(":", 1)[0].strip()


def reconstruct(original_text: str, placeholders: Iterable[Placeholder]) -> str:
    """回填文档并只返回最终文本."""
    return DocumentReconstructor().reconstruct(original_text, placeholders).text
