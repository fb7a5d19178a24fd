"""数据模型定义."""

from enum import Enum
from typing import NamedTuple, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

SIGNATURE_SUFFIX = ": ____"
UNDERSCORE_MARK = "____"


class PlaceholderKind(str, Enum):
    """占位符类型，检测时确定，回填时据此选择替换策略."""

    BRACKETED = "bracketed"                    # [COMPANY NAME]
    DOLLAR_AMOUNT = "dollar_amount"            # $[_____]
    SIGNATURE_FIELD = "signature_field"        # Name: ____
    UNDERSCORE_GENERIC = "underscore_generic"  # Name:______
    GENERIC = "generic"


def classify_kind(text: str) -> PlaceholderKind:
    """根据占位符文本形态判断类型.
    
    Args:
        text: 占位符文本
        
    Returns:
        占位符类型
    """
    if text.startswith("[") and text.endswith("]"):
        return PlaceholderKind.BRACKETED
    if text.startswith("$["):
        return PlaceholderKind.DOLLAR_AMOUNT
    if SIGNATURE_SUFFIX in text:
        return PlaceholderKind.SIGNATURE_FIELD
    if UNDERSCORE_MARK in text:
        return PlaceholderKind.UNDERSCORE_GENERIC
    return PlaceholderKind.GENERIC


class PatternMatch(NamedTuple):
    """识别器输出的单个匹配."""

    text: str                          # 规范化后的占位符文本，用作回填的匹配键
    inner: str                         # 捕获的内部内容
    start: int                         # 在原文中的起始位置
    kind: PlaceholderKind
    description: str                   # 提示用户的说明
    field_name: Optional[str] = None   # 签名区字段名（仅 SIGNATURE_FIELD）


class Placeholder(BaseModel):
    """占位符信息.

    不可变对象，赋值通过 with_value 生成新对象。
    """

    model_config = ConfigDict(frozen=True)

    id: str
    text: str
    description: str = ""
    value: Optional[str] = None
    source_position: int = Field(default=0, description="首次出现的位置，仅用于去重")
    kind: PlaceholderKind = PlaceholderKind.GENERIC
    field_name: Optional[str] = None

    @property
    def is_filled(self) -> bool:
        return bool(self.value)

    def with_value(self, value: Optional[str]) -> "Placeholder":
        """返回填入新值的占位符副本."""
        return self.model_copy(update={"value": value})

    def __repr__(self) -> str:
        return (
            f"Placeholder(id='{self.id}', text='{self.text}', "
            f"kind='{self.kind.value}', value='{self.value or 'None'}')"
        )


class DocumentData(BaseModel):
    """一次上传对应的文档数据，占位符顺序在提取后不再变化."""

    model_config = ConfigDict(frozen=True)

    original_content: str
    placeholders: Tuple[Placeholder, ...] = ()
    file_name: str = ""
    source: Optional[bytes] = Field(default=None, repr=False)  # 原始文件内容，仅下载时使用

    def get(self, placeholder_id: str) -> Optional[Placeholder]:
        """按 id 查找占位符."""
        for placeholder in self.placeholders:
            if placeholder.id == placeholder_id:
                return placeholder
        return None

    def with_value(self, placeholder_id: str, value: Optional[str]) -> "DocumentData":
        """返回指定占位符被赋值后的文档副本.
        
        Args:
            placeholder_id: 占位符 id
            value: 新值
            
        Returns:
            新的文档数据
            
        Raises:
            KeyError: 占位符不存在
        """
        if self.get(placeholder_id) is None:
            raise KeyError(placeholder_id)
        placeholders = tuple(
            p.with_value(value) if p.id == placeholder_id else p
            for p in self.placeholders
        )
        return self.model_copy(update={"placeholders": placeholders})

    @property
    def filled_count(self) -> int:
        return sum(1 for p in self.placeholders if p.is_filled)
