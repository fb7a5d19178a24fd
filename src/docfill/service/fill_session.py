"""占位符填写对话状态机.

会话是不可变快照，每次用户输入通过 reduce 得到新的会话和一条回复消息：

    COLLECTING(i) --值--> COLLECTING(i+1) / CONFIRMING
    CONFIRMING --yes--> COMPLETE
    CONFIRMING --change 字段--> EDITING(id)，找不到字段则留在 CONFIRMING
    EDITING(id) --值--> CONFIRMING

消息记录只追加、不回退，仅用于展示，不参与回填。
"""

import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Sequence, Tuple

from loguru import logger

from docfill.config.settings import ChatConfig, settings
from docfill.data.models import DocumentData, Placeholder
from docfill.errors import SessionStateError

ASSISTANT = "assistant"
USER = "user"

FIELD_NOT_FOUND_MESSAGE = (
    "I couldn't find that field. Please try again with the exact field name from the summary above."
)
COMPLETE_MESSAGE = (
    "Perfect! Your document is now complete and ready for review. "
    "Continue to the preview to see the final document."
)


class Phase(str, Enum):
    """会话阶段."""

    COLLECTING = "collecting"
    EDITING = "editing"
    CONFIRMING = "confirming"
    COMPLETE = "complete"


@dataclass(frozen=True)
class Message:
    """对话消息."""

    role: str
    content: str


@dataclass(frozen=True)
class FillSession:
    """填写会话快照.

    Attributes:
        document: 文档数据，占位符值随填写更新
        phase: 当前阶段
        index: COLLECTING 阶段正在询问的占位符下标
        editing_id: EDITING 阶段正在修改的占位符 id
        messages: 对话记录
    """

    document: DocumentData
    phase: Phase = Phase.COLLECTING
    index: int = 0
    editing_id: Optional[str] = None
    messages: Tuple[Message, ...] = ()

    @property
    def placeholders(self) -> Tuple[Placeholder, ...]:
        return self.document.placeholders

    @property
    def is_complete(self) -> bool:
        return self.phase == Phase.COMPLETE

    @property
    def current_placeholder(self) -> Optional[Placeholder]:
        """当前等待输入的占位符，确认和完成阶段为 None."""
        if self.phase == Phase.COLLECTING:
            return self.placeholders[self.index]
        if self.phase == Phase.EDITING:
            return self.document.get(self.editing_id)
        return None

    @property
    def progress(self) -> Tuple[int, int]:
        """已填写数量和占位符总数."""
        return self.document.filled_count, len(self.placeholders)


def start(document: DocumentData) -> FillSession:
    """开始填写会话.

    Args:
        document: 提取完成的文档数据

    Returns:
        处于 COLLECTING(0) 的会话

    Raises:
        SessionStateError: 文档没有占位符
    """
    if not document.placeholders:
        raise SessionStateError("Cannot start a fill session without placeholders")

    welcome = Message(
        ASSISTANT,
        f'Great! I\'ve analyzed your document "{document.file_name}" and found '
        f"{len(document.placeholders)} placeholders that need to be filled. "
        "Let's go through them one by one.",
    )
    first = Message(ASSISTANT, question(document.placeholders[0]))
    logger.info(f"开始填写会话: {document.file_name}，共 {len(document.placeholders)} 个占位符")
    return FillSession(document=document, messages=(welcome, first))


def question(placeholder: Placeholder) -> str:
    return f'What should I put for "{placeholder.text}"? {placeholder.description}'.strip()


def summary(document: DocumentData) -> str:
    """生成已填写内容的汇总."""
    lines = "\n".join(f'- {p.text}: "{p.value or ""}"' for p in document.placeholders)
    return (
        "Perfect! I've collected all the information. Here's what you've entered:\n\n"
        f"{lines}\n\n"
        "Does everything look correct? Type 'yes' to proceed, or tell me which field "
        'you\'d like to change (e.g., "change company name").'
    )


def usage_hint(config: Optional[ChatConfig] = None) -> str:
    config = config or settings.chat
    return (
        f'Please type "{config.affirmative_token}" to proceed or '
        f'"{config.change_keyword} [field name]" to modify a specific field.'
    )


def resolve_field(placeholders: Sequence[Placeholder], reference: str) -> Optional[Placeholder]:
    """按字段名查找占位符.

    不区分大小写：占位符文本包含引用文本，或引用文本包含去掉方括号的占位符
    文本，即视为匹配。多个匹配时取规范顺序中的第一个。

    Args:
        placeholders: 占位符列表
        reference: 用户输入的字段名

    Returns:
        匹配的占位符，没有匹配或引用为空时返回 None
    """
    ref = reference.strip().lower()
    if not ref:
        return None
    for placeholder in placeholders:
        text = placeholder.text.lower()
        if ref in text or re.sub(r"[\[\]]", "", text) in ref:
            return placeholder
    return None


def reduce(
    session: FillSession, text: str, config: Optional[ChatConfig] = None
) -> Tuple[FillSession, Message]:
    """状态转移函数.

    Args:
        session: 当前会话
        text: 用户输入（非空）
        config: 对话配置，默认使用全局配置

    Returns:
        新会话（消息记录不变）和需要回复的消息

    Raises:
        SessionStateError: 会话已完成
    """
    config = config or settings.chat

    if session.phase == Phase.COLLECTING:
        placeholder = session.placeholders[session.index]
        document = session.document.with_value(placeholder.id, text)
        next_index = session.index + 1
        if next_index < len(session.placeholders):
            reply = question(session.placeholders[next_index])
            return replace(session, document=document, index=next_index), Message(ASSISTANT, reply)
        logger.info("所有占位符已填写，进入确认阶段")
        return (
            replace(session, document=document, phase=Phase.CONFIRMING),
            Message(ASSISTANT, summary(document)),
        )

    if session.phase == Phase.EDITING:
        placeholder = session.document.get(session.editing_id)
        document = session.document.with_value(placeholder.id, text)
        reply = f'Updated! I\'ve changed "{placeholder.text}" to "{text}".\n\n{summary(document)}'
        logger.info(f"已修改占位符 {placeholder.id}")
        return (
            replace(session, document=document, phase=Phase.CONFIRMING, editing_id=None),
            Message(ASSISTANT, reply),
        )

    if session.phase == Phase.CONFIRMING:
        lowered = text.lower()
        if config.affirmative_token.lower() in lowered:
            logger.info("用户已确认，填写完成")
            return replace(session, phase=Phase.COMPLETE), Message(ASSISTANT, COMPLETE_MESSAGE)
        keyword = config.change_keyword.lower()
        if keyword in lowered:
            return _request_change(session, lowered.replace(keyword, "", 1))
        return session, Message(ASSISTANT, usage_hint(config))

    raise SessionStateError("The fill session is already complete")


def _request_change(session: FillSession, reference: str) -> Tuple[FillSession, Message]:
    placeholder = resolve_field(session.placeholders, reference)
    if placeholder is None:
        logger.info(f"未找到字段: '{reference.strip()}'")
        return session, Message(ASSISTANT, FIELD_NOT_FOUND_MESSAGE)
    logger.info(f"修改字段: {placeholder.id} ({placeholder.text})")
    return (
        replace(session, phase=Phase.EDITING, editing_id=placeholder.id),
        Message(ASSISTANT, f'What should I put for "{placeholder.text}" instead?'),
    )


def answer(session: FillSession, text: str, config: Optional[ChatConfig] = None) -> FillSession:
    """处理用户输入并记录对话.

    空白输入被忽略，原样返回会话。

    Args:
        session: 当前会话
        text: 用户输入
        config: 对话配置

    Returns:
        新会话
    """
    if not text.strip():
        return session
    if session.is_complete:
        raise SessionStateError("The fill session is already complete")
    value = text.strip()
    new_session, reply = reduce(session, value, config)
    return replace(new_session, messages=session.messages + (Message(USER, value), reply))


def edit_field(session: FillSession, reference: str) -> FillSession:
    """直接按字段名发起修改，仅在确认阶段可用.

    Args:
        session: 当前会话
        reference: 字段名

    Returns:
        找到字段时进入 EDITING，否则留在 CONFIRMING 并记录提示

    Raises:
        SessionStateError: 不在确认阶段
    """
    if session.phase != Phase.CONFIRMING:
        raise SessionStateError(f"Cannot change a field while {session.phase.value}")
    new_session, reply = _request_change(session, reference)
    return replace(new_session, messages=session.messages + (reply,))


def set_value(session: FillSession, placeholder_id: str, value: str) -> FillSession:
    """在任意阶段直接修改占位符的值（预览编辑），不影响会话阶段.

    Raises:
        KeyError: 占位符不存在
    """
    document = session.document.with_value(placeholder_id, value)
    logger.info(f"直接修改占位符 {placeholder_id}")
    return replace(session, document=document)
