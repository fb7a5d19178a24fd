"""会话服务，供前端调用的操作接口."""

from typing import Optional

from loguru import logger

from docfill.config.settings import settings
from docfill.data.document_io import DocumentIO, EncodedDocument
from docfill.data.extractor import PlaceholderExtractor
from docfill.data.models import DocumentData
from docfill.data.reconstructor import DocumentReconstructor, ReconstructionResult
from docfill.errors import ExtractionError
from docfill.service import fill_session
from docfill.service.fill_session import FillSession


class SessionService:
    """会话服务.

    串联文本提取、占位符提取、填写对话和文档回填。每次上传生成全新的
    DocumentData，会话之间不共享状态。
    """

    def __init__(
        self,
        extractor: Optional[PlaceholderExtractor] = None,
        reconstructor: Optional[DocumentReconstructor] = None,
        document_io: Optional[DocumentIO] = None,
    ) -> None:
        """初始化会话服务."""
        self.extractor = extractor or PlaceholderExtractor()
        self.reconstructor = reconstructor or DocumentReconstructor()
        self.document_io = document_io or DocumentIO()

    def load_document(self, source: bytes, file_name: str) -> DocumentData:
        """提取文本和占位符.

        Args:
            source: 上传的文件内容
            file_name: 文件名

        Returns:
            文档数据

        Raises:
            ExtractionError: 文本提取失败或未检测到占位符
        """
        logger.info(f"开始处理文档: {file_name} ({len(source)} 字节)")
        text = self.document_io.extract_text(source, file_name)
        logger.debug(f"文档文本长度: {len(text)} 字符")

        placeholders = self.extractor.extract(text)
        if not placeholders:
            sample = text[: settings.chat.sample_length]
            logger.warning(f"未找到任何占位符: {file_name}")
            raise ExtractionError(
                "No placeholders found in your document. Make sure your document contains "
                f'fields like [COMPANY NAME] or Name: ____. Found text sample: "{sample}..."',
                sample=sample,
            )

        return DocumentData(
            original_content=text,
            placeholders=tuple(placeholders),
            file_name=file_name,
            source=source,
        )

    def begin_session(self, source: bytes, file_name: str) -> FillSession:
        """开始新会话."""
        return fill_session.start(self.load_document(source, file_name))

    def restart(self, source: bytes, file_name: str) -> FillSession:
        """丢弃当前会话，用新文档重新开始."""
        logger.info("重新开始会话")
        return self.begin_session(source, file_name)

    def answer(self, session: FillSession, value: str) -> FillSession:
        return fill_session.answer(session, value)

    def edit_field(self, session: FillSession, field_reference: str) -> FillSession:
        return fill_session.edit_field(session, field_reference)

    def set_value(self, session: FillSession, placeholder_id: str, value: str) -> FillSession:
        return fill_session.set_value(session, placeholder_id, value)

    def is_complete(self, session: FillSession) -> bool:
        return session.is_complete

    def reconstruct(self, session: FillSession) -> ReconstructionResult:
        """回填当前会话的文档，包含未能回填的占位符."""
        document = session.document
        return self.reconstructor.reconstruct(document.original_content, document.placeholders)

    def current_preview(self, session: FillSession) -> str:
        """当前预览文本，未填写的占位符保持原样."""
        return self.reconstruct(session).text

    def download(self, session: FillSession) -> EncodedDocument:
        """生成可下载的文档.

        Raises:
            EncodingError: 生成失败，会话数据不受影响，可重试
        """
        encoded = self.document_io.encode_document(self.current_preview(session), session.document.file_name)
        logger.info(f"已生成下载文件: {encoded.file_name} ({encoded.media_type})")
        return encoded


_service: Optional[SessionService] = None


def get_service() -> SessionService:
    global _service
    if _service is None:
        _service = SessionService()
    return _service


def begin_session(source: bytes, file_name: str) -> FillSession:
    return get_service().begin_session(source, file_name)


def restart(source: bytes, file_name: str) -> FillSession:
    return get_service().restart(source, file_name)


def answer(session: FillSession, value: str) -> FillSession:
    return get_service().answer(session, value)


def edit_field(session: FillSession, field_reference: str) -> FillSession:
    return get_service().edit_field(session, field_reference)


def set_value(session: FillSession, placeholder_id: str, value: str) -> FillSession:
    return get_service().set_value(session, placeholder_id, value)


def current_preview(session: FillSession) -> str:
    return get_service().current_preview(session)


def is_complete(session: FillSession) -> bool:
    return get_service().is_complete(session)


def download(session: FillSession) -> EncodedDocument:
    return get_service().download(session)
