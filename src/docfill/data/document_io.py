"""文档读写操作."""

import io
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from docx import Document
from loguru import logger

from docfill.errors import EncodingError, ExtractionError

WORD_EXTENSIONS = (".docx", ".doc")
WORD_MEDIA_TYPE = "application/msword"
TEXT_MEDIA_TYPE = "text/plain"

WORD_HTML_TEMPLATE = """<!DOCTYPE html>
<html xmlns:o="urn:schemas-microsoft-com:office:office" xmlns:w="urn:schemas-microsoft-com:office:word">
<head>
  <meta charset="utf-8">
  <title>Legal Document</title>
  <!--[if gte mso 9]>
  <xml>
    <w:WordDocument>
      <w:View>Print</w:View>
      <w:Zoom>90</w:Zoom>
      <w:DoNotPromptForConvert/>
      <w:DoNotShowInsertionsAndDeletions/>
    </w:WordDocument>
  </xml>
  <![endif]-->
  <style>
    body {{ font-family: 'Times New Roman', serif; font-size: 12pt; line-height: 1.5; margin: 1in; color: black; }}
    p {{ margin: 0 0 12pt 0; }}
  </style>
</head>
<body>
{body}
</body>
</html>"""


@dataclass(frozen=True)
class EncodedDocument:
    """可下载的文档."""

    content: bytes
    media_type: str
    file_name: str


def is_word_file(file_name: str) -> bool:
    return file_name.lower().endswith(WORD_EXTENSIONS)


class DocumentIO:
    """文档读写操作类."""

    @staticmethod
    def load_file(file_path: Union[str, Path]) -> bytes:
        """读取文件内容.

        Args:
            file_path: 文件路径

        Returns:
            文件字节内容

        Raises:
            FileNotFoundError: 文件不存在
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"文件不存在: {file_path}")
        content = file_path.read_bytes()
        logger.info(f"已读取文件: {file_path} ({len(content)} 字节)")
        return content

    @staticmethod
    def save_bytes(content: bytes, output_path: Union[str, Path]) -> None:
        """保存文件.

        Args:
            content: 文件内容
            output_path: 输出文件路径

        Raises:
            EncodingError: 保存失败
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            output_path.write_bytes(content)
            logger.info(f"已保存文档: {output_path}")
        except OSError as e:
            logger.error(f"保存文档失败: {e}")
            raise EncodingError(f"保存文档失败: {e}")

    @staticmethod
    def extract_text(source: bytes, file_name: str) -> str:
        """提取文档纯文本.

        .docx 使用 python-docx 读取段落和表格文本，其它文件按 UTF-8 文本读取。
        换行统一为 LF。

        Args:
            source: 文件字节内容
            file_name: 文件名，用于判断类型

        Returns:
            文档纯文本

        Raises:
            ExtractionError: 文件损坏或无法解析
        """
        if file_name.lower().endswith(".docx"):
            try:
                doc = Document(io.BytesIO(source))
            except Exception as e:
                logger.error(f"加载文档失败: {e}")
                raise ExtractionError(f"Failed to process document: {e}")
            return normalize_newlines(DocumentIO.extract_document_text(doc))

        try:
            return normalize_newlines(source.decode("utf-8-sig"))
        except UnicodeDecodeError as e:
            logger.error(f"读取文本失败: {e}")
            raise ExtractionError(f"Failed to process document: {e}")

    @staticmethod
    def extract_document_text(doc: Document) -> str:
        """提取文档中的所有文本.

        Args:
            doc: Document对象

        Returns:
            段落文本在前，表格单元格文本在后，以换行连接
        """
        text = [para.text for para in doc.paragraphs]
        for table in doc.tables:
            for row in table.rows:
                for cell in row.cells:
                    text.extend(para.text for para in cell.paragraphs)
        return "\n".join(text)

    @staticmethod
    def encode_document(final_text: str, file_name: str) -> EncodedDocument:
        """生成可下载的文档.

        Word 源文件输出 Word 可打开的 HTML（.doc），每行一个段落；
        其它源文件输出纯文本。

        Args:
            final_text: 回填后的文本
            file_name: 原始文件名

        Returns:
            可下载的文档

        Raises:
            EncodingError: 生成失败
        """
        stem = Path(file_name).stem or "document"
        try:
            if is_word_file(file_name):
                body = "".join(f"<p>{escape_line(line)}</p>" for line in final_text.split("\n"))
                content = WORD_HTML_TEMPLATE.format(body=body).encode("utf-8")
                return EncodedDocument(content, WORD_MEDIA_TYPE, f"completed_{stem}.doc")
            return EncodedDocument(final_text.encode("utf-8"), TEXT_MEDIA_TYPE, f"completed_{stem}.txt")
        except (UnicodeEncodeError, ValueError) as e:
            logger.error(f"生成下载文件失败: {e}")
            raise EncodingError(f"Failed to encode document: {e}")


def normalize_newlines(text: str) -> str:
    """将 CRLF 和单独的 CR 换行统一为 LF."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def escape_line(line: str) -> str:
    """转义 HTML 保留字符，制表符展开为四个不换行空格."""
    return (
        line.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace("\t", "&nbsp;&nbsp;&nbsp;&nbsp;")
    )
