"""文档读写测试."""

import io

import pytest
from docx import Document

from docfill.data.document_io import DocumentIO, escape_line, is_word_file
from docfill.errors import EncodingError, ExtractionError


def test_extract_text_decodes_utf8_with_bom():
    """测试 UTF-8 文本（含 BOM）."""
    source = "\ufeffName: ____\n".encode("utf-8")

    assert DocumentIO.extract_text(source, "form.txt") == "Name: ____\n"


def test_extract_text_normalizes_newlines():
    """测试 CRLF 和 CR 换行统一为 LF."""
    source = b"INVESTOR:\r\nName:\r\nTitle:\rEmail:\r\n"

    assert DocumentIO.extract_text(source, "form.txt") == "INVESTOR:\nName:\nTitle:\nEmail:\n"


def test_extract_text_rejects_binary():
    """测试无法解码的文件."""
    with pytest.raises(ExtractionError):
        DocumentIO.extract_text(b"\xff\xfe\xfa\x00", "legacy.doc")


def test_extract_text_includes_tables():
    """测试 .docx 表格单元格文本排在段落之后."""
    doc = Document()
    doc.add_paragraph("Schedule A")
    table = doc.add_table(rows=1, cols=2)
    table.cell(0, 0).text = "Investor"
    table.cell(0, 1).text = "[INVESTOR NAME]"
    buf = io.BytesIO()
    doc.save(buf)

    text = DocumentIO.extract_text(buf.getvalue(), "schedule.DOCX")

    assert text == "Schedule A\nInvestor\n[INVESTOR NAME]"


def test_escape_line():
    """测试 HTML 转义和制表符展开."""
    assert escape_line("A & B <c>\td") == "A &amp; B &lt;c&gt;&nbsp;&nbsp;&nbsp;&nbsp;d"


def test_encode_word_document():
    """测试每行生成一个段落."""
    encoded = DocumentIO.encode_document("Line one\nLine two", "Template.docx")
    html = encoded.content.decode("utf-8")

    assert encoded.file_name == "completed_Template.doc"
    assert "<p>Line one</p><p>Line two</p>" in html
    assert 'xmlns:w="urn:schemas-microsoft-com:office:word"' in html


def test_encode_text_document():
    """测试纯文本下载."""
    encoded = DocumentIO.encode_document("Done", "notes.md")

    assert encoded.content == b"Done"
    assert encoded.media_type == "text/plain"
    assert encoded.file_name == "completed_notes.txt"


def test_is_word_file():
    """测试按扩展名判断 Word 文件."""
    assert is_word_file("a.DOCX")
    assert is_word_file("b.doc")
    assert not is_word_file("c.txt")


def test_load_and_save(tmp_path):
    """测试文件读写."""
    path = tmp_path / "nested" / "out.txt"
    DocumentIO.save_bytes(b"content", path)

    assert DocumentIO.load_file(path) == b"content"

    with pytest.raises(FileNotFoundError):
        DocumentIO.load_file(tmp_path / "missing.txt")


def test_save_failure(tmp_path):
    """测试保存失败."""
    with pytest.raises(EncodingError):
        DocumentIO.save_bytes(b"content", tmp_path)
