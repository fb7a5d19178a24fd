"""法律文书模板填写应用."""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import typer
from loguru import logger

from docfill.data.document_io import DocumentIO
from docfill.data.report_generator import ReportGenerator
from docfill.errors import DocfillError
from docfill.service.fill_session import ASSISTANT, FillSession
from docfill.service.session import SessionService


@dataclass
class ProcessResult:
    """处理结果."""

    output_path: str
    report_path: str
    placeholder_count: int
    success: bool
    filled_count: int = 0
    miss_count: int = 0
    error_message: Optional[str] = None

    @property
    def report(self) -> str:
        """生成结果报告.

        Returns:
            结果报告字符串
        """
        if not self.success:
            return f"Processing failed: {self.error_message}"

        return (
            f"Done!\n"
            f"- Filled {self.filled_count}/{self.placeholder_count} placeholders\n"
            f"- Substitution misses: {self.miss_count}\n"
            f"- Output file: {self.output_path}\n"
            f"- Report file: {self.report_path}"
        )


class DocumentProcessor:
    """模板填写处理器."""

    def __init__(self, service: Optional[SessionService] = None) -> None:
        """初始化模板填写处理器."""
        self.service = service or SessionService()
        self.document_io = DocumentIO()
        self.report_generator = ReportGenerator()
        logger.info("文档处理器已初始化")

    def begin(self, input_path: str) -> FillSession:
        """读取文件并开始会话."""
        source = self.document_io.load_file(input_path)
        return self.service.begin_session(source, Path(input_path).name)

    def process(self, input_path: str, answers: Sequence[str], output_path: Optional[str] = None) -> ProcessResult:
        """按顺序用给定答案填写模板.

        Args:
            input_path: 输入文件路径
            answers: 依次输入的用户回答
            output_path: 输出文件路径，默认与输入文件同目录

        Returns:
            处理结果
        """
        try:
            logger.info(f"开始处理文档: {input_path}")
            session = self.begin(input_path)
            for text in answers:
                if session.is_complete:
                    break
                session = self.service.answer(session, text)
            return self.finish(session, input_path, output_path)

        except (DocfillError, OSError) as e:
            logger.error(f"处理文档时发生错误: {e}")
            return ProcessResult(
                output_path=output_path or "",
                report_path="",
                placeholder_count=0,
                success=False,
                error_message=str(e),
            )

    def finish(self, session: FillSession, input_path: str, output_path: Optional[str] = None) -> ProcessResult:
        """保存回填后的文档和报告.

        Args:
            session: 填写会话
            input_path: 输入文件路径
            output_path: 输出文件路径

        Returns:
            处理结果
        """
        encoded = self.service.download(session)
        if not output_path:
            output_path = str(Path(input_path).parent / encoded.file_name)
        self.document_io.save_bytes(encoded.content, output_path)

        result = self.service.reconstruct(session)
        report_path = Path(output_path).with_suffix(".md")
        document = session.document
        self.report_generator.generate_report(document.file_name, document.placeholders, report_path, result.misses)

        logger.info("文档处理完成")
        filled, total = session.progress
        return ProcessResult(
            output_path=output_path,
            report_path=str(report_path),
            placeholder_count=total,
            filled_count=filled,
            miss_count=len(result.misses),
            success=True,
        )


def parse_values(values: Sequence[str]) -> List[Tuple[str, str]]:
    """解析 "id=值" 形式的参数."""
    pairs = []
    for item in values:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise typer.BadParameter(f"Expected ID=VALUE, got '{item}'")
        pairs.append((key.strip(), value))
    return pairs


# 命令行接口
app = typer.Typer()


@app.command()
def detect(
    input_path: str = typer.Argument(..., help="Template file (.docx or .txt)"),
) -> None:
    """List the placeholders detected in a template."""
    processor = DocumentProcessor()
    try:
        session = processor.begin(input_path)
    except (DocfillError, OSError) as e:
        typer.echo(typer.style(str(e), fg=typer.colors.RED))
        raise typer.Exit(code=1)

    for placeholder in session.placeholders:
        typer.echo(f"{placeholder.id}\t{placeholder.kind.value}\t{placeholder.text}")


@app.command()
def fill(
    input_path: str = typer.Argument(..., help="Template file (.docx or .txt)"),
    output_path: Optional[str] = typer.Option(None, help="Output path, defaults to 'completed_<name>' next to the input"),
) -> None:
    """Fill a template through a guided dialogue on the terminal."""
    processor = DocumentProcessor()
    try:
        session = processor.begin(input_path)
    except (DocfillError, OSError) as e:
        typer.echo(typer.style(str(e), fg=typer.colors.RED))
        raise typer.Exit(code=1)

    shown = 0
    while True:
        for message in session.messages[shown:]:
            if message.role == ASSISTANT:
                typer.echo(typer.style(message.content, fg=typer.colors.CYAN))
        shown = len(session.messages)
        if session.is_complete:
            break
        session = processor.service.answer(session, typer.prompt("You"))

    result = processor.finish(session, input_path, output_path)
    typer.echo(typer.style(result.report, fg=typer.colors.GREEN))


@app.command()
def preview(
    input_path: str = typer.Argument(..., help="Template file (.docx or .txt)"),
    value: List[str] = typer.Option([], "--value", "-v", help="Placeholder value as ID=VALUE, may be repeated"),
) -> None:
    """Print the template with the given placeholder values substituted."""
    processor = DocumentProcessor()
    try:
        session = processor.begin(input_path)
        for placeholder_id, text in parse_values(value):
            session = processor.service.set_value(session, placeholder_id, text)
    except KeyError as e:
        typer.echo(typer.style(f"Unknown placeholder: {e}", fg=typer.colors.RED))
        raise typer.Exit(code=1)
    except (DocfillError, OSError) as e:
        typer.echo(typer.style(str(e), fg=typer.colors.RED))
        raise typer.Exit(code=1)

    typer.echo(processor.service.current_preview(session))


if __name__ == "__main__":
    app()
