"""报告生成器."""

from pathlib import Path
from typing import Iterable, Sequence, Union

from loguru import logger

from docfill.data.models import Placeholder
from docfill.data.reconstructor import SubstitutionMiss
from docfill.errors import EncodingError


class ReportGenerator:
    """报告生成器."""

    def render(self, file_name: str, placeholders: Sequence[Placeholder], misses: Iterable[SubstitutionMiss] = ()) -> str:
        """生成 markdown 格式的填写报告.

        Args:
            file_name: 原始文件名
            placeholders: 占位符列表
            misses: 未能回填的占位符

        Returns:
            报告文本
        """
        filled = sum(1 for p in placeholders if p.is_filled)
        lines = [
            f"# Fill report: {file_name}",
            "",
            f"{filled}/{len(placeholders)} placeholders filled",
            "",
        ]
        for i, ph in enumerate(placeholders, 1):
            lines.append(f"## Placeholder {i}: {ph.text}")
            lines.append("")
            lines.append(f"- Kind: {ph.kind.value}")
            lines.append(f"- Position: {ph.source_position}")
            lines.append(f"- Prompt: {ph.description}")
            lines.append(f"- Value: {ph.value if ph.is_filled else 'not filled'}")
            lines.append("")

        misses = list(misses)
        if misses:
            lines.append("## Substitution misses")
            lines.append("")
            for miss in misses:
                lines.append(f"- {miss.text} ({miss.placeholder_id}): \"{miss.value}\" could not be placed")
            lines.append("")
        return "\n".join(lines)

    def generate_report(
        self,
        file_name: str,
        placeholders: Sequence[Placeholder],
        output_path: Union[str, Path],
        misses: Iterable[SubstitutionMiss] = (),
    ) -> None:
        """生成处理报告并写入文件.

        Args:
            file_name: 原始文件名
            placeholders: 占位符列表
            output_path: 输出文件路径
            misses: 未能回填的占位符
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(output_path, "w", encoding="utf-8") as f:
                f.write(self.render(file_name, placeholders, misses))
            logger.info(f"已生成处理报告: {output_path}")
        except OSError as e:
            logger.error(f"生成处理报告失败: {e}")
            raise EncodingError(f"生成处理报告失败: {e}")
