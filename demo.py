from pathlib import Path

from loguru import logger

from docfill.app.processor import DocumentProcessor

TEMPLATE = """SAFE (Simple Agreement for Future Equity)

This Agreement is between [COMPANY NAME] and [INVESTOR NAME].
Purchase Amount: $[_____________]

IN WITNESS WHEREOF, the undersigned have caused this agreement to be duly executed.

COMPANY:
By:
________________
Name:
Title:
"""

logger.info("运行示例")

input_path = Path("output/safe_template.txt")
input_path.parent.mkdir(parents=True, exist_ok=True)
input_path.write_text(TEMPLATE, encoding="utf-8")

processor = DocumentProcessor()
result = processor.process(
    str(input_path),
    answers=["Acme Inc.", "Jane Doe", "$50,000", "J. Smith", "John Smith", "CEO", "yes"],
)

print(result.report)
