"""金额占位符识别器."""

import re
from typing import Iterator

from docfill.data.models import PatternMatch, classify_kind
from docfill.data.placeholder_detector.base_detector import PlaceholderDetector

DOLLAR_PATTERN = re.compile(r"\$\[([^\]]*)\]")


class DollarDetector(PlaceholderDetector):
    """金额占位符识别器，识别 $[_____] 与 $[Purchase Amount]，内部内容可为空."""
    
    def detect(self, text: str) -> Iterator[PatternMatch]:
        for match in DOLLAR_PATTERN.finditer(text):
            full_text = match.group(0)
            yield PatternMatch(
                text=full_text,
                inner=match.group(1),
                start=match.start(),
                kind=classify_kind(full_text),
                description="Please provide a dollar amount",
            )
