"""占位符提取测试."""

from typing import Iterator

import pytest

from docfill.data.extractor import PlaceholderExtractor, extract_placeholders
from docfill.data.models import PatternMatch, PlaceholderKind
from docfill.data.placeholder_detector import PlaceholderDetector

AGREEMENT = "This Agreement is between [COMPANY NAME] and [INVESTOR NAME]. Amount: $[_____]."


class FixedDetector(PlaceholderDetector):
    """返回固定匹配的识别器."""

    def __init__(self, *matches: PatternMatch):
        self.matches = matches

    def detect(self, text: str) -> Iterator[PatternMatch]:
        return iter(self.matches)


@pytest.fixture
def extractor():
    """默认提取器."""
    return PlaceholderExtractor()


def test_extract_agreement(extractor):
    """测试典型协议模板的提取结果."""
    placeholders = extractor.extract(AGREEMENT)

    assert [p.text for p in placeholders] == ["[COMPANY NAME]", "[INVESTOR NAME]", "$[_____]"]
    assert [p.id for p in placeholders] == ["placeholder_1", "placeholder_2", "placeholder_3"]
    assert [p.kind for p in placeholders] == [
        PlaceholderKind.BRACKETED,
        PlaceholderKind.BRACKETED,
        PlaceholderKind.DOLLAR_AMOUNT,
    ]
    assert all(p.value is None for p in placeholders)


def test_repeated_field_keeps_each_position(extractor):
    """测试同一文本出现在不同位置时各自成为一个占位符."""
    placeholders = extractor.extract("Intro [A] middle [A][B] end")

    assert [(p.text, p.source_position) for p in placeholders] == [("[A]", 6), ("[A]", 17), ("[B]", 20)]
    assert len({p.id for p in placeholders}) == 3


def test_order_is_detector_priority_then_position(extractor):
    """测试规范顺序：识别器优先级优先于文档位置."""
    placeholders = extractor.extract("Name: ______ then $[___] then [Title]")

    assert [p.text for p in placeholders] == ["[Title]", "$[___]", "Name: ______"]
    assert placeholders[0].id == "placeholder_1"


def test_same_span_from_two_passes_is_deduplicated(extractor):
    """测试签名字段行和下划线行指向同一字段时只保留一个."""
    placeholders = extractor.extract("Signature\nBy:\n__________\n")

    assert [(p.text, p.source_position) for p in placeholders] == [("By: ____", 10)]
    assert placeholders[0].field_name == "By"


def test_same_span_from_two_detectors_is_deduplicated():
    """测试不同识别器在同一位置产出相同文本时只保留先到的一个."""
    first = PatternMatch("[X]", "X", 4, PlaceholderKind.BRACKETED, "first")
    second = PatternMatch("[X]", "X", 4, PlaceholderKind.BRACKETED, "second")
    other = PatternMatch("[X]", "X", 9, PlaceholderKind.BRACKETED, "other")
    extractor = PlaceholderExtractor(detectors=[FixedDetector(first), FixedDetector(second, other)])

    placeholders = extractor.extract("any text")

    assert [(p.description, p.source_position) for p in placeholders] == [("first", 4), ("other", 9)]
    assert [p.id for p in placeholders] == ["placeholder_1", "placeholder_2"]


def test_no_placeholders(extractor):
    """测试没有占位符时返回空列表."""
    assert extractor.extract("A plain paragraph with no fields.") == []


def test_extraction_is_deterministic(extractor):
    """测试同一输入多次提取结果一致."""
    text = "Signature\n[COMPANY NAME]\nBy:\n________\nName:\nAmount $[__]"

    assert extractor.extract(text) == extractor.extract(text)
    assert extract_placeholders(text) == extractor.extract(text)
