"""文档回填测试."""

import pytest

from docfill.data.extractor import PlaceholderExtractor
from docfill.data.models import Placeholder, PlaceholderKind, classify_kind
from docfill.data.reconstructor import DocumentReconstructor, reconstruct

AGREEMENT = "This Agreement is between [COMPANY NAME] and [INVESTOR NAME]. Amount: $[_____]."


def make_placeholder(id: str, text: str, value=None, **kwargs) -> Placeholder:
    """按文本形态构造占位符."""
    return Placeholder(id=id, text=text, value=value, kind=classify_kind(text), **kwargs)


@pytest.fixture
def reconstructor():
    """回填器."""
    return DocumentReconstructor()


@pytest.fixture
def filled_agreement():
    """已填写的协议占位符."""
    placeholders = PlaceholderExtractor().extract(AGREEMENT)
    values = ["Acme Inc.", "Jane Doe", "$50,000"]
    return [p.with_value(v) for p, v in zip(placeholders, values)]


def test_agreement_scenario(reconstructor, filled_agreement):
    """测试典型协议模板的回填结果."""
    result = reconstructor.reconstruct(AGREEMENT, filled_agreement)

    assert result.text == "This Agreement is between Acme Inc. and Jane Doe. Amount: $50,000."
    assert result.misses == []
    assert result.complete


@pytest.mark.parametrize("reverse", [False, True])
def test_longest_placeholder_first(reconstructor, reverse):
    """测试长占位符优先替换，与列表顺序无关."""
    text = "Between [COMPANY] and [CO] only."
    placeholders = [
        make_placeholder("placeholder_1", "[CO]", "Co-op"),
        make_placeholder("placeholder_2", "[COMPANY]", "Acme"),
    ]
    if reverse:
        placeholders.reverse()

    assert reconstruct(text, placeholders) == "Between Acme and Co-op only."


def test_short_text_inside_longer_placeholder(reconstructor):
    """测试短占位符文本是长占位符子串时不被提前替换."""
    text = "Late Fee: ______\nFee: ______"
    placeholders = [
        make_placeholder("placeholder_1", "Fee: ______", "$10"),
        make_placeholder("placeholder_2", "Late Fee: ______", "$20", field_name="Late Fee"),
    ]

    assert reconstruct(text, placeholders) == "Late Fee: $20\nFee: $10"


def test_signature_field_skips_longer_label(reconstructor):
    """测试字段名不匹配更长字段名的后半段."""
    text = "Signature\nCompany Name: ______\nName:\n"
    placeholder = make_placeholder("placeholder_2", "Name: ____", "Jane", field_name="Name")

    result = reconstructor.reconstruct(text, [placeholder])

    assert result.text == "Signature\nCompany Name: ______\nName: Jane"
    assert result.misses == []


def test_signature_field_keeps_indent_and_numbering(reconstructor):
    """测试字段名前的缩进和编号保留."""
    placeholders = [
        make_placeholder("placeholder_1", "By: ________", "J. Smith", field_name="By"),
        make_placeholder("placeholder_2", "Title: ____", "CEO", field_name="Title"),
    ]

    result = reconstructor.reconstruct("    By: ________\n1. Title: ____", placeholders)

    assert result.text == "    By: J. Smith\n1. Title: CEO"


def test_reconstruct_is_idempotent(filled_agreement):
    """测试对回填结果再次回填不再变化."""
    once = reconstruct(AGREEMENT, filled_agreement)

    assert reconstruct(once, filled_agreement) == once


def test_reconstruct_is_idempotent_with_signature_fields():
    """测试签名区字段回填后再次回填不再变化."""
    text = "COMPANY:\nBy:\n________________\nName:\nTitle:"
    placeholders = [
        p.with_value(v)
        for p, v in zip(PlaceholderExtractor().extract(text), ["J. Smith", "John Smith", "CEO"])
    ]

    once = reconstruct(text, placeholders)

    assert once == "COMPANY:\nBy: J. Smith\nName: John Smith\nTitle: CEO"
    assert reconstruct(once, placeholders) == once


def test_unfilled_placeholders_are_preserved(filled_agreement):
    """测试未填写的占位符保持原样."""
    placeholders = list(filled_agreement)
    placeholders[1] = placeholders[1].with_value(None)
    placeholders[2] = placeholders[2].with_value("")

    assert reconstruct(AGREEMENT, placeholders) == (
        "This Agreement is between Acme Inc. and [INVESTOR NAME]. Amount: $[_____]."
    )


def test_signature_field_on_next_line(reconstructor):
    """测试下划线在下一行的签名字段."""
    placeholder = make_placeholder("placeholder_1", "By: ____", "J. Smith", field_name="By")

    result = reconstructor.reconstruct("By:\n________________", [placeholder])

    assert result.text == "By: J. Smith"
    assert result.misses == []


def test_signature_field_exact_match_first(reconstructor):
    """测试签名字段优先精确匹配."""
    placeholder = make_placeholder("placeholder_1", "Name: ____", "Jane Doe", field_name="Name")

    result = reconstructor.reconstruct("Name: ____\nName: ______", [placeholder])

    assert result.text == "Name: Jane Doe\nName: ______"


def test_signature_field_case_insensitive(reconstructor):
    """测试签名字段宽松匹配不区分大小写."""
    placeholder = make_placeholder("placeholder_1", "By: ____", "J. Smith", field_name="By")

    assert reconstructor.reconstruct("BY: ___\n", [placeholder]).text == "By: J. Smith\n"


def test_signature_field_blank_line(reconstructor):
    """测试冒号后为空白的签名字段."""
    placeholder = make_placeholder("placeholder_1", "Title: ____", "CEO", field_name="Title")

    result = reconstructor.reconstruct("Title:   \nAddress: 1 Main St", [placeholder])

    assert result.text == "Title: CEO\nAddress: 1 Main St"


def test_signature_field_name_without_stored_label(reconstructor):
    """测试未记录字段名时从文本推导."""
    placeholder = Placeholder(id="placeholder_1", text="Email: ____", value="a@b.co", kind=PlaceholderKind.SIGNATURE_FIELD)

    assert reconstructor.reconstruct("Email:\nPhone: 555", [placeholder]).text == "Email: a@b.co\nPhone: 555"


def test_substitution_miss_is_reported(reconstructor, filled_agreement):
    """测试找不到的占位符被记录，其它占位符照常回填."""
    missing = make_placeholder("placeholder_9", "[GOVERNING LAW]", "Delaware")
    signature = make_placeholder("placeholder_10", "Title: ____", "CEO", field_name="Title")

    result = reconstructor.reconstruct(AGREEMENT, list(filled_agreement) + [missing, signature])

    assert result.text == "This Agreement is between Acme Inc. and Jane Doe. Amount: $50,000."
    assert [m.placeholder_id for m in result.misses] == ["placeholder_9", "placeholder_10"]
    assert not result.complete


def test_only_first_occurrence_replaced():
    """测试每个占位符只替换第一处."""
    placeholder = make_placeholder("placeholder_1", "[PARTY]", "Acme")

    assert reconstruct("[PARTY] and [PARTY]", [placeholder]) == "Acme and [PARTY]"


def test_value_is_inserted_literally():
    """测试值中的反斜杠和分组引用不被解释."""
    placeholders = [
        make_placeholder("placeholder_1", "[PATH]", r"C:\new\1"),
        make_placeholder("placeholder_2", "By: ____", r"\g<0> Smith", field_name="By"),
    ]

    assert reconstruct("[PATH]\nBy:\n_____", placeholders) == "C:\\new\\1\nBy: \\g<0> Smith"


def test_generic_and_underscore_kinds_replace_literally():
    """测试通用与下划线类型按字面替换."""
    placeholders = [
        make_placeholder("placeholder_1", "Fax:_____", "555-0100"),
        make_placeholder("placeholder_2", "Phone:___", "555-0199"),
    ]
    assert placeholders[0].kind == PlaceholderKind.UNDERSCORE_GENERIC
    assert placeholders[1].kind == PlaceholderKind.GENERIC

    assert reconstruct("Fax:_____ Phone:___", placeholders) == "555-0100 555-0199"
