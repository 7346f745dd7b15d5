from __future__ import annotations

from io import BytesIO
import logging
from zipfile import ZipFile

from docx import Document
import pytest

from docproof.deadline import Deadline
from docproof.kinds import DOCX_MEDIA_TYPE, SPREADSHEET, TEXT, WORD_PROCESSING, XLSX_MEDIA_TYPE
from docproof.reconcile import Reconciler
from docproof.reconcile.models import (
    STRATEGY_EXACT_MATCH,
    STRATEGY_LEDGER,
    STRATEGY_PLAIN,
    STRATEGY_SPREADSHEET,
)
from docproof.rules import Rule, RuleEngine


def test_docx_patch_preserves_untouched_parts(make_docx, paragraph, part_of) -> None:
    original = make_docx(paragraph("こんにちは。元気ですか。"))

    result = Reconciler().patch(
        original,
        "こんにちは。元気ですか。",
        "こんにちは、元気ですか。",
        [{"original": "こんにちは。", "corrected": "こんにちは、"}],
        WORD_PROCESSING,
    )

    assert result.success is True
    assert result.strategy == STRATEGY_EXACT_MATCH
    assert result.kind == WORD_PROCESSING
    assert result.media_type == DOCX_MEDIA_TYPE
    assert result.error is None
    assert part_of(result.content, "word/styles.xml") == part_of(original, "word/styles.xml")
    assert "こんにちは、元気ですか。".encode("utf-8") in part_of(result.content, "word/document.xml")


def test_docx_patch_falls_back_to_ledger_and_still_serializes(make_docx, paragraph) -> None:
    original = make_docx(paragraph("見て下", "さい。") + paragraph("読んで下さい。"))
    engine = RuleEngine([Rule(incorrect_forms=("下さい",), correct_form="ください")])
    proofread = engine.proofread("見て下 さい。 読んで下さい。")

    result = Reconciler().patch(
        original, proofread.original_text, proofread.corrected_text, proofread.changes, WORD_PROCESSING
    )

    assert result.success is True
    assert result.strategy == STRATEGY_LEDGER
    paragraphs = [item.text for item in Document(BytesIO(result.content)).paragraphs]
    assert paragraphs == ["見て下さい。", "読んでください。"]


def test_xlsx_patch_reports_spreadsheet_strategy(make_xlsx, part_of) -> None:
    original = make_xlsx(['<row r="1"><c r="A1" t="s"><v>0</v></c></row>'], ["氏名　山田"])

    result = Reconciler().patch(original, "", "", [{"original": "　", "corrected": " "}], SPREADSHEET)

    assert result.success is True
    assert result.strategy == STRATEGY_SPREADSHEET
    assert result.media_type == XLSX_MEDIA_TYPE
    assert "氏名 山田".encode("utf-8") in part_of(result.content, "xl/sharedStrings.xml")


def test_missing_original_renders_plain_document() -> None:
    result = Reconciler().patch(None, "", "一行目\n\n二行目", [], WORD_PROCESSING)

    assert result.success is True
    assert result.strategy == STRATEGY_PLAIN
    assert result.kind == WORD_PROCESSING
    paragraphs = [item.text for item in Document(BytesIO(result.content)).paragraphs if item.text]
    assert paragraphs == ["一行目", "二行目"]


def test_text_kind_is_regenerated_as_docx() -> None:
    result = Reconciler().patch(b"plain bytes", "plain", "plain text", [], TEXT)

    assert result.strategy == STRATEGY_PLAIN
    assert result.media_type == DOCX_MEDIA_TYPE
    with ZipFile(BytesIO(result.content)) as archive:
        assert "word/document.xml" in archive.namelist()


def test_structured_fallback_layout_is_configurable() -> None:
    result = Reconciler(fallback_layout="structured").patch(None, "", "a\tb", [], None)

    assert len(Document(BytesIO(result.content)).tables) == 1


def test_corrupt_original_returns_failure_without_content(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        result = Reconciler().patch(b"not a zip", "a", "b", [], WORD_PROCESSING)

    assert result.success is False
    assert result.content is None
    assert result.error
    assert "Regeneration failed" in caplog.text


def test_missing_required_part_returns_failure(make_docx) -> None:
    result = Reconciler().patch(make_docx("", include_document=False), "a", "b", [], WORD_PROCESSING)

    assert result.success is False
    assert "word/document.xml" in (result.error or "")


def test_expired_deadline_aborts_regeneration(make_docx, paragraph) -> None:
    expired = Deadline(expires_at=0.0, timeout_seconds=5.0)

    result = Reconciler().patch(make_docx(paragraph("a")), "a", "b", [], WORD_PROCESSING, deadline=expired)

    assert result.success is False
    assert "Timed out after 5s" in (result.error or "")


def test_invalid_compression_level_is_rejected() -> None:
    with pytest.raises(ValueError):
        Reconciler(compression_level=10)


def test_plain_render_strips_characters_illegal_in_xml() -> None:
    result = Reconciler().patch(None, "", "前\ufffeさ\uffffい", [], TEXT)

    assert result.success is True
    assert result.strategy == STRATEGY_PLAIN
    paragraphs = [item.text for item in Document(BytesIO(result.content)).paragraphs if item.text]
    assert paragraphs == ["前さい"]


def test_ledger_value_with_noncharacter_is_sanitized(make_docx, paragraph, part_of) -> None:
    original = make_docx(paragraph("見て", "下さい"))

    result = Reconciler().patch(
        original, "別の本文", "別の本文", [{"original": "下さい", "corrected": "ください\uffff"}], WORD_PROCESSING
    )

    assert result.success is True
    assert result.strategy == STRATEGY_LEDGER
    assert "ください<".encode("utf-8") in part_of(result.content, "word/document.xml")


def test_damaged_deflate_stream_returns_failure(make_docx, paragraph, damage_part) -> None:
    body = "".join(paragraph(f"第{index}段落の本文です。") for index in range(40))
    original = damage_part(make_docx(body), "word/document.xml")

    result = Reconciler().patch(original, "a", "b", [], WORD_PROCESSING)

    assert result.success is False
    assert result.content is None
    assert result.error


def test_document_with_field_codes_only_is_returned_unchanged(make_docx, part_of) -> None:
    original = make_docx("<w:p><w:r><w:instrText>PAGE</w:instrText></w:r></w:p>")

    result = Reconciler().patch(
        original, "PAGE", "PAGE2", [{"original": "PAGE", "corrected": "PAGE2"}], WORD_PROCESSING
    )

    assert result.success is True
    assert result.strategy == STRATEGY_LEDGER
    assert part_of(result.content, "word/document.xml") == part_of(original, "word/document.xml")
