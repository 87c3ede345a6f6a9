from __future__ import annotations

from pathlib import Path

import pytest

from pdf_signer.components import (
    AssemblyError,
    DecodeError,
    ErrorHandler,
    FileHandler,
    display_name_from_filename,
    signed_filename,
)
from pdf_signer.variables import ERR_INVALID_PDF, ERR_PDF_WRITE_FAILED, PATH_OUTPUT_DIR


@pytest.mark.parametrize(
    "filename,expected",
    [
        ("doc.pdf", "doc"),
        ("a.b.pdf", "a.b"),
        ("noext", "noext"),
        ("/tmp/dir.v2/report.PDF", "report"),
    ],
)
def test_display_name_strips_last_extension(filename, expected):
    assert display_name_from_filename(filename) == expected


def test_signed_filename():
    assert signed_filename("doc") == "doc_signed.pdf"


def test_signed_output_path_whole_document(tmp_path):
    out = FileHandler.signed_output_path("invoice", output_dir=tmp_path)
    assert out == tmp_path / "invoice_signed.pdf"


def test_signed_output_path_single_page(tmp_path):
    out = FileHandler.signed_output_path("invoice", output_dir=tmp_path / "sub", page_number=3)
    assert out.name == "invoice Page 3_signed.pdf"
    assert out.parent.is_dir()


def test_signed_output_path_default_dir():
    out = FileHandler.signed_output_path("x")
    assert out.parent == PATH_OUTPUT_DIR


def test_error_codes_and_format():
    err = DecodeError("bad")
    assert err.err_code == ERR_INVALID_PDF
    assert str(err) == ErrorHandler.format_error(ERR_INVALID_PDF, "bad")
    assert AssemblyError("x").err_code == ERR_PDF_WRITE_FAILED
    assert AssemblyError("x", err_code=42).err_code == 42


def test_validate_readable_file_missing(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        FileHandler.validate_readable_file(tmp_path / "missing.pdf")
