"""Text extraction for uploaded documents.

Only text formats are read here; binary office/PDF formats must be converted to text
by the client before upload.
"""
import codecs

from services.errors import ValidationError

BINARY_EXTENSIONS = (".pdf", ".doc", ".docx", ".rtf", ".odt")


def _safe_decode(b: bytes) -> str:
    if b.startswith((codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)):
        return b.decode("utf-16", errors="ignore")
    return b.decode("utf-8-sig", errors="ignore")


def extract_text(data: bytes, filename: str) -> str:
    name = (filename or "").lower()
    if name.endswith(BINARY_EXTENSIONS):
        raise ValidationError(
            f"{filename}: binary documents are not supported, upload plain text instead.", "upload"
        )
    return _safe_decode(data or b"").strip()
