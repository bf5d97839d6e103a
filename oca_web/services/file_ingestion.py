from __future__ import annotations

import base64
import mimetypes
from typing import Iterable, List

from oca_web.domain.errors import FileReadError, UnsupportedFileTypeError
from oca_web.domain.models import BillingFile, DocumentPayload

TEXT_MIME_TYPES = {"text/csv", "text/plain"}
BINARY_MIME_TYPES = {"application/pdf", "image/png", "image/jpeg"}
ACCEPTED_MIME_TYPES = TEXT_MIME_TYPES | BINARY_MIME_TYPES

_GENERIC_MIME_TYPES = {"", "application/octet-stream"}


def resolve_mime_type(file_name: str, reported: str) -> str:
    """
    Browsers report an empty or generic type for some uploads;
    fall back to the file extension in that case.
    """
    reported = (reported or "").split(";", 1)[0].strip().lower()
    if reported not in _GENERIC_MIME_TYPES:
        return reported
    guessed, _ = mimetypes.guess_type(file_name or "")
    return (guessed or reported).lower()


def check_supported(files: Iterable[BillingFile]) -> None:
    for f in files:
        if f.mime_type not in ACCEPTED_MIME_TYPES:
            raise UnsupportedFileTypeError(f.mime_type)


def _read_text(f: BillingFile) -> str:
    if not f.data:
        raise FileReadError(f.name)
    try:
        return f.data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise FileReadError(f.name) from e


def to_documents(files: Iterable[BillingFile]) -> List[DocumentPayload]:
    """
    Text files are combined into one CSV document (blank-line separated);
    PDFs and images become one base64 document each.
    Everything is type-checked before anything is read.
    """
    files = list(files)
    check_supported(files)

    texts: List[str] = []
    binaries: List[DocumentPayload] = []
    for f in files:
        if f.mime_type in TEXT_MIME_TYPES:
            texts.append(_read_text(f))
        else:
            if not f.data:
                raise FileReadError(f.name)
            binaries.append(
                DocumentPayload(
                    content=base64.b64encode(f.data).decode("ascii"),
                    mime_type=f.mime_type,
                    is_base64=True,
                )
            )

    documents: List[DocumentPayload] = []
    if texts:
        documents.append(DocumentPayload(content="\n\n".join(texts), mime_type="text/csv"))
    documents.extend(binaries)
    return documents
