"""Text/binary classification shared by the archive and mirror readers."""
from __future__ import annotations

from common.errors import BinaryContentError


def decode_text(data: bytes, path: str) -> str:
    """Decode ``data`` as UTF-8, rejecting anything that is not valid text.

    Raises:
        BinaryContentError: if ``data`` is not well-formed UTF-8.
    """
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise BinaryContentError(f"file appears to be binary: {path}", path=path) from exc
