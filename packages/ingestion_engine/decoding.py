"""
Byte-level decoding of uploaded statements.

OFX 1.x files carry a plain-text header (``CHARSET:1252``) and OFX 2.x files
an XML prolog (``encoding="UTF-8"``). Brazilian banks commonly export
Windows-1252 without declaring it, so decoding falls back through a list of
encodings and never fails.
"""

import codecs
import logging
import re
from typing import Optional

logger = logging.getLogger(__name__)

FALLBACK_ENCODINGS = ["utf-8", "cp1252", "latin-1"]

# OFX 1.x CHARSET values -> Python codecs
_OFX_CHARSETS = {
    "1252": "cp1252",
    "WINDOWS-1252": "cp1252",
    "8859-1": "latin-1",
    "ISO-8859-1": "latin-1",
    "UTF-8": "utf-8",
    "UTF8": "utf-8",
}

# Declarations that do not name a usable charset
_UNINFORMATIVE = {"NONE", "USASCII", "US-ASCII"}

# Only the start of the file is inspected
_HEADER_SCAN_BYTES = 512

# Decoded text must contain one of these for a declared encoding to be trusted
_OFX_MARKERS = ("<OFX", "<STMTTRN")

_RE_CHARSET = re.compile(rb"^\s*CHARSET:\s*([A-Za-z0-9_-]+)", re.MULTILINE)
_RE_SGML_ENCODING = re.compile(rb"^\s*ENCODING:\s*([A-Za-z0-9_-]+)", re.MULTILINE)
_RE_XML_ENCODING = re.compile(rb"<\?xml[^>]*encoding=[\"']([A-Za-z0-9_.-]+)[\"']")


def detect_declared_encoding(raw: bytes) -> Optional[str]:
    """Return the Python codec declared in the statement header, if any."""
    head = raw[:_HEADER_SCAN_BYTES]

    match = _RE_XML_ENCODING.search(head)
    if match:
        return _lookup(match.group(1).decode("ascii").upper())

    match = _RE_CHARSET.search(head)
    if match:
        declared = _lookup(match.group(1).decode("ascii").upper())
        if declared:
            return declared

    match = _RE_SGML_ENCODING.search(head)
    if match:
        return _lookup(match.group(1).decode("ascii").upper())

    return None

def _lookup(name: str) -> Optional[str]:
    if name in _UNINFORMATIVE:
        return None
    if name in _OFX_CHARSETS:
        return _OFX_CHARSETS[name]
    try:
        info = codecs.lookup(name)
    except LookupError:
        return None
    # bytes-to-bytes codecs (hex, base64, rot13) cannot produce text
    if not getattr(info, "_is_text_encoding", True):
        return None
    return info.name


def _looks_like_ofx(text: str) -> bool:
    return any(marker in text for marker in _OFX_MARKERS)


def decode_statement(raw: bytes) -> str:
    """
    Decode statement bytes to text.

    Tries the declared encoding first, then utf-8, cp1252 and latin-1.
    A declared encoding is only kept when the decoded text still contains
    OFX markup. latin-1 maps every byte, so this always returns.
    """
    if raw.startswith(codecs.BOM_UTF8):
        return raw[len(codecs.BOM_UTF8) :].decode("utf-8", errors="replace")

    declared = detect_declared_encoding(raw)
    if declared:
        try:
            text = raw.decode(declared)
        except (UnicodeDecodeError, LookupError):
            logger.debug(f"Statement is not valid {declared} as declared, trying fallbacks")
        else:
            if _looks_like_ofx(text):
                return text
            logger.warning(f"Declared encoding {declared} yields no OFX markup, ignoring it")

    for encoding in FALLBACK_ENCODINGS:
        try:
            return raw.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            logger.debug(f"Statement is not valid {encoding}, trying next encoding")
            continue

    # Unreachable while latin-1 is in the fallback list
    return raw.decode("latin-1", errors="replace")
