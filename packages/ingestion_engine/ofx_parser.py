"""
OFX Statement Parser - reads OFX bank statements into typed transactions.

Supports: OFX 1.x (SGML, unclosed scalar tags) and OFX 2.x (XML) bodies.
Features: header extraction (bank, account, period), <STMTTRN> block
          scanning, comma-decimal amounts, degrade-to-default on bad fields.

The parser never raises for malformed text. Missing or unparseable fields
fall back to their defaults and blocks without a posting date or amount
are skipped.
"""

import logging
import math
import time
import uuid
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

# Header tags
TAG_ORG = "ORG"
TAG_ACCTID = "ACCTID"
TAG_DTSTART = "DTSTART"
TAG_DTEND = "DTEND"

# Transaction block tags
TAG_DTPOSTED = "DTPOSTED"
TAG_TRNAMT = "TRNAMT"
TAG_FITID = "FITID"
TAG_MEMO = "MEMO"
TAG_NAME = "NAME"

BLOCK_OPEN = "<STMTTRN>"
BLOCK_CLOSE = "</STMTTRN>"

# Header values run to the next tag; block values also stop at end of line.
HEADER_TERMINATORS = "<"
BLOCK_TERMINATORS = "<\n"

DEFAULT_DESCRIPTION = "Sem descrição"
SYNTHETIC_ID_PREFIX = "auto"


class Direction(str, Enum):
    """Money flow of a transaction relative to the account."""

    CREDIT = "credit"
    DEBIT = "debit"


@dataclass
class Transaction:
    """A single posted transaction from a statement."""

    fit_id: str
    date: date
    amount: float  # always >= 0, sign lives in direction
    description: str
    direction: Direction

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fit_id": self.fit_id,
            "date": self.date.isoformat(),
            "amount": self.amount,
            "description": self.description,
            "direction": self.direction.value,
        }


@dataclass
class StatementResult:
    """Everything extracted from one statement document."""

    bank_name: str = ""
    account_number: str = ""
    period_start: Optional[date] = None
    period_end: Optional[date] = None
    transactions: List[Transaction] = field(default_factory=list)
    skipped: int = 0  # blocks that produced no transaction

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bank_name": self.bank_name,
            "account_number": self.account_number,
            "period_start": self.period_start.isoformat() if self.period_start else None,
            "period_end": self.period_end.isoformat() if self.period_end else None,
            "transactions": [t.to_dict() for t in self.transactions],
            "skipped": self.skipped,
        }


def _value_end(text: str, start: int, terminators: str) -> int:
    """Index of the first terminator at or after start (len(text) if none).

    Walks forward only as far as the value itself, so scanning many tag
    occurrences stays linear in the length of the text.
    """
    end = start
    length = len(text)
    while end < length and text[end] not in terminators:
        end += 1
    return end


def find_tag_value(
    text: str, tag: str, terminators: str = HEADER_TERMINATORS
) -> Optional[str]:
    """
    Return the raw value of the first non-empty occurrence of <tag>.

    The value starts right after the tag and runs up to the first
    terminator character. Occurrences with nothing before the terminator
    are passed over. The value is returned untrimmed.
    """
    marker = f"<{tag}>"
    pos = text.find(marker)
    while pos != -1:
        value_start = pos + len(marker)
        value_end = _value_end(text, value_start, terminators)
        if value_end > value_start:
            return text[value_start:value_end]
        pos = text.find(marker, value_start)
    return None


def iter_blocks(text: str, open_marker: str = BLOCK_OPEN, close_marker: str = BLOCK_CLOSE):
    """
    Yield the inner text of each open/close delimited block, left to right.

    Blocks do not overlap: scanning resumes after each closing marker. An
    opening marker with no closing marker after it ends the scan.
    """
    pos = 0
    while True:
        start = text.find(open_marker, pos)
        if start == -1:
            return
        inner_start = start + len(open_marker)
        end = text.find(close_marker, inner_start)
        if end == -1:
            return
        yield text[inner_start:end]
        pos = end + len(close_marker)


def _strip_timezone(value: str) -> str:
    # "20240315120000[-3:BRT]" -> "20240315120000"
    open_idx = value.find("[")
    if open_idx == -1:
        return value
    close_idx = value.rfind("]")
    if close_idx < open_idx:
        return value
    return value[:open_idx] + value[close_idx + 1 :]


def parse_ofx_date(value: Optional[str]) -> Optional[date]:
    """
    Parse an OFX timestamp (YYYYMMDD[HHMMSS[.XXX]][[offset:TZ]]) to a date.

    Only the calendar date is kept. Returns None for empty, short,
    non-numeric or out-of-range values.
    """
    if not value:
        return None

    cleaned = _strip_timezone(value.strip())
    if len(cleaned) < 8:
        return None

    digits = cleaned[:8]
    if not (digits.isascii() and digits.isdigit()):
        return None

    try:
        return date(int(digits[:4]), int(digits[4:6]), int(digits[6:8]))
    except ValueError:
        return None


def parse_ofx_amount(value: str) -> float:
    """
    Parse a TRNAMT value, accepting a comma as decimal separator.

    Only the first comma is converted; thousands separators are not
    supported. Returns NaN when the value is not a finite number.
    """
    normalized = value.strip().replace(",", ".", 1)
    # float() accepts "1_000", which no bank emits
    if not normalized or "_" in normalized:
        return math.nan
    try:
        amount = float(normalized)
    except ValueError:
        return math.nan
    return amount if math.isfinite(amount) else math.nan


def generate_transaction_id() -> str:
    """Placeholder id for transactions without FITID."""
    return f"{SYNTHETIC_ID_PREFIX}-{time.time_ns()}-{uuid.uuid4().hex[:12]}"


def _first_text(*values: Optional[str]) -> Optional[str]:
    for value in values:
        if value is not None and value.strip():
            return value.strip()
    return None


class OFXStatementParser:
    """
    Parser for OFX bank statements.

    Holds no state between calls; a single instance can parse any number
    of documents, from any number of threads.
    """

    def parse(self, content: str) -> StatementResult:
        """
        Parse statement text.

        Returns:
            StatementResult with header fields, transactions in source
            order and the number of skipped blocks.
        """
        result = StatementResult()

        org = find_tag_value(content, TAG_ORG)
        if org is not None:
            result.bank_name = org.strip()

        acct_id = find_tag_value(content, TAG_ACCTID)
        if acct_id is not None:
            result.account_number = acct_id.strip()

        result.period_start = parse_ofx_date(find_tag_value(content, TAG_DTSTART))
        result.period_end = parse_ofx_date(find_tag_value(content, TAG_DTEND))

        for idx, block in enumerate(iter_blocks(content)):
            txn = self._parse_block(block, idx)
            if txn is None:
                result.skipped += 1
                continue
            result.transactions.append(txn)

        logger.debug(
            f"Parsed {len(result.transactions)} transactions "
            f"({result.skipped} skipped) for account '{result.account_number}'"
        )
        return result

    def _parse_block(self, block: str, idx: int) -> Optional[Transaction]:
        """Build a Transaction from one <STMTTRN> body, or None to skip it."""
        posted = find_tag_value(block, TAG_DTPOSTED, BLOCK_TERMINATORS)
        raw_amount = find_tag_value(block, TAG_TRNAMT, BLOCK_TERMINATORS)
        if posted is None or raw_amount is None:
            logger.debug(f"Skipping block {idx}: missing {TAG_DTPOSTED} or {TAG_TRNAMT}")
            return None

        signed_amount = parse_ofx_amount(raw_amount)
        if math.isnan(signed_amount):
            logger.warning(f"Skipping block {idx}: unparseable amount {raw_amount.strip()!r}")
            return None

        posted_date = parse_ofx_date(posted)
        if posted_date is None:
            logger.debug(f"Block {idx}: unparseable {TAG_DTPOSTED} {posted.strip()!r}, using today")
            posted_date = date.today()

        fit_id = _first_text(find_tag_value(block, TAG_FITID, BLOCK_TERMINATORS))
        description = _first_text(
            find_tag_value(block, TAG_MEMO, BLOCK_TERMINATORS),
            find_tag_value(block, TAG_NAME, BLOCK_TERMINATORS),
        )

        return Transaction(
            fit_id=fit_id or generate_transaction_id(),
            date=posted_date,
            amount=abs(signed_amount),
            description=description or DEFAULT_DESCRIPTION,
            direction=Direction.CREDIT if signed_amount >= 0 else Direction.DEBIT,
        )


def parse_ofx(content: str) -> StatementResult:
    """
    Convenience function to parse an OFX statement.

    Args:
        content: Statement text (already decoded, see decoding.decode_statement)

    Returns:
        StatementResult
    """
    return OFXStatementParser().parse(content)
