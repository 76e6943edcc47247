"""
Statement import: decode, parse, classify and summarize in one pass.

Nothing is persisted here. The caller receives an ImportResult and decides
what to store.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Union

import pandas as pd

from packages.categorization.rules import Category, CategoryLike, KeywordMatcher, as_category

from .decoding import decode_statement
from .ofx_parser import Direction, Transaction, parse_ofx

logger = logging.getLogger(__name__)

UNCATEGORIZED = "Sem categoria"


@dataclass
class ImportedTransaction:
    """A parsed transaction with its category and statement identity attached."""

    transaction: Transaction
    bank_name: str = ""
    account_number: str = ""
    category_id: Optional[str] = None
    category_name: Optional[str] = None
    category_type: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        row = self.transaction.to_dict()
        row.update(
            {
                "bank_name": self.bank_name,
                "account_number": self.account_number,
                "category_id": self.category_id,
                "category_name": self.category_name,
                "category_type": self.category_type,
            }
        )
        return row


@dataclass
class StatementSummary:
    total_credits: float = 0.0
    total_debits: float = 0.0
    balance: float = 0.0
    transaction_count: int = 0
    by_category: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_credits": self.total_credits,
            "total_debits": self.total_debits,
            "balance": self.balance,
            "transaction_count": self.transaction_count,
            "by_category": list(self.by_category),
        }


@dataclass
class ImportResult:
    bank_name: str
    account_number: str
    period_start: Optional[date]
    period_end: Optional[date]
    transactions: List[ImportedTransaction]
    skipped: int
    summary: StatementSummary

    @property
    def count(self) -> int:
        return len(self.transactions)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bank_name": self.bank_name,
            "account_number": self.account_number,
            "period_start": self.period_start.isoformat() if self.period_start else None,
            "period_end": self.period_end.isoformat() if self.period_end else None,
            "transactions": [t.to_dict() for t in self.transactions],
            "count": self.count,
            "skipped": self.skipped,
            "summary": self.summary.to_dict(),
        }

    def to_dataframe(self) -> pd.DataFrame:
        columns = ["date", "description", "amount", "direction", "category_name", "fit_id"]
        return pd.DataFrame([t.to_dict() for t in self.transactions], columns=columns)


def summarize(transactions: Iterable[ImportedTransaction]) -> StatementSummary:
    """
    Totals per direction and per category.

    Category rows keep the order in which each category first appears.
    Amounts are rounded to cents.
    """
    rows = [
        {
            "amount": t.transaction.amount,
            "direction": t.transaction.direction.value,
            "category": t.category_name or UNCATEGORIZED,
            "category_type": t.category_type or "",
        }
        for t in transactions
    ]
    df = pd.DataFrame(rows, columns=["amount", "direction", "category", "category_type"])
    if df.empty:
        return StatementSummary()

    credits = float(df.loc[df["direction"] == Direction.CREDIT.value, "amount"].sum())
    debits = float(df.loc[df["direction"] == Direction.DEBIT.value, "amount"].sum())

    grouped = (
        df.groupby(["category", "category_type", "direction"], sort=False)["amount"]
        .agg(["sum", "count"])
        .reset_index()
    )
    by_category = [
        {
            "name": row["category"],
            "type": row["category_type"],
            "direction": row["direction"],
            "total": round(float(row["sum"]), 2),
            "count": int(row["count"]),
        }
        for _, row in grouped.iterrows()
    ]

    return StatementSummary(
        total_credits=round(credits, 2),
        total_debits=round(debits, 2),
        balance=round(credits - debits, 2),
        transaction_count=len(df),
        by_category=by_category,
    )


def import_statement(
    content: Union[str, bytes], categories: Iterable[CategoryLike] = ()
) -> ImportResult:
    """
    Parse a statement and classify every transaction.

    Args:
        content: Raw statement bytes (decoded with decode_statement) or text
        categories: Ordered categories; earlier ones win keyword ties

    Returns:
        ImportResult with classified transactions and a summary
    """
    text = decode_statement(content) if isinstance(content, bytes) else content
    statement = parse_ofx(text)

    category_list: List[Category] = [as_category(c) for c in categories]
    matcher = KeywordMatcher(category_list)
    types_by_id = {c.id: c.type for c in category_list}

    imported: List[ImportedTransaction] = []
    for txn in statement.transactions:
        match = matcher.predict(txn.description)
        imported.append(
            ImportedTransaction(
                transaction=txn,
                bank_name=statement.bank_name,
                account_number=statement.account_number,
                category_id=match.category_id,
                category_name=match.category_name,
                category_type=types_by_id.get(match.category_id) if match.matched else None,
            )
        )

    classified = sum(1 for t in imported if t.category_id is not None)
    logger.info(
        f"Imported {len(imported)} transactions from '{statement.bank_name}' "
        f"({classified} classified, {statement.skipped} skipped)"
    )

    return ImportResult(
        bank_name=statement.bank_name,
        account_number=statement.account_number,
        period_start=statement.period_start,
        period_end=statement.period_end,
        transactions=imported,
        skipped=statement.skipped,
        summary=summarize(imported),
    )
