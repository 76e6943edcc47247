"""
OFX Ingestion Engine

Statement decoding, OFX parsing and keyword-classified import.
"""

__version__ = "0.1.0"

from .decoding import decode_statement
from .import_statement import ImportedTransaction, ImportResult, StatementSummary, import_statement, summarize
from .ofx_parser import Direction, OFXStatementParser, StatementResult, Transaction, parse_ofx, parse_ofx_date

__all__ = [
    "decode_statement",
    "Direction",
    "ImportedTransaction",
    "ImportResult",
    "import_statement",
    "OFXStatementParser",
    "parse_ofx",
    "parse_ofx_date",
    "StatementResult",
    "StatementSummary",
    "summarize",
    "Transaction",
]
