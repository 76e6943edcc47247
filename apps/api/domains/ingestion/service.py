"""Ingestion service: upload checks, category parsing and statement import.

Parsing and classification live in packages/; this module turns their
results into API schemas and maps bad input to AppError subclasses.
"""

import json
from typing import Optional

import structlog
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from apps.api.core.errors import PayloadTooLargeError, UnsupportedFileError, ValidationError
from apps.api.domains.categorization.schemas import CategoryIn
from apps.api.domains.ingestion.schemas import ImportResponse
from packages.ingestion_engine.import_statement import import_statement

logger = structlog.get_logger()

ALLOWED_EXTENSIONS = (".ofx", ".qfx")

_categories_adapter = TypeAdapter(list[CategoryIn])


def check_upload(filename: str, contents: bytes, max_bytes: int) -> None:
    """Reject uploads the importer should not read."""
    if not filename.lower().endswith(ALLOWED_EXTENSIONS):
        raise UnsupportedFileError(
            f"Unsupported file type. Accepted: {', '.join(ALLOWED_EXTENSIONS)}"
        )
    if not contents:
        raise UnsupportedFileError("Uploaded file is empty")
    if len(contents) > max_bytes:
        raise PayloadTooLargeError(f"File too large (max {max_bytes // (1024 * 1024)} MB)")


def parse_categories_field(raw: Optional[str]) -> list[CategoryIn]:
    """Parse the multipart 'categories' field (a JSON array) into schemas."""
    if raw is None or not raw.strip():
        return []
    try:
        return _categories_adapter.validate_python(json.loads(raw))
    except json.JSONDecodeError as e:
        raise ValidationError(f"categories is not valid JSON: {e.msg}")
    except PydanticValidationError as e:
        raise ValidationError(f"categories does not match the category schema ({e.error_count()} errors)")


def run_import(contents: bytes, categories: list[CategoryIn]) -> ImportResponse:
    """Parse, classify and summarize an uploaded statement."""
    result = import_statement(contents, [c.to_category() for c in categories])
    logger.info(
        "statement_imported",
        bank=result.bank_name,
        count=result.count,
        skipped=result.skipped,
        categories=len(categories),
    )
    return ImportResponse.model_validate(result.to_dict())
