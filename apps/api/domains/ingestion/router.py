"""Ingestion router: OFX statement upload and import.

The caller sends the statement file and, optionally, its category list as a
JSON form field. Nothing is stored; the parsed and classified transactions
are returned for the caller to persist.
"""

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, File, Form, UploadFile

from apps.api.core.config import Settings, get_settings
from apps.api.domains.ingestion.schemas import ImportResponse
from apps.api.domains.ingestion.service import check_upload, parse_categories_field, run_import

router = APIRouter(prefix="/statements", tags=["ingestion"])
logger = structlog.get_logger()


@router.post("/import", response_model=ImportResponse)
async def import_ofx(
    file: UploadFile = File(...),
    categories: Optional[str] = Form(None),
    settings: Settings = Depends(get_settings),
):
    """Accept an OFX file, parse its transactions and classify each one.

    Malformed fields inside the statement never fail the request: they
    degrade to defaults and unusable blocks are counted in `skipped`.
    """
    filename = file.filename or ""
    contents = await file.read()
    check_upload(filename, contents, settings.max_upload_bytes)

    category_list = parse_categories_field(categories)
    response = run_import(contents, category_list)

    logger.info("ingest_complete", count=response.count, filename=filename)
    return response
