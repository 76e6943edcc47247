"""Categorization router: classify one or many descriptions by keyword."""

import structlog
from fastapi import APIRouter, HTTPException

from apps.api.domains.categorization.schemas import (
    BatchClassifyRequest,
    BatchClassifyResponse,
    ClassifyRequest,
    ClassifyResponse,
)
from apps.api.domains.categorization.service import classify_batch, classify_single

router = APIRouter(prefix="/categorization", tags=["categorization"])
logger = structlog.get_logger()


@router.post("/classify", response_model=ClassifyResponse)
async def classify_transaction(request: ClassifyRequest):
    """Classify a single transaction description.

    Categories are tried in the order sent; the first one with a keyword
    contained in the description wins.
    """
    return classify_single(request.description, request.categories)


@router.post("/classify/batch", response_model=BatchClassifyResponse)
async def classify_transactions(request: BatchClassifyRequest):
    """Classify multiple descriptions against the same category list."""
    if not request.descriptions:
        raise HTTPException(status_code=400, detail="No descriptions provided")

    predictions = classify_batch(request.descriptions, request.categories)
    logger.info("batch_classified", count=len(predictions))
    return BatchClassifyResponse(predictions=predictions)
