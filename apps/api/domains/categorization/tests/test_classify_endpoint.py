"""Tests for POST /categorization/classify and /classify/batch endpoints."""

import pytest
from httpx import ASGITransport, AsyncClient

from apps.api.main import app

CATEGORIES = [
    {"id": "1", "name": "Energia", "type": "despesa", "keywords": "energia,cemig"},
    {"id": "2", "name": "Água", "type": "despesa", "keywords": "agua, copasa"},
    {"id": "3", "name": "Manutenção", "type": "despesa", "keywords": None},
    {"id": "4", "name": "Conta", "type": "despesa", "keywords": "conta"},
]


async def _post(path, payload):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        return await ac.post(f"/api/v1/categorization{path}", json=payload)


# ─── /classify tests ───


@pytest.mark.asyncio
async def test_classify_matches_keyword():
    response = await _post(
        "/classify", {"description": "COPASA Agua e Esgoto", "categories": CATEGORIES}
    )

    assert response.status_code == 200
    assert response.json() == {"category_id": "2", "category_name": "Água"}


@pytest.mark.asyncio
async def test_classify_first_category_wins():
    """'Conta de Energia' hits both Energia and Conta; the earlier one wins."""
    response = await _post(
        "/classify", {"description": "Conta de Energia", "categories": CATEGORIES}
    )

    assert response.json()["category_name"] == "Energia"


@pytest.mark.asyncio
async def test_classify_no_match_returns_nulls():
    response = await _post(
        "/classify", {"description": "Pagamento jardineiro", "categories": CATEGORIES}
    )

    assert response.status_code == 200
    assert response.json() == {"category_id": None, "category_name": None}


@pytest.mark.asyncio
async def test_classify_without_categories():
    response = await _post("/classify", {"description": "CEMIG"})

    assert response.json() == {"category_id": None, "category_name": None}


# ─── /classify/batch tests ───


@pytest.mark.asyncio
async def test_batch_preserves_order():
    payload = {
        "descriptions": ["Fatura CEMIG", "", "copasa", "Outro"],
        "categories": CATEGORIES,
    }
    response = await _post("/classify/batch", payload)

    assert response.status_code == 200
    preds = response.json()["predictions"]
    assert [p["category_name"] for p in preds] == ["Energia", None, "Água", None]


@pytest.mark.asyncio
async def test_batch_empty_descriptions():
    """POST /classify/batch with an empty list returns 400."""
    response = await _post("/classify/batch", {"descriptions": [], "categories": CATEGORIES})

    assert response.status_code == 400
    assert response.json()["detail"] == "No descriptions provided"


@pytest.mark.asyncio
async def test_batch_missing_descriptions_field():
    response = await _post("/classify/batch", {"texts": ["something"]})

    assert response.status_code == 422
