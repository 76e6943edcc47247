"""Pydantic schemas for the categorization domain."""

from typing import Optional

from pydantic import BaseModel, Field

from packages.categorization.rules import Category


class CategoryIn(BaseModel):
    """A category as sent by the caller (usually read from its database)."""

    id: str
    name: str
    type: str = ""
    keywords: Optional[str] = Field(
        default=None,
        description="Comma-separated, case-insensitive substrings",
    )

    def to_category(self) -> Category:
        return Category(id=self.id, name=self.name, type=self.type, keywords=self.keywords)


class ClassifyRequest(BaseModel):
    """Request to classify a single transaction."""

    description: str
    categories: list[CategoryIn] = Field(default_factory=list)


class ClassifyResponse(BaseModel):
    """Classification result; both fields are null when nothing matched."""

    category_id: Optional[str] = None
    category_name: Optional[str] = None


class BatchClassifyRequest(BaseModel):
    """Request to classify multiple descriptions against one category list."""

    descriptions: list[str]
    categories: list[CategoryIn] = Field(default_factory=list)


class BatchClassifyResponse(BaseModel):
    """Batch classification result, in request order."""

    predictions: list[ClassifyResponse]
