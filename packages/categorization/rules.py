from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union


@dataclass(frozen=True)
class Category:
    """A user-defined category as stored by the persistence layer."""

    id: str
    name: str
    type: str  # e.g. "receita" / "despesa", not interpreted here
    keywords: Optional[str] = None  # comma-separated

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> "Category":
        return cls(
            id=str(row["id"]),
            name=str(row["name"]),
            type=str(row.get("type") or ""),
            keywords=row.get("keywords"),
        )

    def keyword_list(self) -> List[str]:
        """Lowercased, trimmed, non-empty keywords in the order they were written."""
        if not self.keywords:
            return []
        tokens = (k.strip().lower() for k in self.keywords.split(","))
        return [k for k in tokens if k]


@dataclass(frozen=True)
class CategoryMatch:
    category_id: Optional[str] = None
    category_name: Optional[str] = None

    @property
    def matched(self) -> bool:
        return self.category_id is not None


NO_MATCH = CategoryMatch()

CategoryLike = Union[Category, Mapping[str, Any]]


def as_category(category: CategoryLike) -> Category:
    if isinstance(category, Category):
        return category
    return Category.from_mapping(category)


class KeywordMatcher:
    def __init__(self, categories: Iterable[CategoryLike]):
        # (category, keywords) pairs in caller order; order decides ties
        self.rules: List[Tuple[Category, List[str]]] = []
        for category in categories:
            category = as_category(category)
            keywords = category.keyword_list()
            if keywords:
                self.rules.append((category, keywords))

    def predict(self, text: str) -> CategoryMatch:
        """
        Return the first category with a keyword contained in text.

        Categories are checked in the order given and keywords in the order
        written; the first substring hit wins, not the most specific one.
        """
        if not text:
            return NO_MATCH

        text_lower = text.lower()

        for category, keywords in self.rules:
            for keyword in keywords:
                if keyword in text_lower:
                    return CategoryMatch(category_id=category.id, category_name=category.name)

        return NO_MATCH


def classify_transaction(description: str, categories: Iterable[CategoryLike]) -> CategoryMatch:
    """Classify a single description against an ordered list of categories."""
    return KeywordMatcher(categories).predict(description)
