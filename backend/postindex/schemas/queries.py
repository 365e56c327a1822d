"""Query Schemas — list endpoint parameters with the category/search exclusivity rule.

Invariants:
    - category and q are mutually exclusive: a request carrying both is rejected
      (selecting a category clears the search; a search ignores the category)
    - Absent both → category "all"
    - mode None → configured default search mode
"""

from pydantic import BaseModel, Field, model_validator

from postindex.core.domain_types import SearchMode


class PostListQuery(BaseModel):
    """Query-string parameters for GET /api/v1/posts."""
    category: str | None = Field(None, min_length=1, max_length=200)
    q: str | None = None
    mode: SearchMode | None = None

    @model_validator(mode="after")
    def validate_exclusive_filters(self):
        if self.category is not None and self.q is not None:
            raise ValueError("category and q are mutually exclusive")
        return self
