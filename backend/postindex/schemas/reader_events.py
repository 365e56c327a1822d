"""Reader Stream Events — inbound client events for the live reader WebSocket.

Invariants:
    - Every inbound frame is one JSON object with a "type" discriminator
    - search.term may be empty (clears the search); category must be non-empty
    - navigate.query is a raw URL query string ("?post=2", "?", "")

Design Decisions:
    - Discriminated union + TypeAdapter.validate_json: malformed JSON and unknown
      event types both surface as one pydantic ValidationError
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter


class SearchEvent(BaseModel):
    """Keystroke-level search input — debounced before reaching the engine."""
    type: Literal["search"]
    term: str = ""


class CategoryEvent(BaseModel):
    type: Literal["category"]
    category: str = Field(min_length=1, max_length=200)


class NavigateEvent(BaseModel):
    """Location change (link click or history back/forward)."""
    type: Literal["navigate"]
    query: str = Field("", max_length=2000)


ReaderEvent = Annotated[
    Union[SearchEvent, CategoryEvent, NavigateEvent],
    Field(discriminator="type"),
]

reader_event_adapter: TypeAdapter[ReaderEvent] = TypeAdapter(ReaderEvent)


def parse_reader_event(frame: str) -> SearchEvent | CategoryEvent | NavigateEvent:
    """Validate one raw text frame. Raises pydantic.ValidationError."""
    return reader_event_adapter.validate_json(frame)
