"""
Pydantic schema for a normalized event.

The normalization pipeline builds this once every field is trimmed and
canonical; it only enforces the stored length bounds.
"""

from typing import Annotated

from pydantic import BaseModel, Field, StringConstraints

AgendaItem = Annotated[str, StringConstraints(max_length=500)]
Tag = Annotated[str, StringConstraints(max_length=100)]


class EventFields(BaseModel):
    title: str = Field(..., min_length=1, max_length=180)
    slug: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., max_length=5000)
    overview: str = Field(..., max_length=2000)
    image: str = Field(..., max_length=2048)
    venue: str = Field(..., max_length=500)
    location: str = Field(..., max_length=500)
    date: str = Field(..., max_length=30)
    time: str = Field(..., max_length=30)
    mode: str = Field(..., max_length=50)
    audience: str = Field(..., max_length=200)
    agenda: list[AgendaItem] = Field(..., min_length=1)
    organizer: str = Field(..., max_length=200)
    tags: list[Tag] = Field(..., min_length=1)

    model_config = {"strict": True}
