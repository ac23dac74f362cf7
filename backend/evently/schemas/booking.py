"""
Pydantic schema for a normalized booking.
"""

from pydantic import BaseModel, Field


class BookingFields(BaseModel):
    event_id: int = Field(..., gt=0)
    email: str = Field(..., min_length=3, max_length=254)

    model_config = {"strict": True}
