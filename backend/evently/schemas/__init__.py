from evently.schemas.event import EventFields
from evently.schemas.booking import BookingFields

__all__ = ["EventFields", "BookingFields"]
