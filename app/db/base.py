from app.db.base_class import Base

# import all models so metadata sees them
from app.models.user import User
from app.models.calendar_settings import CalendarSettings
from app.models.meeting_type import MeetingType
from app.models.booking import Booking, BookingAnswer
from app.models.unavailable_time import UnavailableTime

__all__ = ["Base"]
