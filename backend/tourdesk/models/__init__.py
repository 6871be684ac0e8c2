from tourdesk.models.user import User
from tourdesk.models.tour import TOUR_STATUSES, Tour

__all__ = [
    "TOUR_STATUSES",
    "Tour",
    "User",
]
