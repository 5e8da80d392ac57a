"""
Database models package
"""

from .show import Show
from .reservation import Reservation
from .waiting_list import WaitingListEntry

__all__ = ["Show", "Reservation", "WaitingListEntry"]
