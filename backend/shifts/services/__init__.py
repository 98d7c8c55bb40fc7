from .cash_drawer_service import CashDrawerService, DrawerSummary
from .shift_service import ShiftService

__all__ = ["CashDrawerService", "DrawerSummary", "ShiftService"]
