# techserve/models/admin.py
from typing import Dict

from .common import CamelModel

class DashboardStats(CamelModel):
    total_users: int
    total_technicians: int
    technicians_by_verification: Dict[str, int]
    appointments_by_status: Dict[str, int]
    payments_by_status: Dict[str, int]
    completed_revenue: float
