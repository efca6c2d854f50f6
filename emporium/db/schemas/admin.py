from typing import List, Optional
from pydantic import BaseModel


class MonthlyRevenue(BaseModel):
    name: str
    total: float


class RecentSale(BaseModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    amount: float


class Dashboard(BaseModel):
    total_revenue: float
    sales_this_month: int
    orders_count: int
    monthly_revenue: List[MonthlyRevenue]
    recent_sales: List[RecentSale]
