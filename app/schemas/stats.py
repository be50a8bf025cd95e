from pydantic import BaseModel
from typing import Dict, List

from app.core.constants import OrderStatusEnum


class ChangePercent(BaseModel):
    revenue: float
    product: float
    user: float
    order: float


class Counts(BaseModel):
    revenue: float
    product: int
    user: int
    order: int


class MonthlyOrderChart(BaseModel):
    order: List[int]
    revenue: List[float]


class UserRatio(BaseModel):
    male: int
    female: int


class LatestTransaction(BaseModel):
    id: int
    discount: float
    amount: float
    quantity: int
    status: OrderStatusEnum


class DashboardStats(BaseModel):
    category_count: Dict[str, int]
    change_percent: ChangePercent
    count: Counts
    chart: MonthlyOrderChart
    user_ratio: UserRatio
    latest_transaction: List[LatestTransaction]


class OrderFullfillment(BaseModel):
    processing: int
    shipped: int
    delivered: int


class StockAvailability(BaseModel):
    in_stock: int
    out_of_stock: int


class RevenueDistribution(BaseModel):
    net_margin: float
    discount: float
    production_cost: float
    burnt: float
    marketing_cost: float


class UsersAgeGroup(BaseModel):
    teen: int
    adult: int
    old: int


class AdminCustomer(BaseModel):
    admin: int
    customer: int


class PieCharts(BaseModel):
    order_fullfillment: OrderFullfillment
    product_categories: Dict[str, int]
    stock_availability: StockAvailability
    revenue_distribution: RevenueDistribution
    users_age_group: UsersAgeGroup
    admin_customer: AdminCustomer


class BarCharts(BaseModel):
    users: List[int]
    products: List[int]
    orders: List[int]


class LineCharts(BaseModel):
    users: List[int]
    products: List[int]
    discount: List[float]
    revenue: List[float]
