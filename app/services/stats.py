"""Admin dashboard reports.

Each report loads the raw collections it needs once and derives every figure
from those lists in memory. The ``build_*`` functions are pure so they can be
driven with a fixed ``today``.
"""
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Dict, List, Sequence
import logging

from sqlalchemy.orm import Session

from app.core.cache import CacheManager
from app.core.cache_config import CACHE_KEYS
from app.core.constants import GenderEnum, MARKETING_COST_RATE, OrderStatusEnum, RoleEnum
from app.crud.order import order as crud_order
from app.crud.product import product as crud_product
from app.crud.user import user as crud_user
from app.schemas.stats import (
    AdminCustomer,
    BarCharts,
    ChangePercent,
    Counts,
    DashboardStats,
    LatestTransaction,
    LineCharts,
    MonthlyOrderChart,
    OrderFullfillment,
    PieCharts,
    RevenueDistribution,
    StockAvailability,
    UserRatio,
    UsersAgeGroup,
)
from app.services.cache_service import read_through
from app.utils.stats import (
    category_distribution,
    month_buckets,
    percent_change,
    round_half_up,
    start_of_month,
)

logger = logging.getLogger(__name__)

LATEST_TRANSACTIONS_LIMIT = 4


def _utc_naive(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _created_between(docs: Sequence[Any], start: datetime, end: datetime) -> List[Any]:
    return [doc for doc in docs if start <= _utc_naive(doc.created_at) <= end]


def _created_since(docs: Sequence[Any], since: datetime) -> List[Any]:
    return [doc for doc in docs if _utc_naive(doc.created_at) >= since]


def _within_months(docs: Sequence[Any], today: datetime, length: int) -> List[Any]:
    # From the first day of the oldest bucket, so a month never wraps onto last year
    return _created_since(docs, start_of_month(today, length - 1))


def _revenue(orders: Sequence[Any]) -> float:
    return sum(o.total for o in orders)


def _categories(products: Sequence[Any]) -> Dict[str, int]:
    counts = Counter(p.category for p in products)
    return category_distribution(sorted(counts), counts, len(products))


def build_dashboard_stats(users, products, orders, today: datetime) -> DashboardStats:
    this_month_start = start_of_month(today)
    last_month_start = start_of_month(today, 1)

    def this_and_last(docs):
        this_month = _created_between(docs, this_month_start, today)
        # Last month ends where this month starts
        last_month = [d for d in docs if last_month_start <= _utc_naive(d.created_at) < this_month_start]
        return this_month, last_month

    this_products, last_products = this_and_last(products)
    this_users, last_users = this_and_last(users)
    this_orders, last_orders = this_and_last(orders)

    six_month_orders = _within_months(orders, today, 6)

    latest = sorted(orders, key=lambda o: (_utc_naive(o.created_at), o.id), reverse=True)
    latest_transaction = [
        LatestTransaction(
            id=o.id,
            discount=o.discount,
            amount=o.total,
            quantity=len(o.order_items),
            status=o.status,
        )
        for o in latest[:LATEST_TRANSACTIONS_LIMIT]
    ]

    male_count = sum(1 for u in users if u.gender == GenderEnum.MALE)

    return DashboardStats(
        category_count=_categories(products),
        change_percent=ChangePercent(
            revenue=percent_change(_revenue(this_orders), _revenue(last_orders)),
            product=percent_change(len(this_products), len(last_products)),
            user=percent_change(len(this_users), len(last_users)),
            order=percent_change(len(this_orders), len(last_orders)),
        ),
        count=Counts(
            revenue=_revenue(orders),
            product=len(products),
            user=len(users),
            order=len(orders),
        ),
        chart=MonthlyOrderChart(
            order=month_buckets(6, six_month_orders, today),
            revenue=month_buckets(6, six_month_orders, today, prop="total"),
        ),
        user_ratio=UserRatio(male=male_count, female=len(users) - male_count),
        latest_transaction=latest_transaction,
    )


def build_pie_charts(users, products, orders, today: datetime) -> PieCharts:
    statuses = Counter(o.status for o in orders)

    out_of_stock = sum(1 for p in products if p.stock == 0)

    gross_income = _revenue(orders)
    discount = sum(o.discount for o in orders)
    production_cost = sum(o.shipping_charges for o in orders)
    burnt = sum(o.tax for o in orders)
    marketing_cost = round_half_up(gross_income * MARKETING_COST_RATE)

    ages = [u.age_on(today.date()) for u in users]

    admin_count = sum(1 for u in users if u.role == RoleEnum.ADMIN)

    return PieCharts(
        order_fullfillment=OrderFullfillment(
            processing=statuses.get(OrderStatusEnum.PROCESSING, 0),
            shipped=statuses.get(OrderStatusEnum.SHIPPED, 0),
            delivered=statuses.get(OrderStatusEnum.DELIVERED, 0),
        ),
        product_categories=_categories(products),
        stock_availability=StockAvailability(
            in_stock=len(products) - out_of_stock,
            out_of_stock=out_of_stock,
        ),
        revenue_distribution=RevenueDistribution(
            net_margin=gross_income - discount - production_cost - burnt - marketing_cost,
            discount=discount,
            production_cost=production_cost,
            burnt=burnt,
            marketing_cost=marketing_cost,
        ),
        users_age_group=UsersAgeGroup(
            teen=sum(1 for age in ages if age < 20),
            adult=sum(1 for age in ages if 20 <= age < 40),
            old=sum(1 for age in ages if age >= 40),
        ),
        admin_customer=AdminCustomer(admin=admin_count, customer=len(users) - admin_count),
    )


def build_bar_charts(users, products, orders, today: datetime) -> BarCharts:
    return BarCharts(
        users=month_buckets(6, _within_months(users, today, 6), today),
        products=month_buckets(6, _within_months(products, today, 6), today),
        orders=month_buckets(12, _within_months(orders, today, 12), today),
    )


def build_line_charts(users, products, orders, today: datetime) -> LineCharts:
    recent_orders = _within_months(orders, today, 12)
    return LineCharts(
        users=month_buckets(12, _within_months(users, today, 12), today),
        products=month_buckets(12, _within_months(products, today, 12), today),
        discount=month_buckets(12, recent_orders, today, prop="discount"),
        revenue=month_buckets(12, recent_orders, today, prop="total"),
    )


class StatsService:

    def _now(self) -> datetime:
        return datetime.now(timezone.utc).replace(tzinfo=None)

    async def _report(self, db: Session, cache: CacheManager, key: str, builder) -> dict:
        def load():
            users = crud_user.find(db)
            products = crud_product.find(db)
            orders = crud_order.get_all(db)
            logger.info(f"Building {key} from {len(orders)} orders, {len(products)} products, {len(users)} users")
            return builder(users, products, orders, self._now()).model_dump(mode="json")

        return await read_through(cache, key, load)

    async def get_dashboard_stats(self, db: Session, cache: CacheManager) -> dict:
        return await self._report(db, cache, CACHE_KEYS["admin_stats"], build_dashboard_stats)

    async def get_pie_charts(self, db: Session, cache: CacheManager) -> dict:
        return await self._report(db, cache, CACHE_KEYS["admin_pie_charts"], build_pie_charts)

    async def get_bar_charts(self, db: Session, cache: CacheManager) -> dict:
        return await self._report(db, cache, CACHE_KEYS["admin_bar_charts"], build_bar_charts)

    async def get_line_charts(self, db: Session, cache: CacheManager) -> dict:
        return await self._report(db, cache, CACHE_KEYS["admin_line_charts"], build_line_charts)


stats_service = StatsService()
