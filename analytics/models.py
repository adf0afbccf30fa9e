"""Ledger records and analytics output models.

Input records mirror what the storage layer hands back: dates stay as the raw
strings it stores (``YYYY-MM-DD`` or full ISO timestamps) and are parsed on
use by :mod:`analytics.date_filter`.  Output models are plain data consumed by
the CLI, the JSON API and the export layer.
"""

from __future__ import annotations

from datetime import date
from typing import Literal, get_args

from pydantic import BaseModel, Field, field_validator

from analytics.date_filter import parse_date

SourceType = Literal[
    "pallet",
    "thrift",
    "garage_sale",
    "retail_arbitrage",
    "mystery_box",
    "other",
]
PalletStatus = Literal["unprocessed", "processing", "completed"]
ItemStatus = Literal["unlisted", "listed", "sold"]
ItemCondition = Literal[
    "new",
    "open_box",
    "used_good",
    "used_fair",
    "damaged",
    "for_parts",
    "unsellable",
]
ExpenseCategory = Literal[
    "supplies",
    "gas",
    "mileage",
    "storage",
    "fees",
    "shipping",
    "subscriptions",
    "equipment",
    "other",
]
Granularity = Literal["daily", "weekly", "monthly"]
GRANULARITIES: tuple[str, ...] = get_args(Granularity)


# ---------------------------------------------------------------------------
# Ledger records
# ---------------------------------------------------------------------------


class Pallet(BaseModel):
    """A purchased lot (pallet, thrift haul, mystery box, ...)."""

    id: str
    name: str
    supplier: str | None = None
    source_type: SourceType = "pallet"
    source_name: str | None = None  # free-text "pallet type"
    purchase_cost: float = 0.0
    sales_tax: float | None = None
    purchase_date: str | None = None
    status: PalletStatus = "unprocessed"

    @field_validator("purchase_cost")
    @classmethod
    def _non_negative_cost(cls, value: float) -> float:
        if value < 0:
            msg = "purchase_cost must be >= 0"
            raise ValueError(msg)
        return value


class Item(BaseModel):
    """A single unit of inventory, optionally sourced from a pallet."""

    id: str
    name: str = ""
    pallet_id: str | None = None
    status: ItemStatus = "unlisted"
    condition: ItemCondition = "new"
    retail_price: float | None = None
    listing_price: float | None = None
    sale_price: float | None = None
    purchase_cost: float | None = None
    allocated_cost: float | None = None
    platform: str | None = None
    platform_fee: float | None = None
    shipping_cost: float | None = None
    listing_date: str | None = None
    sale_date: str | None = None
    created_at: str | None = None

    @property
    def is_sold(self) -> bool:
        """True only for sold items that carry both a sale price and a usable sale date."""
        return (
            self.status == "sold"
            and self.sale_price is not None
            and parse_date(self.sale_date) is not None
        )


class Expense(BaseModel):
    """A business expense, optionally linked to one or more pallets."""

    id: str
    amount: float
    category: ExpenseCategory = "other"
    description: str | None = None
    expense_date: str | None = None
    pallet_ids: list[str] = Field(default_factory=list)
    pallet_id: str | None = None  # legacy single-pallet link

    @property
    def linked_pallet_ids(self) -> list[str]:
        """Distinct linked pallets, folding in the legacy ``pallet_id`` column."""
        if self.pallet_ids:
            return list(dict.fromkeys(self.pallet_ids))
        return [self.pallet_id] if self.pallet_id else []


class MileageTrip(BaseModel):
    """A business trip logged with the mileage rate in force at the time."""

    id: str
    trip_date: str | None = None
    miles: float = 0.0
    mileage_rate: float = 0.0
    purpose: str | None = None
    pallet_ids: list[str] = Field(default_factory=list)


class DateRange(BaseModel):
    """Inclusive date window; no bounds at all means the lifetime view."""

    start: date | None = None
    end: date | None = None
    preset: str = "custom"


# ---------------------------------------------------------------------------
# Calculation results
# ---------------------------------------------------------------------------


class CogsResult(BaseModel):
    total_revenue: float = 0.0
    total_cogs: float = 0.0
    total_fees: float = 0.0
    net_profit: float = 0.0


class GroupFinancials(BaseModel):
    """Money totals for one aggregation group, whichever cost model produced them."""

    profit: float = 0.0
    cost: float = 0.0
    revenue: float = 0.0
    sold_count: int = 0


class PalletProfitResult(BaseModel):
    total_revenue: float
    total_cost: float
    pallet_cost: float
    sales_tax: float
    expenses: float
    net_profit: float
    roi: float
    sold_items_count: int
    total_items_count: int
    unsold_items_count: int
    unsold_value: float


class ItemAllocation(BaseModel):
    item_id: str
    name: str
    condition: ItemCondition
    allocated_cost: float


class CostAllocation(BaseModel):
    """How a pallet's purchase cost and tax split across its items."""

    pallet_id: str
    total_cost: float
    sellable_count: int
    estimated_per_item: float
    items: list[ItemAllocation]


class RetailMetrics(BaseModel):
    total_retail_value: float
    retail_recovery_rate: float
    cost_per_dollar_retail: float  # lower is a better deal


class HeroMetrics(BaseModel):
    total_profit: float = 0.0
    total_items_sold: int = 0
    avg_roi: float = 0.0
    active_inventory_value: float = 0.0


class PalletAnalytics(BaseModel):
    id: str
    name: str
    source_type: SourceType
    source_name: str | None
    profit: float
    roi: float
    total_cost: float
    total_revenue: float
    item_count: int
    sold_count: int
    avg_days_to_sell: float | None
    sell_through_rate: float
    retail_metrics: RetailMetrics | None = None


class TypeComparison(BaseModel):
    source_type: SourceType
    label: str
    avg_roi: float
    avg_profit_per_pallet: float
    avg_items_per_pallet: float
    avg_days_to_sell: float | None
    sell_through_rate: float
    pallet_count: int
    total_profit: float
    total_cost: float


class SupplierComparison(BaseModel):
    supplier: str
    total_profit: float
    total_cost: float
    avg_roi: float
    avg_profit_per_pallet: float
    pallet_count: int
    total_items_sold: int
    avg_days_to_sell: float | None
    sell_through_rate: float


class PalletTypeComparison(BaseModel):
    pallet_type: str
    is_mystery_box: bool
    total_profit: float
    total_cost: float
    avg_roi: float
    avg_profit_per_pallet: float
    pallet_count: int
    total_items_sold: int
    avg_days_to_sell: float | None
    sell_through_rate: float


class PeriodSummary(BaseModel):
    items_sold: int = 0
    revenue: float = 0.0
    profit: float = 0.0
    avg_sale_price: float = 0.0


class StaleItem(BaseModel):
    id: str
    name: str
    pallet_id: str | None
    pallet_name: str | None
    days_listed: int
    listing_price: float | None


class TrendDataPoint(BaseModel):
    date: str  # bucket key, YYYY-MM-DD
    profit: float
    revenue: float
    items_sold: int


# ---------------------------------------------------------------------------
# Profit & loss statement
# ---------------------------------------------------------------------------


class RevenueSection(BaseModel):
    gross_sales: float
    items_sold: int
    avg_sale_price: float


class CogsSection(BaseModel):
    pallet_purchases: float
    pallet_count: int  # distinct pallets with at least one sale
    pallet_item_count: int
    individual_item_purchases: float
    individual_item_count: int
    sales_tax: float  # prorated by sold fraction of each pallet
    total_cogs: float


class SellingExpenses(BaseModel):
    platform_fees: float
    shipping_costs: float
    total_selling_expenses: float


class PlatformBreakdown(BaseModel):
    platform: str
    label: str
    sales: float
    fees: float
    count: int


class CategoryTotal(BaseModel):
    category: ExpenseCategory
    label: str
    amount: float
    count: int


class OperatingExpenses(BaseModel):
    by_category: list[CategoryTotal]
    total_operating_expenses: float


class MileageDeductions(BaseModel):
    total_miles: float
    avg_rate: float
    total_deduction: float
    trip_count: int


class ProfitLossSummary(BaseModel):
    period_start: date
    period_end: date
    revenue: RevenueSection
    cogs: CogsSection
    gross_profit: float
    gross_margin: float
    selling_expenses: SellingExpenses
    platform_breakdown: list[PlatformBreakdown]
    operating_expenses: OperatingExpenses
    mileage_deductions: MileageDeductions
    total_expenses: float
    net_profit: float
    net_margin: float
    effective_tax_rate: float | None = None


# ---------------------------------------------------------------------------
# Export rows
# ---------------------------------------------------------------------------


class ItemSaleRow(BaseModel):
    id: str
    name: str
    pallet_name: str | None
    sale_price: float
    cost: float
    fees: float
    profit: float  # net of fees
    roi: float  # before fees
    sale_date: str | None
    days_to_sell: int | None
    platform: str | None


class ExpenseReportRow(BaseModel):
    id: str
    category: ExpenseCategory
    amount: float
    description: str | None
    date: str | None
    pallet_names: list[str]


class ExportData(BaseModel):
    pallet_performance: list[PalletAnalytics]
    item_sales: list[ItemSaleRow]
    expense_report: list[ExpenseReportRow]
