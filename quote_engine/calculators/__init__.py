"""
Calculators Package

Provides all calculation components for quote rating.
"""

from .addons import AddOnCalculator
from .discounts import DiscountCalculator
from .fees import FeeCalculator
from .financing import FinancingAllocator
from .plan_price import PlanPriceResolver
from .promotions import PromotionResolver
from .taxes import TaxCalculator
from .totals import TotalsAggregator
from .trade_in import TradeInResolver

__all__ = [
    "PlanPriceResolver",
    "PromotionResolver",
    "DiscountCalculator",
    "FinancingAllocator",
    "TradeInResolver",
    "AddOnCalculator",
    "FeeCalculator",
    "TaxCalculator",
    "TotalsAggregator",
]
