"""
Domain Models for the Quote Rating Engine

These dataclasses provide type-safe representations of quote inputs,
reference catalogs, intermediate step results and the final totals.
Dollar amounts arrive as Decimal and are converted to integer cents
once, by the calculators, through quote_engine.money.to_cents.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any


def _dec(value: Any) -> Decimal:
    """Parse a JSON number (or None) into a Decimal."""
    if value is None:
        return Decimal("0")
    return Decimal(str(value))


# =============================================================================
# ENUMS
# =============================================================================


class CustomerType(str, Enum):
    STANDARD = "standard"
    MILITARY_FR = "military-fr"
    PLUS_55 = "plus-55"


class TradeInType(str, Enum):
    MONTHLY_CREDIT = "monthly_credit"
    LUMP_SUM = "lump_sum"
    PROMO = "promo"

    @classmethod
    def parse(cls, value: str | None) -> "TradeInType":
        # 'manual' is the wire value saved quotes use for a monthly-credit trade-in
        if not value or value == "manual":
            return cls.MONTHLY_CREDIT
        return cls(value)


class AccessoryPaymentType(str, Enum):
    FULL = "full"
    FINANCED = "financed"


class PricingModel(str, Enum):
    TIERED = "tiered"
    PER_LINE = "per_line"


class DeviceCategory(str, Enum):
    PHONE = "phone"
    WATCH = "watch"
    TABLET = "tablet"
    TRACKER = "tracker"
    HOTSPOT = "hotspot"


class PromotionCategory(str, Enum):
    DEVICE = "device"
    BTS = "bts"
    PLAN = "plan"
    ACCOUNT = "account"


class StackingGroup(str, Enum):
    OPEN = "open"
    PLAN_DISCOUNT = "plan_discount"
    DEVICE_OFFER = "device_offer"
    BTS_OFFER = "bts_offer"


class TradeInRequirement(str, Enum):
    REQUIRED = "required"
    OPTIONAL = "optional"
    NOT_ALLOWED = "not_allowed"


# =============================================================================
# INPUT MODELS
# =============================================================================


@dataclass(frozen=True)
class QuoteDiscounts:
    autopay: bool = False
    insider: bool = False
    third_line_free: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "QuoteDiscounts":
        return cls(
            autopay=bool(data.get("autopay", False)),
            insider=bool(data.get("insider", False)),
            third_line_free=bool(data.get("thirdLineFree", data.get("third_line_free", False))),
        )


@dataclass(frozen=True)
class QuoteFees:
    """One-time fee flags. The UI keeps these exclusive; the engine sums whatever is set."""

    activation: bool = False
    upgrade: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "QuoteFees":
        return cls(
            activation=bool(data.get("activation", False)),
            upgrade=bool(data.get("upgrade", False)),
        )


@dataclass(frozen=True)
class Device:
    """A device on the quote, with its price already resolved from the catalog."""

    price: Decimal
    trade_in: Decimal = Decimal("0")
    trade_in_type: TradeInType = TradeInType.MONTHLY_CREDIT
    term: int = 24
    down_payment: Decimal = Decimal("0")
    applied_promo_id: str | None = None
    model_id: str | None = None
    variant_sku: str | None = None
    service_plan_id: str | None = None
    insurance_id: str | None = None
    id: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "Device":
        return cls(
            price=_dec(data.get("price")),
            trade_in=_dec(data.get("tradeIn")),
            trade_in_type=TradeInType.parse(data.get("tradeInType")),
            term=int(data.get("term") or 24),
            down_payment=_dec(data.get("downPayment")),
            applied_promo_id=data.get("appliedPromoId"),
            model_id=data.get("modelId") or None,
            variant_sku=data.get("variantSku") or None,
            service_plan_id=data.get("servicePlanId") or None,
            insurance_id=data.get("insuranceId") or None,
            id=data.get("id"),
        )


@dataclass(frozen=True)
class Accessory:
    price: Decimal
    payment_type: AccessoryPaymentType = AccessoryPaymentType.FULL
    quantity: int = 1
    term: int = 12
    down_payment: Decimal = Decimal("0")
    name: str = ""
    id: str | None = None

    @property
    def is_financed(self) -> bool:
        return self.payment_type == AccessoryPaymentType.FINANCED

    @classmethod
    def from_dict(cls, data: dict) -> "Accessory":
        return cls(
            price=_dec(data.get("price")),
            payment_type=AccessoryPaymentType(data.get("paymentType", AccessoryPaymentType.FULL.value)),
            quantity=int(data.get("quantity") or 1),
            term=int(data.get("term") or 12),
            down_payment=_dec(data.get("downPayment")),
            name=data.get("name", ""),
            id=data.get("id"),
        )


@dataclass(frozen=True)
class QuoteConfiguration:
    """The customer's selections for one quote. Never mutated by the engine."""

    plan: str
    lines: int
    customer_type: CustomerType = CustomerType.STANDARD
    discounts: QuoteDiscounts = field(default_factory=QuoteDiscounts)
    fees: QuoteFees = field(default_factory=QuoteFees)
    tax_rate: Decimal = Decimal("0")
    max_ec: Decimal = Decimal("0")
    per_line_ec: Decimal = Decimal("0")
    devices: tuple[Device, ...] = ()
    accessories: tuple[Accessory, ...] = ()
    insurance_tier: str = "none"
    insurance_lines: int = 0

    @classmethod
    def from_dict(cls, data: dict) -> "QuoteConfiguration":
        return cls(
            plan=data.get("plan") or "",
            lines=int(data.get("lines", 1)),
            customer_type=CustomerType(data.get("customerType", CustomerType.STANDARD.value)),
            discounts=QuoteDiscounts.from_dict(data.get("discounts") or {}),
            fees=QuoteFees.from_dict(data.get("fees") or {}),
            tax_rate=_dec(data.get("taxRate")),
            max_ec=_dec(data.get("maxEC")),
            per_line_ec=_dec(data.get("perLineEC")),
            devices=tuple(Device.from_dict(d) for d in data.get("devices") or []),
            accessories=tuple(Accessory.from_dict(a) for a in data.get("accessories") or []),
            insurance_tier=data.get("insuranceTier") or "none",
            insurance_lines=int(data.get("insuranceLines") or 0),
        )


# =============================================================================
# REFERENCE CATALOG MODELS
# =============================================================================


@dataclass(frozen=True)
class AllowedDiscounts:
    """Per-plan discount eligibility. A flag left out of the catalog means allowed."""

    autopay: bool = True
    insider: bool = True
    third_line_free: bool = True

    @classmethod
    def from_dict(cls, data: dict | None) -> "AllowedDiscounts":
        data = data or {}
        return cls(
            autopay=data.get("autopay") is not False,
            insider=data.get("insider") is not False,
            third_line_free=data.get("thirdLineFree", data.get("third_line_free")) is not False,
        )


@dataclass(frozen=True)
class PlanDetails:
    id: str
    name: str
    pricing_model: PricingModel = PricingModel.TIERED
    tiered_prices: tuple[Decimal, ...] = ()
    first_line_price: Decimal = Decimal("0")
    additional_line_price: Decimal = Decimal("0")
    max_lines: int = 12
    taxes_included: bool = False
    available_for: tuple[CustomerType, ...] = ()
    allowed_discounts: AllowedDiscounts = field(default_factory=AllowedDiscounts)

    @classmethod
    def from_dict(cls, data: dict) -> "PlanDetails":
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            pricing_model=PricingModel(data.get("pricingModel", PricingModel.TIERED.value)),
            tiered_prices=tuple(_dec(p) for p in data.get("tieredPrices") or []),
            first_line_price=_dec(data.get("firstLinePrice")),
            additional_line_price=_dec(data.get("additionalLinePrice")),
            max_lines=int(data.get("maxLines") or 12),
            taxes_included=bool(data.get("taxesIncluded", False)),
            available_for=tuple(CustomerType(c) for c in data.get("availableFor") or []),
            allowed_discounts=AllowedDiscounts.from_dict(data.get("allowedDiscounts")),
        )


@dataclass(frozen=True)
class InsurancePlan:
    id: str
    name: str
    price: Decimal

    @classmethod
    def from_dict(cls, data: dict) -> "InsurancePlan":
        return cls(id=data["id"], name=data.get("name", data["id"]), price=_dec(data.get("price")))


@dataclass(frozen=True)
class ServicePlan:
    """Monthly plan for a connected (BTS) device such as a watch or tablet."""

    id: str
    name: str
    price: Decimal
    device_category: DeviceCategory | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "ServicePlan":
        category = data.get("deviceCategory")
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            price=_dec(data.get("price")),
            device_category=DeviceCategory(category) if category else None,
        )


@dataclass(frozen=True)
class DeviceVariant:
    sku: str
    price: Decimal

    @classmethod
    def from_dict(cls, data: dict) -> "DeviceVariant":
        return cls(sku=data["sku"], price=_dec(data.get("price")))


@dataclass(frozen=True)
class DeviceModel:
    id: str
    name: str
    category: DeviceCategory = DeviceCategory.PHONE
    tags: tuple[str, ...] = ()
    variants: tuple[DeviceVariant, ...] = ()
    default_term_months: int = 24

    @classmethod
    def from_dict(cls, data: dict) -> "DeviceModel":
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            category=DeviceCategory(data.get("category", DeviceCategory.PHONE.value)),
            tags=tuple(data.get("tags") or []),
            variants=tuple(DeviceVariant.from_dict(v) for v in data.get("variants") or []),
            default_term_months=int(data.get("defaultTermMonths") or 24),
        )


@dataclass(frozen=True)
class DiscountSettings:
    """Account-wide discount and fee amounts maintained by the admin."""

    autopay: Decimal = Decimal("5")  # dollars per line
    insider: Decimal = Decimal("20")  # percent of base plan price
    activation_fee: Decimal = Decimal("10")  # dollars per line
    upgrade_fee: Decimal = Decimal("35")  # dollars per device

    @classmethod
    def from_dict(cls, data: dict | None) -> "DiscountSettings":
        data = data or {}
        defaults = cls()
        return cls(
            autopay=_dec(data.get("autopay", defaults.autopay)),
            insider=_dec(data.get("insider", defaults.insider)),
            activation_fee=_dec(data.get("activationFee", defaults.activation_fee)),
            upgrade_fee=_dec(data.get("upgradeFee", defaults.upgrade_fee)),
        )


# -----------------------------------------------------------------------------
# Promotions
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class Condition:
    """A single (field, operator, value) predicate over the quote configuration."""

    field: str
    operator: str
    value: Any

    @classmethod
    def from_dict(cls, data: dict) -> "Condition":
        return cls(field=data["field"], operator=data["operator"], value=data.get("value"))


@dataclass(frozen=True)
class PlanDiscountFixed:
    amount: Decimal


@dataclass(frozen=True)
class PlanDiscountPercentage:
    percent: Decimal


@dataclass(frozen=True)
class DeviceCreditFixed:
    """Device credit paid back as monthly bill credits."""

    amount: Decimal
    duration_months: int = 24


@dataclass(frozen=True)
class DeviceInstantRebate:
    """Device credit taken off the due-today bill."""

    amount: Decimal


@dataclass(frozen=True)
class ServicePlanDiscountFixed:
    amount: Decimal
    duration_months: int = 24


PromotionEffect = (
    PlanDiscountFixed
    | PlanDiscountPercentage
    | DeviceCreditFixed
    | DeviceInstantRebate
    | ServicePlanDiscountFixed
)


def parse_effect(data: dict) -> PromotionEffect:
    """Build the effect class for a catalog effect entry."""
    effect_type = data["type"]
    value = _dec(data.get("value"))
    duration = int(data.get("durationMonths") or 24)

    if effect_type == "plan_discount_fixed":
        return PlanDiscountFixed(amount=value)
    if effect_type == "plan_discount_percentage":
        return PlanDiscountPercentage(percent=value)
    if effect_type == "device_credit_fixed":
        return DeviceCreditFixed(amount=value, duration_months=duration)
    if effect_type == "device_instant_rebate":
        return DeviceInstantRebate(amount=value)
    if effect_type == "service_plan_discount_fixed":
        return ServicePlanDiscountFixed(amount=value, duration_months=duration)
    raise ValueError(f"Unknown promotion effect type: {effect_type}")


@dataclass(frozen=True)
class DeviceRequirements:
    trade_in: TradeInRequirement = TradeInRequirement.OPTIONAL

    @classmethod
    def from_dict(cls, data: dict | None) -> "DeviceRequirements":
        data = data or {}
        return cls(trade_in=TradeInRequirement(data.get("tradeIn", TradeInRequirement.OPTIONAL.value)))


@dataclass(frozen=True)
class BogoConfig:
    buy_quantity: int = 2

    @classmethod
    def from_dict(cls, data: dict) -> "BogoConfig":
        return cls(buy_quantity=int(data.get("buyQuantity") or 2))


@dataclass(frozen=True)
class Promotion:
    id: str
    name: str
    category: PromotionCategory
    is_active: bool = True
    conditions: tuple[Condition, ...] = ()
    effects: tuple[PromotionEffect, ...] = ()
    eligible_device_ids: tuple[str, ...] = ()
    eligible_device_tags: tuple[str, ...] = ()
    stacking_group: StackingGroup = StackingGroup.OPEN
    device_requirements: DeviceRequirements = field(default_factory=DeviceRequirements)
    bogo_config: BogoConfig | None = None

    @property
    def has_device_constraints(self) -> bool:
        return bool(self.eligible_device_ids or self.eligible_device_tags)

    @classmethod
    def from_dict(cls, data: dict) -> "Promotion":
        bogo = data.get("bogoConfig")
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            category=PromotionCategory(data["category"]),
            is_active=bool(data.get("isActive", True)),
            conditions=tuple(Condition.from_dict(c) for c in data.get("conditions") or []),
            effects=tuple(parse_effect(e) for e in data.get("effects") or []),
            eligible_device_ids=tuple(data.get("eligibleDeviceIds") or []),
            eligible_device_tags=tuple(data.get("eligibleDeviceTags") or []),
            stacking_group=StackingGroup(data.get("stackingGroup") or StackingGroup.OPEN.value),
            device_requirements=DeviceRequirements.from_dict(data.get("deviceRequirements")),
            bogo_config=BogoConfig.from_dict(bogo) if bogo else None,
        )


# -----------------------------------------------------------------------------
# Catalog set
# -----------------------------------------------------------------------------


def _index(items, model) -> dict:
    """Index catalog entries by id. Accepts a list or an id-keyed mapping of models or dicts."""
    if isinstance(items, dict):
        items = list(items.values())
    indexed = {}
    for item in items or []:
        entry = item if isinstance(item, model) else model.from_dict(item)
        indexed[entry.id] = entry
    return indexed


@dataclass(frozen=True)
class CatalogSet:
    """A read-only snapshot of every reference catalog used by one calculation."""

    plans: dict[str, PlanDetails]
    service_plans: dict[str, ServicePlan] = field(default_factory=dict)
    discount_settings: DiscountSettings = field(default_factory=DiscountSettings)
    insurance_plans: dict[str, InsurancePlan] = field(default_factory=dict)
    promotions: tuple[Promotion, ...] = ()
    devices: dict[str, DeviceModel] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        plans,
        service_plans=None,
        discount_settings=None,
        insurance_plans=None,
        promotions=None,
        devices=None,
    ) -> "CatalogSet":
        if not isinstance(discount_settings, DiscountSettings):
            discount_settings = DiscountSettings.from_dict(discount_settings)
        if isinstance(devices, dict) and "devices" in devices:
            devices = devices["devices"]
        # Promotion order is significant (BTS resolution and tie-breaks follow it)
        return cls(
            plans=_index(plans, PlanDetails),
            service_plans=_index(service_plans, ServicePlan),
            discount_settings=discount_settings,
            insurance_plans=_index(insurance_plans, InsurancePlan),
            promotions=tuple(_index(promotions, Promotion).values()),
            devices=_index(devices, DeviceModel),
        )

    @classmethod
    def from_dict(cls, data: dict) -> "CatalogSet":
        return cls.build(
            plans=data.get("plans"),
            service_plans=data.get("servicePlans"),
            discount_settings=data.get("discountSettings"),
            insurance_plans=data.get("insurancePlans"),
            promotions=data.get("promotions"),
            devices=data.get("deviceDatabase", data.get("devices")),
        )


# =============================================================================
# STEP RESULT MODELS
# =============================================================================


@dataclass
class PromotionResolution:
    """Results of promotion resolution."""

    plan_discount: int = 0
    monthly_device_promo_credit: int = 0
    instant_device_rebate: int = 0
    device_rebates: list[int] = field(default_factory=list)
    monthly_service_plan_promo_credit: int = 0
    applied_promotions: list[dict] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass
class DiscountCalculation:
    """Results of plan discount calculation."""

    autopay_discount: int = 0
    insider_discount: int = 0
    third_line_free_discount: int = 0
    promotion_discount: int = 0
    total_discounts: int = 0
    final_plan_price: int = 0


@dataclass
class FinancedAccessoryLine:
    name: str
    price: Decimal
    quantity: int
    term: int
    down_payment: Decimal
    monthly_payment_in_cents: int


@dataclass
class FinancingAllocation:
    """Results of the shared equipment-credit allocation."""

    total_equipment_cost: int = 0
    optional_down_payment: int = 0
    financed_by_devices: int = 0
    financed_device_rebate: int = 0
    down_payment_rebate: int = 0
    financed_by_accessories: int = 0
    amount_to_finance: int = 0
    ec_lines: int = 0
    available_limit: int = 0
    required_down_payment: int = 0
    financed_principal: int = 0
    monthly_device_payment: int = 0
    device_payments: list[int] = field(default_factory=list)
    financed_accessories_monthly_cost: int = 0
    financed_accessories: list[FinancedAccessoryLine] = field(default_factory=list)


@dataclass
class TradeInResolution:
    lump_sum_trade_in: int = 0
    monthly_trade_in_credit: int = 0
    total_trade_in_value: int = 0


@dataclass
class RecurringAddOns:
    insurance_cost: int = 0
    service_plan_cost: int = 0


@dataclass
class OneTimeFees:
    activation_fee: int = 0
    upgrade_fee: int = 0
    total_one_time_fees: int = 0


@dataclass
class TaxCalculation:
    recurring_tax: int = 0
    device_tax: int = 0
    fees_tax: int = 0
    paid_in_full_accessories_tax: int = 0
    financed_accessories_tax: int = 0
    total_device_cost: int = 0
    paid_in_full_accessories_cost: int = 0
    financed_accessories_full_cost: int = 0


@dataclass
class ProcessingContext:
    """
    Holds all intermediate state during a quote calculation.
    This is the "bag" that flows through the pipeline.
    """

    # Input (immutable during processing)
    config: QuoteConfiguration
    plan: PlanDetails
    catalogs: CatalogSet

    # Step results (populated as we go)
    base_plan_price: int = 0
    promotions: PromotionResolution = field(default_factory=PromotionResolution)
    discounts: DiscountCalculation = field(default_factory=DiscountCalculation)
    financing: FinancingAllocation = field(default_factory=FinancingAllocation)
    trade_ins: TradeInResolution = field(default_factory=TradeInResolution)
    addons: RecurringAddOns = field(default_factory=RecurringAddOns)
    fees: OneTimeFees = field(default_factory=OneTimeFees)
    taxes: TaxCalculation = field(default_factory=TaxCalculation)

    warnings: list[str] = field(default_factory=list)


# =============================================================================
# OUTPUT MODEL
# =============================================================================


@dataclass(frozen=True)
class CalculatedTotals:
    """Final output of a quote calculation. All amounts are integer cents."""

    plan_name: str
    taxes_included: bool

    # Monthly
    base_plan_price_in_cents: int
    autopay_discount_in_cents: int
    insider_discount_in_cents: int
    third_line_free_discount_in_cents: int
    promotion_discount_in_cents: int
    total_discounts_in_cents: int
    final_plan_price_in_cents: int
    insurance_cost_in_cents: int
    monthly_device_payment_in_cents: int
    financed_accessories_monthly_cost_in_cents: int
    monthly_service_plan_cost_in_cents: int
    monthly_trade_in_credit_in_cents: int
    monthly_device_promo_credit_in_cents: int
    monthly_service_plan_promo_credit_in_cents: int
    total_monthly_addons_in_cents: int
    calculated_taxes_in_cents: int
    total_monthly_in_cents: int

    # Due today
    activation_fee_in_cents: int
    upgrade_fee_in_cents: int
    total_one_time_fees_in_cents: int
    total_device_cost_in_cents: int
    due_today_device_tax_in_cents: int
    due_today_fees_tax_in_cents: int
    paid_in_full_accessories_cost_in_cents: int
    paid_in_full_accessories_tax_in_cents: int
    financed_accessories_tax_in_cents: int
    lump_sum_trade_in_in_cents: int
    instant_device_rebate_in_cents: int
    down_payment_rebate_in_cents: int
    optional_down_payment_in_cents: int
    required_down_payment_in_cents: int
    due_today_in_cents: int

    # Financing details
    amount_to_finance_before_limit_in_cents: int
    financed_by_devices_in_cents: int
    financed_by_accessories_in_cents: int
    available_financing_limit_in_cents: int
    total_financed_principal_in_cents: int
    total_lines_for_ec: int

    financed_accessories: tuple[dict, ...] = ()
    paid_in_full_accessories: tuple[dict, ...] = ()
    applied_promotions: tuple[dict, ...] = ()
    warnings: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        """Serialize with the camelCase keys the application stores alongside a quote."""
        result = {}
        for name in self.__dataclass_fields__:
            value = getattr(self, name)
            if isinstance(value, tuple):
                value = list(value)
            result[_camel(name)] = value
        return result


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.upper() if part == "ec" else part.capitalize() for part in rest)
