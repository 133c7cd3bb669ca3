"""
Seed Catalogs

The initial plan, insurance, service plan, device and promotion catalogs
that ship with the application. Used when a request does not carry its own
catalogs. Entries use the same camelCase wire format as request bodies.
"""

from .models import CatalogSet

PLANS = [
    {
        "id": "experience-beyond",
        "name": "Experience Beyond",
        "pricingModel": "tiered",
        "tieredPrices": [105, 180, 230, 280, 330, 380, 430, 480, 535, 590, 645, 700],
        "maxLines": 12,
        "availableFor": ["standard"],
        "taxesIncluded": True,
        "allowedDiscounts": {"insider": True, "thirdLineFree": True},
    },
    {
        "id": "experience-beyond-military",
        "name": "Experience Beyond Military/FR",
        "pricingModel": "tiered",
        "tieredPrices": [90, 140, 180, 220, 260, 300, 350, 400, 450, 500, 550, 600],
        "maxLines": 12,
        "availableFor": ["military-fr"],
        "taxesIncluded": True,
        "allowedDiscounts": {"insider": False, "thirdLineFree": True},
    },
    {
        "id": "experience-beyond-55",
        "name": "Experience Beyond 55+",
        "pricingModel": "tiered",
        "tieredPrices": [90, 140],
        "maxLines": 2,
        "availableFor": ["plus-55"],
        "taxesIncluded": True,
        "allowedDiscounts": {"insider": False, "thirdLineFree": False},
    },
    {
        "id": "experience-more",
        "name": "Experience More",
        "pricingModel": "tiered",
        "tieredPrices": [90, 150, 185, 220, 255, 290, 320, 360, 400, 440, 480, 520],
        "maxLines": 12,
        "availableFor": ["standard"],
        "taxesIncluded": False,
        "allowedDiscounts": {"insider": True, "thirdLineFree": True},
    },
    {
        "id": "experience-more-military",
        "name": "Experience More Military/FR",
        "pricingModel": "tiered",
        "tieredPrices": [75, 110, 135, 160, 185, 210, 235, 260, 285, 315, 345, 380],
        "maxLines": 12,
        "availableFor": ["military-fr"],
        "taxesIncluded": False,
        "allowedDiscounts": {"insider": False, "thirdLineFree": True},
    },
    {
        "id": "experience-more-55",
        "name": "Experience More 55+",
        "pricingModel": "tiered",
        "tieredPrices": [75, 110],
        "maxLines": 2,
        "availableFor": ["plus-55"],
        "taxesIncluded": False,
        "allowedDiscounts": {"insider": False, "thirdLineFree": False},
    },
    {
        "id": "essentials",
        "name": "Essentials",
        "pricingModel": "tiered",
        "tieredPrices": [65, 100, 120, 140, 160, 180],
        "maxLines": 6,
        "availableFor": ["standard"],
        "taxesIncluded": False,
        "allowedDiscounts": {"insider": True, "thirdLineFree": True},
    },
]

INSURANCE_PLANS = [
    {"id": "basic", "name": "Basic Device Protection (Phone)", "price": 12},
    {"id": "p360", "name": "Protection <360> (Phone)", "price": 18},
    {"id": "p360_bts", "name": "Protection <360> (Watch/Tablet)", "price": 12},
    {"id": "basic_bts", "name": "Basic Protection (Watch/Tablet)", "price": 8},
]

SERVICE_PLANS = [
    {"id": "watch_paired_15", "name": "Watch Paired DIGITS", "price": 15, "deviceCategory": "watch"},
    {"id": "watch_standalone_20", "name": "Watch Standalone", "price": 20, "deviceCategory": "watch"},
    {"id": "tablet_10gb_10", "name": "Tablet 10GB", "price": 10, "deviceCategory": "tablet"},
    {"id": "tablet_unlimited_25", "name": "Tablet Unlimited", "price": 25, "deviceCategory": "tablet"},
    {"id": "tracker_5", "name": "SyncUP Tracker", "price": 5, "deviceCategory": "tracker"},
]

DEVICES = [
    {
        "id": "iphone-15-pro",
        "name": "iPhone 15 Pro",
        "category": "phone",
        "defaultTermMonths": 24,
        "tags": ["5g", "flagship", "new_release", "promo_eligible_bogo", "apple_pro"],
        "variants": [
            {"sku": "APL-IP15P-128-NTL", "price": 999},
            {"sku": "APL-IP15P-256-NTL", "price": 1099},
            {"sku": "APL-IP15P-512-BLU", "price": 1299},
        ],
    },
    {
        "id": "iphone-15",
        "name": "iPhone 15",
        "category": "phone",
        "defaultTermMonths": 24,
        "tags": ["5g", "new_release", "apple_base"],
        "variants": [
            {"sku": "APL-IP15-128-BLK", "price": 829},
            {"sku": "APL-IP15-256-BLK", "price": 929},
        ],
    },
    {
        "id": "samsung-s24-ultra",
        "name": "Samsung S24 Ultra",
        "category": "phone",
        "defaultTermMonths": 24,
        "tags": ["5g", "flagship", "new_release", "android", "samsung_s"],
        "variants": [
            {"sku": "SAM-S24U-256-GRY", "price": 1299},
            {"sku": "SAM-S24U-512-GRY", "price": 1419},
        ],
    },
    {
        "id": "apple-watch-se",
        "name": "Apple Watch SE",
        "category": "watch",
        "defaultTermMonths": 24,
        "tags": ["wearable", "new_release", "apple_watch"],
        "variants": [{"sku": "APL-WSE-40-MID", "price": 299}],
    },
    {
        "id": "ipad-10",
        "name": "iPad (10th Gen)",
        "category": "tablet",
        "defaultTermMonths": 24,
        "tags": ["tablet", "apple_ipad"],
        "variants": [{"sku": "APL-IP10-64-BLU", "price": 599}],
    },
]

PROMOTIONS = [
    {
        "id": "military-discount",
        "name": "Military & First Responder Plan Discount",
        "category": "plan",
        "isActive": True,
        "stackingGroup": "plan_discount",
        "conditions": [{"field": "customerType", "operator": "equals", "value": "military-fr"}],
        "effects": [{"type": "plan_discount_fixed", "value": 25}],
    },
    {
        "id": "plus55-discount",
        "name": "55+ Plan Discount",
        "category": "plan",
        "isActive": True,
        "stackingGroup": "plan_discount",
        "conditions": [{"field": "customerType", "operator": "equals", "value": "plus-55"}],
        "effects": [{"type": "plan_discount_fixed", "value": 15}],
    },
    {
        "id": "iphone-15-on-us",
        "name": "iPhone 15 On Us (Any Pro)",
        "category": "device",
        "isActive": True,
        "stackingGroup": "device_offer",
        "conditions": [
            {"field": "plan", "operator": "includes", "value": "experience-beyond,experience-beyond-military"},
        ],
        "deviceRequirements": {"tradeIn": "required"},
        "eligibleDeviceTags": ["apple_pro"],
        "eligibleDeviceIds": [],
        "effects": [{"type": "device_credit_fixed", "value": 830, "durationMonths": 24}],
    },
    {
        "id": "iphone-bogo-700",
        "name": "Buy 2 iPhones, Save $700",
        "category": "device",
        "isActive": True,
        "stackingGroup": "device_offer",
        "conditions": [
            {"field": "plan", "operator": "includes", "value": "experience-beyond,experience-more"},
        ],
        "deviceRequirements": {"tradeIn": "optional"},
        "eligibleDeviceTags": ["apple_pro", "apple_base"],
        "bogoConfig": {"buyQuantity": 2},
        "effects": [{"type": "device_credit_fixed", "value": 700, "durationMonths": 24}],
    },
    {
        "id": "new-line-no-trade-100-off",
        "name": "$100 Instant Rebate (No Trade-In)",
        "category": "device",
        "isActive": True,
        "stackingGroup": "device_offer",
        "conditions": [
            {"field": "plan", "operator": "includes", "value": "experience-beyond,experience-more"},
        ],
        "deviceRequirements": {"tradeIn": "not_allowed"},
        "effects": [{"type": "device_instant_rebate", "value": 100}],
    },
    {
        "id": "watch-plan-5-off",
        "name": "$5 Off Watch Plan",
        "category": "bts",
        "isActive": True,
        "stackingGroup": "bts_offer",
        "conditions": [],
        "effects": [{"type": "service_plan_discount_fixed", "value": 5, "durationMonths": 24}],
    },
]

DISCOUNT_SETTINGS = {"autopay": 5, "insider": 20, "activationFee": 10, "upgradeFee": 35}


def seed_catalogs() -> CatalogSet:
    """Build a CatalogSet from the bundled seed data."""
    return CatalogSet.build(
        plans=PLANS,
        service_plans=SERVICE_PLANS,
        discount_settings=DISCOUNT_SETTINGS,
        insurance_plans=INSURANCE_PLANS,
        promotions=PROMOTIONS,
        devices=DEVICES,
    )
