"""
Subscription plan catalog.

Single source of truth for employer plan entitlements.
A post allowance of None means unlimited active job posts for that plan.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional

FREE_PLAN = "free"

# Every plan, paid or not, starts from this many active posts
BASE_POST_QUOTA = 2

# Plan entitlements (per 30-day subscription period)
PLAN_CATALOG: Dict[str, Dict] = {
    "free": {
        "name": "FREE PLAN",
        "plan_post_allowance": 0,
        "boost_allowance": 0,
        "price": 0,
        "features": ["2 Active Job Posts", "Standard Visibility", "Basic Support"],
    },
    "bronze": {
        "name": "BRONZE PLAN",
        "plan_post_allowance": 4,
        "boost_allowance": 1,
        "price": 3500,
        "features": ["6 Active Job Posts", "1 Boost included", "Email Support"],
    },
    "gold": {
        "name": "GOLD PLAN",
        "plan_post_allowance": 8,
        "boost_allowance": 3,
        "price": 7500,
        "features": ["10 Active Job Posts", "3 Boosts included", "Priority Support"],
    },
    "platinum": {
        "name": "PLATINUM PLAN",
        "plan_post_allowance": None,  # Unlimited
        "boost_allowance": 5,
        "price": 14000,
        "features": ["Unlimited Job Posts", "5 Boosts included", "24/7 Dedicated Support"],
    },
}


@dataclass(frozen=True)
class PlanEntitlement:
    """Resolved entitlements for one plan."""
    plan_id: str
    name: str
    base_post_quota: int
    plan_post_allowance: Optional[int]
    boost_allowance: int
    price: int
    features: List[str] = field(default_factory=list)

    @property
    def post_quota(self) -> Optional[int]:
        """Total active posts allowed, or None for unlimited."""
        if self.plan_post_allowance is None:
            return None
        return self.base_post_quota + self.plan_post_allowance

    @property
    def unlimited_posts(self) -> bool:
        return self.plan_post_allowance is None


def normalize_plan(plan_type: Optional[str]) -> str:
    """
    Normalize a plan identifier.

    Matching is case-insensitive; unknown or empty identifiers map to the
    free plan.
    """
    plan_type = plan_type.strip().lower() if plan_type else FREE_PLAN
    return plan_type if plan_type in PLAN_CATALOG else FREE_PLAN


def is_known_plan(plan_type: Optional[str]) -> bool:
    return bool(plan_type) and plan_type.strip().lower() in PLAN_CATALOG


def is_purchasable_plan(plan_type: Optional[str]) -> bool:
    """Check if the plan can be bought (a known, non-free plan)."""
    return is_known_plan(plan_type) and plan_type.strip().lower() != FREE_PLAN


def get_plan_entitlement(plan_type: Optional[str]) -> PlanEntitlement:
    """
    Get the entitlements for a plan.

    Args:
        plan_type: Plan identifier (free, bronze, gold, platinum), any case

    Returns:
        PlanEntitlement; unknown plans resolve to the free tier
    """
    plan_id = normalize_plan(plan_type)
    entry = PLAN_CATALOG[plan_id]
    return PlanEntitlement(
        plan_id=plan_id,
        name=entry["name"],
        base_post_quota=BASE_POST_QUOTA,
        plan_post_allowance=entry["plan_post_allowance"],
        boost_allowance=entry["boost_allowance"],
        price=entry["price"],
        features=list(entry["features"]),
    )


def get_post_quota(plan_type: Optional[str]) -> Optional[int]:
    """Get the total active post quota for a plan (None for unlimited)."""
    return get_plan_entitlement(plan_type).post_quota


def get_boost_allowance(plan_type: Optional[str]) -> int:
    return get_plan_entitlement(plan_type).boost_allowance


def list_plans() -> List[PlanEntitlement]:
    """Get every plan in catalog order."""
    return [get_plan_entitlement(plan_id) for plan_id in PLAN_CATALOG]
