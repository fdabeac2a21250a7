from __future__ import annotations

from urllib.parse import urlencode

from peerdraft.config import Settings
from peerdraft.schemas.settings import HobbyPlan, PluginSettings, ProfessionalPlan, SubscriptionView

HOBBY_DESCRIPTION = (
    "You are on the free Hobby plan. You can collaborate with your peers for up to 2.5 hours a month. "
    "For unlimited collaboration time, sign-up for the Professional plan at 30 USD/year."
)
PROFESSIONAL_DESCRIPTION = "You are on the professional plan for unlimited collaboration. Happy peerdrafting."


def checkout_url(config: Settings, oid: str) -> str:
    return f"{config.checkout_url}?{urlencode({'oid': oid})}"


def build_subscription_view(current: PluginSettings, config: Settings) -> SubscriptionView:
    """Summarize the plan for display; only hobby users get a checkout link."""
    plan = current.plan
    if isinstance(plan, HobbyPlan):
        description = HOBBY_DESCRIPTION
        link = checkout_url(config, current.oid)
    elif isinstance(plan, ProfessionalPlan):
        description = PROFESSIONAL_DESCRIPTION
        link = None
    else:
        raise TypeError(f"Unsupported plan {plan!r}")
    return SubscriptionView(
        plan_type=plan.type,
        email=plan.email or None,
        minutes_used=current.duration,
        description=description,
        checkout_url=link,
        support_email=config.support_email,
    )
