"""
Membership Domain Models

Membership data comes from an external membership subsystem; these models
only carry what the finance dates feature needs from it.

Author: TM3
Date: 2025-11-20
"""
from pydantic import BaseModel, Field, ConfigDict

# Membership post meta keys
MEMBERSHIP_STARTS_AT_KEY = 'membership_starts_at'
MEMBERSHIP_ENDS_AT_KEY = 'membership_ends_at'
MEMBERSHIP_TIER_KEY = 'membership_tier_post_id'
MEMBERSHIP_CONFIG_KEY = 'membership_config_post_id'

# Required keys of the membership-created payload
REQUIRED_EVENT_KEYS = (
    'membership_post_id',
    'membership_parent_order_id',
    'membership_product_id',
)


class MembershipDates(BaseModel):
    """
    Membership term dates in ISO 8601 (e.g. 2024-01-15T00:00:00+00:00)

    early_renew_at and expires_at are only set by calculated dates.
    """

    start_date: str = Field("", description="Term start (ISO 8601)")
    end_date: str = Field("", description="Term end (ISO 8601)")
    early_renew_at: str = Field("", description="Early renewal opens (ISO 8601)")
    expires_at: str = Field("", description="Grace period end (ISO 8601)")

    model_config = ConfigDict(from_attributes=True)

    @property
    def is_complete(self) -> bool:
        return bool(self.start_date) and bool(self.end_date)
