"""Pydantic schemas for billing display."""

from enum import Enum

from pydantic import BaseModel


class Tier(str, Enum):
    """Billing tier enumeration."""

    FREE = "Free"
    PRO = "Pro"
    UNLIMITED = "Unlimited"


class BillingResponse(BaseModel):
    """The caller's billing tier and credits."""

    tier: Tier
    credits: str


class TierUpdate(BaseModel):
    """Schema for switching tier."""

    tier: Tier
