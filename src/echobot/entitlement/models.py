from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_PRODUCT_ID = "com.echobot.monthlysubscription"


class SubscriptionRecord(BaseModel):
    """A purchase record as reported by the platform store.

    ``verified`` reflects the platform's own signature check; it is
    consumed here, not re-computed.
    """

    model_config = ConfigDict(frozen=True)

    product_id: str
    expires_at: datetime | None = None
    verified: bool = True

    @field_validator("expires_at")
    @classmethod
    def assume_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class EntitlementState(BaseModel):
    """Result of the most recent entitlement check."""

    model_config = ConfigDict(frozen=True)

    entitled: bool = False
    product_id: str | None = None
    expires_at: datetime | None = None
    checked_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
