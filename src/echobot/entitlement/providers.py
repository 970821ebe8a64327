"""Entitlement providers."""

import logging
from collections.abc import Awaitable, Callable, Sequence
from datetime import datetime, timezone

import httpx
from pydantic import ValidationError

from ..errors import EntitlementError
from .base import EntitlementProvider
from .models import DEFAULT_PRODUCT_ID, EntitlementState, SubscriptionRecord

logger = logging.getLogger(__name__)

RecordFetcher = Callable[[], Awaitable[Sequence[SubscriptionRecord]]]


class StaticEntitlementProvider(EntitlementProvider):
    """Fixed entitlement, for tests and builds without purchases."""

    def __init__(self, entitled: bool = False):
        self._state = EntitlementState(entitled=entitled)

    async def refresh(self) -> EntitlementState:
        self._state = EntitlementState(entitled=self._state.entitled)
        return self._state

    @property
    def state(self) -> EntitlementState:
        return self._state


class RecordEntitlementProvider(EntitlementProvider):
    """Derives entitlement from the platform's current subscription records.

    The first verified record for the product decides: the user is
    entitled while its expiry date lies in the future. Unverified records
    are ignored. Any failure to fetch records means "not entitled".
    """

    def __init__(
        self,
        fetch_records: RecordFetcher,
        product_id: str = DEFAULT_PRODUCT_ID,
        clock: Callable[[], datetime] | None = None,
    ):
        self._fetch_records = fetch_records
        self._product_id = product_id
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._state = EntitlementState(entitled=False)

    @property
    def state(self) -> EntitlementState:
        return self._state

    async def refresh(self) -> EntitlementState:
        try:
            records = await self._fetch_records()
        except EntitlementError as e:
            logger.error("Failed to update subscription status: %s", e)
            self._state = EntitlementState(entitled=False)
            return self._state
        except Exception:
            logger.exception("Subscription record fetch failed")
            self._state = EntitlementState(entitled=False)
            return self._state

        for record in records:
            if not record.verified:
                logger.warning("Ignoring unverified record for %s", record.product_id)
                continue
            if record.product_id != self._product_id:
                continue
            self._state = self._evaluate(record)
            return self._state

        logger.info("No active subscription found")
        self._state = EntitlementState(entitled=False)
        return self._state

    def _evaluate(self, record: SubscriptionRecord) -> EntitlementState:
        if record.expires_at is not None and record.expires_at > self._clock():
            logger.info("Valid subscription found, expires on %s", record.expires_at.isoformat())
            return EntitlementState(
                entitled=True,
                product_id=record.product_id,
                expires_at=record.expires_at,
            )
        logger.info("Subscription has expired or has no expiration date")
        return EntitlementState(entitled=False, product_id=record.product_id)

    async def close(self) -> None:
        close = getattr(self._fetch_records, "close", None)
        if close is not None:
            await close()


class HttpSubscriptionSource:
    """Fetches subscription records from a JSON endpoint.

    Expects ``{"records": [...]}`` or a bare list of records. Usable as the
    ``fetch_records`` callable of RecordEntitlementProvider.
    """

    def __init__(
        self,
        url: str,
        token: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._url = url
        self._client = httpx.AsyncClient(headers=headers, timeout=timeout, transport=transport)

    async def __call__(self) -> list[SubscriptionRecord]:
        try:
            response = await self._client.get(self._url)
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise EntitlementError(f"Could not fetch subscriptions from {self._url}: {e}") from e

        items = payload.get("records", []) if isinstance(payload, dict) else payload
        try:
            return [SubscriptionRecord.model_validate(item) for item in items]
        except (TypeError, ValidationError) as e:
            raise EntitlementError(f"Invalid subscription records from {self._url}: {e}") from e

    async def close(self) -> None:
        await self._client.aclose()
