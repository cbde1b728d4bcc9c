"""Delivery transport interface and the ordered fallback combinator."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol

from ..delivery.delivery_models import (
    TransportFailureReason,
    TransportName,
    TransportResult,
)
from ..delivery.naming import StoredAssetName

logger = logging.getLogger(__name__)


class DeliveryTransport(Protocol):
    """Anything able to place a payload on remote hosting under a given name."""

    name: TransportName

    async def deliver(
        self, payload: bytes, stored: StoredAssetName
    ) -> TransportResult:
        """Store ``payload``; failures are reported in the result, never raised."""
        ...


@dataclass(slots=True)
class FallbackReport:
    """Successful result (if any) plus every failed attempt in order."""

    result: TransportResult | None
    failures: list[TransportResult] = field(default_factory=list)


@dataclass(slots=True)
class OrderedFallback:
    """Try transports in a fixed order and stop at the first success."""

    transports: Sequence[DeliveryTransport]

    async def deliver(self, payload: bytes, stored: StoredAssetName) -> FallbackReport:
        failures: list[TransportResult] = []
        for transport in self.transports:
            try:
                result = await transport.deliver(payload, stored)
            except Exception as exc:
                # A raising transport counts as a network failure.
                logger.exception(
                    "delivery.fallback.transport_raised",
                    extra={"transport": transport.name.value, "stored_name": stored.file_name},
                )
                result = TransportResult.failed(
                    transport.name,
                    TransportFailureReason.NETWORK,
                    f"{transport.name.value} transport error: {exc}",
                )
            if result.success:
                return FallbackReport(result=result, failures=failures)
            if len(failures) + 1 < len(self.transports):
                logger.warning(
                    "delivery.fallback.next_transport",
                    extra={
                        "failed_transport": result.transport.value,
                        "reason": result.reason.value if result.reason else None,
                        "stored_name": stored.file_name,
                    },
                )
            failures.append(result)
        return FallbackReport(result=None, failures=failures)
