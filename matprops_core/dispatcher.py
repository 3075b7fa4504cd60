"""Channel selection, fallback and timing for a single UI session."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from .channels import Bridge, Channel, EmbeddedBridgeChannel, RemoteNetworkChannel
from .config import CoreConfig
from .errors import ChannelUnavailable, MatPropsError
from .models import BenchmarkedResultSlot, ChannelName, ComputationKind, ComputationRequest, Duration

logger = logging.getLogger(__name__)


class Dispatcher:
    """Runs computations on the embedded channel, or the remote one when it is absent.

    The dispatcher owns the session's ``BenchmarkedResultSlot``. A successful
    ``compute`` replaces it; a failed one leaves it exactly as it was.
    """

    def __init__(
        self,
        embedded: Channel,
        remote: Channel,
        *,
        fallback_on_embedded_error: bool = False,
        clock: Callable[[], int] = time.perf_counter_ns,
    ):
        self.embedded = embedded
        self.remote = remote
        self.fallback_on_embedded_error = fallback_on_embedded_error
        self._clock = clock
        self._slot = BenchmarkedResultSlot.empty()
        self._last_channel: Optional[ChannelName] = None

    @classmethod
    def from_config(cls, config: CoreConfig, bridge: Optional[Bridge] = None) -> "Dispatcher":
        return cls(
            EmbeddedBridgeChannel(bridge),
            RemoteNetworkChannel(config.base_url, config.timeout_s),
            fallback_on_embedded_error=config.fallback_on_embedded_error,
        )

    @property
    def slot(self) -> BenchmarkedResultSlot:
        return self._slot

    @property
    def last_channel(self) -> Optional[ChannelName]:
        """Channel that produced the current slot, ``None`` before the first success."""
        return self._last_channel

    async def compute(
        self, kind: ComputationKind, request: ComputationRequest
    ) -> Optional[BenchmarkedResultSlot]:
        """Return the new slot, or ``None`` if the computation failed."""

        try:
            kind.check_request(request)
        except MatPropsError as exc:
            logger.warning("Rejected %s request: %s", kind.command, exc)
            return None

        if self.embedded.is_available():
            logger.debug("Invoking %s on embedded bridge", kind.command)
            try:
                response = await self.embedded.attempt_invoke(kind, request)
            except ChannelUnavailable as exc:
                logger.debug("Embedded bridge went away (%s); routing to remote", exc)
            except MatPropsError as exc:
                logger.warning("Embedded computation of %s failed: %s", kind.command, exc)
                # an error from a present host is authoritative
                if not self.fallback_on_embedded_error:
                    return None
            else:
                if response.reported_timing is not None:
                    logger.debug("Native host reported %s for %s", response.reported_timing, kind.command)
                return self._accept(BenchmarkedResultSlot(response.values, Duration.zero()), self.embedded.name)
        else:
            logger.debug("Embedded bridge absent; using remote channel for %s", kind.command)

        slot = await self._try_remote(kind, request)
        if slot is None:
            logger.warning("Failed to compute %s: no channel produced a result", kind.command)
            return None
        return self._accept(slot, self.remote.name)

    async def _try_remote(
        self, kind: ComputationKind, request: ComputationRequest
    ) -> Optional[BenchmarkedResultSlot]:
        logger.debug("Invoking %s on remote channel", kind.command)
        started = self._clock()
        try:
            response = await self.remote.attempt_invoke(kind, request)
        except MatPropsError as exc:
            logger.warning("Remote computation of %s failed: %s", kind.command, exc)
            return None
        elapsed = self._clock() - started
        return BenchmarkedResultSlot(response.values, Duration.from_nanoseconds(elapsed))

    def _accept(self, slot: BenchmarkedResultSlot, channel: ChannelName) -> BenchmarkedResultSlot:
        self._slot = slot
        self._last_channel = channel
        logger.info("Computed %d values via %s channel in %s", len(slot.value), channel, slot.timing)
        return slot
