"""Invocation channels: the embedded native bridge and the remote HTTP endpoint."""

from __future__ import annotations

import asyncio
import http.client
import json
import logging
from typing import Any, Awaitable, Mapping, Optional, Protocol
from urllib import error as url_error
from urllib import request as url_request

from .errors import ChannelError, ChannelInvocationError, ChannelUnavailable
from .models import ChannelName, ChannelResponse, ComputationKind, ComputationRequest
from .normalizer import normalize, split_response

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://127.0.0.1:8000"


class Bridge(Protocol):
    """Request/response bridge into a co-located native host."""

    def invoke(self, command: str, payload: Mapping[str, Any]) -> Awaitable[Any]: ...


class Channel(Protocol):
    name: ChannelName

    def is_available(self) -> bool: ...

    async def attempt_invoke(self, kind: ComputationKind, request: ComputationRequest) -> ChannelResponse: ...


class EmbeddedBridgeChannel:
    """Calls the native host through an injected bridge, if the host provides one."""

    name: ChannelName = "embedded"

    def __init__(self, bridge: Optional[Bridge] = None):
        self._bridge = bridge

    def is_available(self) -> bool:
        return self._bridge is not None

    async def attempt_invoke(self, kind: ComputationKind, request: ComputationRequest) -> ChannelResponse:
        if self._bridge is None:
            raise ChannelUnavailable("embedded bridge is not present in this host.")

        try:
            raw = await self._bridge.invoke(kind.command, request.to_payload())
        except ChannelError:
            raise
        except Exception as exc:
            raise ChannelInvocationError(f"{kind.command}: native host raised {exc!r}") from exc

        values, reported_timing = split_response(raw)
        return ChannelResponse(normalize(values, kind.arity), reported_timing)


class RemoteNetworkChannel:
    """POSTs the request payload as JSON to ``base_url/<command>``."""

    name: ChannelName = "remote"

    def __init__(self, base_url: str = DEFAULT_BASE_URL, timeout_s: Optional[float] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s

    def is_available(self) -> bool:
        return True

    def url_for(self, kind: ComputationKind) -> str:
        return f"{self.base_url}/{kind.command}"

    async def attempt_invoke(self, kind: ComputationKind, request: ComputationRequest) -> ChannelResponse:
        body = await asyncio.to_thread(self._post, self.url_for(kind), request.to_payload())
        try:
            parsed = json.loads(body)
        except ValueError as exc:
            raise ChannelInvocationError(f"{kind.command}: response is not valid JSON") from exc

        values, _ = split_response(parsed)
        return ChannelResponse(normalize(values, kind.arity))

    def _post(self, url: str, payload: Mapping[str, Any]) -> str:
        req = url_request.Request(
            url,
            method="POST",
            data=json.dumps(payload).encode("utf-8"),
            headers={"Content-Type": "application/json", "Accept": "application/json"},
        )
        # without a configured timeout the socket module's default applies
        options = {} if self.timeout_s is None else {"timeout": self.timeout_s}
        logger.debug("POST %s", url)
        try:
            # urlopen raises HTTPError for non-2xx statuses; 1xx/3xx leftovers are rejected below
            with url_request.urlopen(req, **options) as resp:
                status = getattr(resp, "status", 200)
                if not 200 <= status < 300:
                    raise ChannelInvocationError(f"{url}: HTTP {status}")
                return resp.read().decode("utf-8")
        except url_error.HTTPError as exc:
            raise ChannelInvocationError(f"{url}: HTTP {exc.code}") from exc
        except (url_error.URLError, http.client.HTTPException, OSError, UnicodeDecodeError) as exc:
            raise ChannelInvocationError(f"{url}: {exc}") from exc
