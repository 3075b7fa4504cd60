"""Compute dispatcher for analytical material-property models."""

from .models import BenchmarkedResultSlot, ChannelResponse, ComputationKind, ComputationRequest, Duration
from .errors import (
    ArityMismatch,
    ChannelError,
    ChannelInvocationError,
    ChannelMalformedResponse,
    ChannelUnavailable,
    ConfigError,
    EncoderInitFailure,
    ExportError,
    ExportUnavailable,
    MatPropsError,
    RequestShapeError,
)
from .normalizer import normalize, split_response
from .channels import DEFAULT_BASE_URL, EmbeddedBridgeChannel, RemoteNetworkChannel
from .config import CoreConfig, configure_logging, load_config
from .dispatcher import Dispatcher
from .export import ExportPipeline, XlsxEncoder

__all__ = [
    "ArityMismatch",
    "BenchmarkedResultSlot",
    "ChannelError",
    "ChannelInvocationError",
    "ChannelMalformedResponse",
    "ChannelResponse",
    "ChannelUnavailable",
    "ComputationKind",
    "ComputationRequest",
    "ConfigError",
    "CoreConfig",
    "DEFAULT_BASE_URL",
    "Dispatcher",
    "Duration",
    "EmbeddedBridgeChannel",
    "EncoderInitFailure",
    "ExportError",
    "ExportPipeline",
    "ExportUnavailable",
    "MatPropsError",
    "RemoteNetworkChannel",
    "RequestShapeError",
    "XlsxEncoder",
    "configure_logging",
    "load_config",
    "normalize",
    "split_response",
]
