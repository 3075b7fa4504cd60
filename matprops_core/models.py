"""Domain models for the material-properties compute core."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Literal, Mapping, Optional, Tuple

from .errors import RequestShapeError

ChannelName = Literal["embedded", "remote"]
ComputationResult = Tuple[float, ...]

NANOS_PER_SECOND = 1_000_000_000


@dataclass(frozen=True)
class KindSpec:
    """Wire routing and result layout of one computation kind."""

    arity: int
    required_parameters: Tuple[str, ...]
    labels: Tuple[str, ...]


_HONEYCOMB_GEOMETRY = ("l_cell_side_size", "h_cell_side_size", "wall_thickness", "angle")
_ALPHAS = ("α1", "α2", "α3")


class ComputationKind(str, Enum):
    """Analytical model category; the value is the bridge command name."""

    THERMAL_EXPANSION_FOR_HONEYCOMB = "thermal_expansion_for_honeycomb"
    ELASTIC_MODULES_FOR_HONEYCOMB = "elastic_modules_for_honeycomb"
    THERMAL_EXPANSION_FOR_UNIDIRECTIONAL_COMPOSITE = "thermal_expansion_for_unidirectional_composite"
    THERMAL_CONDUCTIVITY_FOR_UNIDIRECTIONAL_COMPOSITE = "thermal_conductivity_for_unidirectional_composite"

    @property
    def command(self) -> str:
        return self.value

    @property
    def spec(self) -> KindSpec:
        return _KIND_SPECS[self]

    @property
    def arity(self) -> int:
        return self.spec.arity

    @property
    def labels(self) -> Tuple[str, ...]:
        return self.spec.labels

    def check_request(self, request: "ComputationRequest") -> None:
        """Raise ``RequestShapeError`` if ``request`` lacks a parameter this kind needs."""

        missing = [name for name in self.spec.required_parameters if name not in request.parameters]
        if missing:
            raise RequestShapeError(f"{self.command}: missing parameters {', '.join(missing)}.")


_KIND_SPECS: Dict[ComputationKind, KindSpec] = {
    ComputationKind.THERMAL_EXPANSION_FOR_HONEYCOMB: KindSpec(
        arity=3,
        required_parameters=_HONEYCOMB_GEOMETRY + ("alpha_for_honeycomb",),
        labels=_ALPHAS,
    ),
    ComputationKind.ELASTIC_MODULES_FOR_HONEYCOMB: KindSpec(
        arity=9,
        required_parameters=_HONEYCOMB_GEOMETRY + ("e_for_honeycomb", "nu_for_honeycomb"),
        labels=("E1", "E2", "E3", "ν12", "ν13", "ν23", "G12", "G13", "G23"),
    ),
    ComputationKind.THERMAL_EXPANSION_FOR_UNIDIRECTIONAL_COMPOSITE: KindSpec(
        arity=3,
        required_parameters=(
            "fiber_content",
            "e_for_fiber",
            "nu_for_fiber",
            "alpha_for_fiber",
            "e_for_matrix",
            "nu_for_matrix",
            "alpha_for_matrix",
        ),
        labels=_ALPHAS,
    ),
    ComputationKind.THERMAL_CONDUCTIVITY_FOR_UNIDIRECTIONAL_COMPOSITE: KindSpec(
        arity=3,
        required_parameters=("fiber_content", "k_for_fiber", "k_for_matrix"),
        labels=("k1", "k2", "k3"),
    ),
}


@dataclass(frozen=True)
class ComputationRequest:
    """Model number plus named float parameters, fixed at construction."""

    model_number: int
    parameters: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if isinstance(self.model_number, bool) or not isinstance(self.model_number, int):
            raise RequestShapeError(f"model number must be an integer, got {self.model_number!r}.")
        if self.model_number < 1:
            raise RequestShapeError(f"model number must be >= 1, got {self.model_number}.")

        frozen: Dict[str, float] = {}
        for name, value in dict(self.parameters).items():
            if not isinstance(name, str) or not name:
                raise RequestShapeError(f"parameter names must be non-empty strings, got {name!r}.")
            if isinstance(value, bool):
                raise RequestShapeError(f"parameter '{name}' must be numeric, got a bool.")
            try:
                frozen[name] = float(value)
            except (TypeError, ValueError):
                raise RequestShapeError(f"parameter '{name}' has non-numeric value {value!r}.")
        object.__setattr__(self, "parameters", MappingProxyType(frozen))

    def to_payload(self) -> Dict[str, Any]:
        """Flat camelCase mapping sent over both channels."""

        payload: Dict[str, Any] = {"numberOfModel": self.model_number}
        for name, value in self.parameters.items():
            payload[_camel_case(name)] = value
        return payload


def _camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


@dataclass(frozen=True, order=True)
class Duration:
    """Elapsed wall-clock time split into whole seconds and nanoseconds."""

    seconds: int = 0
    nanoseconds: int = 0

    def __post_init__(self) -> None:
        if self.seconds < 0:
            raise ValueError("Duration seconds must be non-negative.")
        if not 0 <= self.nanoseconds < NANOS_PER_SECOND:
            raise ValueError("Duration nanoseconds must lie in [0, 1e9).")

    @classmethod
    def zero(cls) -> "Duration":
        return cls(0, 0)

    @classmethod
    def from_nanoseconds(cls, total: int) -> "Duration":
        seconds, nanos = divmod(max(int(total), 0), NANOS_PER_SECOND)
        return cls(seconds, nanos)

    @classmethod
    def from_wire(cls, raw: Mapping[str, Any]) -> "Duration":
        """Build from a ``{"secs": .., "nanos": ..}`` mapping as sent by the native host."""

        return cls(int(raw["secs"]), int(raw["nanos"]))

    @property
    def is_zero(self) -> bool:
        return self.seconds == 0 and self.nanoseconds == 0

    def total_seconds(self) -> float:
        return self.seconds + self.nanoseconds / NANOS_PER_SECOND

    def __str__(self) -> str:
        return f"{self.seconds}.{self.nanoseconds:09d} s"


@dataclass(frozen=True)
class BenchmarkedResultSlot:
    """Computed values with the time it took to get them."""

    value: ComputationResult = ()
    timing: Duration = field(default_factory=Duration.zero)

    @classmethod
    def empty(cls) -> "BenchmarkedResultSlot":
        return cls()

    @property
    def is_empty(self) -> bool:
        return len(self.value) == 0


@dataclass(frozen=True)
class ChannelResponse:
    """Normalized channel output plus any timing the host reported itself."""

    values: ComputationResult
    reported_timing: Optional[Duration] = None
