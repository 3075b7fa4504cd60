"""Spreadsheet export of computed results."""

from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Any, Optional, Protocol, Union

import numpy as np
import pandas as pd

from .config import CoreConfig
from .errors import ArityMismatch, EncoderInitFailure, ExportUnavailable
from .models import BenchmarkedResultSlot, ComputationKind

logger = logging.getLogger(__name__)


class Encoder(Protocol):
    async def initialize(self) -> None: ...

    def download(self, kind: ComputationKind, buffer: np.ndarray) -> Path: ...


class XlsxEncoder:
    """Writes a kind-tagged float64 buffer to ``results_for_<command>.xlsx``."""

    engine = "openpyxl"

    def __init__(self, output_dir: Union[str, Path] = "."):
        self.output_dir = Path(output_dir)
        self._openpyxl: Optional[Any] = None

    async def initialize(self) -> None:
        self._openpyxl = importlib.import_module(self.engine)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, kind: ComputationKind) -> Path:
        return self.output_dir / f"results_for_{kind.command}.xlsx"

    def download(self, kind: ComputationKind, buffer: np.ndarray) -> Path:
        if self._openpyxl is None:
            raise RuntimeError("XlsxEncoder.download() called before initialize().")
        if buffer.dtype != np.float64 or buffer.shape != (kind.arity,):
            raise ValueError(
                f"{kind.command}: expected float64 buffer of length {kind.arity}, "
                f"got {buffer.dtype} with shape {buffer.shape}."
            )

        table = pd.DataFrame({"quantity": list(kind.labels), "value": buffer})
        path = self.path_for(kind)
        with pd.ExcelWriter(path, engine=self.engine) as writer:
            table.to_excel(writer, index=False, sheet_name="Results")
            sheet = writer.sheets["Results"]
            sheet.column_dimensions["A"].width = 12
            sheet.column_dimensions["B"].width = 24
            for (cell,) in sheet.iter_rows(min_row=2, min_col=2, max_col=2):
                cell.number_format = "0.0000000000"
        logger.info("Wrote %s results to %s", kind.command, path)
        return path


class ExportPipeline:
    """Copies a slot value into a float64 buffer and hands it to the encoder.

    The encoder is initialized on first export and reused afterwards. A
    failed initialization is reported and retried on the next export.
    """

    def __init__(self, encoder: Optional[Encoder] = None):
        self.encoder: Encoder = encoder if encoder is not None else XlsxEncoder()
        self._ready = False

    @classmethod
    def from_config(cls, config: CoreConfig) -> "ExportPipeline":
        return cls(XlsxEncoder(config.export_dir))

    @property
    def ready(self) -> bool:
        return self._ready

    async def ensure_initialized(self) -> None:
        if self._ready:
            return
        try:
            await self.encoder.initialize()
        except Exception as exc:
            raise EncoderInitFailure(f"spreadsheet encoder failed to initialize: {exc}") from exc
        self._ready = True
        logger.debug("Spreadsheet encoder initialized")

    async def export_result(self, kind: ComputationKind, slot: BenchmarkedResultSlot) -> Path:
        """Encode ``slot.value`` for ``kind`` and return the saved file's path."""

        if slot.is_empty:
            raise ExportUnavailable("nothing to export: no result has been computed yet.")
        if len(slot.value) != kind.arity:
            raise ArityMismatch(kind.arity, len(slot.value))

        buffer = np.zeros(kind.arity, dtype=np.float64)
        buffer[:] = slot.value

        await self.ensure_initialized()
        return self.encoder.download(kind, buffer)
