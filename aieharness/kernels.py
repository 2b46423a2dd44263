"""Reference models of the vector kernels used by the example graphs."""

from __future__ import annotations

import math
import struct
from typing import Iterable, Optional, Sequence, Tuple

VECTOR_LANES = 32
ADDER_BLOCK = 4096
_INT32_MASK = 0xFFFFFFFF
_MIN_DEVIATION_INPUT = 0.00001


def to_bfloat16(value: float) -> float:
    """Round a number to the nearest bfloat16 value (ties to even)."""
    value = float(value)
    if math.isnan(value) or math.isinf(value):
        return value
    try:
        bits = struct.unpack("<I", struct.pack("<f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)
    bits += 0x7FFF + ((bits >> 16) & 1)
    bits &= 0xFFFF0000
    return struct.unpack("<f", struct.pack("<I", bits & _INT32_MASK))[0]


def _to_float32(value: float) -> float:
    """Round a number to the nearest IEEE single precision value."""
    if math.isnan(value) or math.isinf(value):
        return value
    try:
        return struct.unpack("<f", struct.pack("<f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def _wrap_int32(value: int) -> int:
    value &= _INT32_MASK
    return value - (1 << 32) if value & 0x80000000 else value


def aie_adder(in0: Sequence[int], in1: Sequence[int]) -> list[int]:
    """Add two blocks of 4096 int32 values element by element, wrapping on overflow."""
    if len(in0) != ADDER_BLOCK or len(in1) != ADDER_BLOCK:
        raise ValueError(f"adder inputs must hold exactly {ADDER_BLOCK} values")
    return [_wrap_int32(int(a) + int(b)) for a, b in zip(in0, in1)]


def _vectors(values: Sequence[float]) -> Iterable[Tuple[float, ...]]:
    return zip(*[iter(values)] * VECTOR_LANES)


class _BlockKernel:
    """Shared state of the kernels that process a block of cols x rows values."""

    def __init__(self, cols: int, rows: int, repeat: int) -> None:
        if cols <= 0 or cols % VECTOR_LANES:
            raise ValueError(f"cols must be a positive multiple of {VECTOR_LANES}")
        if rows <= 0:
            raise ValueError("rows must be positive")
        if repeat <= 0:
            raise ValueError("repeat must be positive")
        self.cols = cols
        self.rows = rows
        self.repeat = repeat
        self.iteration = 0

    @property
    def block_size(self) -> int:
        return self.cols * self.rows

    def _take(self, block: Sequence[float]) -> list[float]:
        if len(block) != self.block_size:
            raise ValueError(
                f"block must hold {self.block_size} values, got {len(block)}"
            )
        return [to_bfloat16(v) for v in block]


class _AccumulatingKernel(_BlockKernel):
    def __init__(self, cols: int, rows: int, repeat: int) -> None:
        super().__init__(cols, rows, repeat)
        self._acc = [0.0] * VECTOR_LANES

    def _accumulate(self, vector: Iterable[float]) -> None:
        self._acc = [_to_float32(a + v) for a, v in zip(self._acc, vector)]

    def _average(self) -> float:
        total = _to_float32(math.fsum(self._acc))
        return _to_float32(total / self.rows / self.cols / self.repeat)

    def _restart(self) -> None:
        self._acc = [0.0] * VECTOR_LANES
        self.iteration = 0


class MeanKernel(_AccumulatingKernel):
    """Accumulates blocks and yields their bfloat16 mean after `repeat` blocks."""

    def __init__(self, cols: int, rows: int, repeat: int) -> None:
        super().__init__(cols, rows, repeat)

    def process(self, block: Sequence[float]) -> Optional[float]:
        """Consume one block; return the mean once the last block is seen, else None."""
        values = self._take(block)
        self.iteration += 1
        for vector in _vectors(values):
            self._accumulate(vector)
        if self.iteration != self.repeat:
            return None
        result = to_bfloat16(self._average())
        self._restart()
        return result


class DeviationKernel(_AccumulatingKernel):
    """Accumulates squared distances from the mean; yields (mean, deviation)."""

    def __init__(self, cols: int, rows: int, repeat: int) -> None:
        super().__init__(cols, rows, repeat)
        self.mean = 0.0

    def process(
        self, block: Sequence[float], mean: Optional[float] = None
    ) -> Optional[Tuple[float, float]]:
        """Consume one block; the mean is read on the first block of each run."""
        values = self._take(block)
        if self.iteration == 0:
            if mean is None:
                raise ValueError("the mean is required on the first block of a run")
            self.mean = to_bfloat16(mean)
        self.iteration += 1
        for vector in _vectors(values):
            diffs = [to_bfloat16(v - self.mean) for v in vector]
            self._accumulate(_to_float32(d * d) for d in diffs)
        if self.iteration != self.repeat:
            return None
        variance = self._average()
        result = (self.mean, to_bfloat16(math.sqrt(variance)))
        self._restart()
        return result


class NormKernel(_BlockKernel):
    """Normalises blocks with the (mean, deviation) pair read at the start of a run."""

    def __init__(self, cols: int, rows: int, repeat: int) -> None:
        super().__init__(cols, rows, repeat)
        self.mean = 0.0
        self.deviation = 0.0

    def process(
        self,
        block: Sequence[float],
        mean_dev: Optional[Tuple[float, float]] = None,
    ) -> list[float]:
        """Return the block with the mean removed and divided by the deviation."""
        values = self._take(block)
        if self.iteration == 0:
            if mean_dev is None:
                raise ValueError(
                    "the mean and deviation are required on the first block of a run"
                )
            mean, deviation = mean_dev
            self.mean = to_bfloat16(mean)
            self.deviation = to_bfloat16(deviation)
            floor = to_bfloat16(_MIN_DEVIATION_INPUT)
            if self.deviation < floor:
                self.deviation = floor
        self.iteration += 1
        out = [to_bfloat16(to_bfloat16(v - self.mean) / self.deviation) for v in values]
        if self.iteration == self.repeat:
            self.iteration = 0
        return out