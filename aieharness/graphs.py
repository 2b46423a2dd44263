"""Dataflow models of the example graphs: an int32 adder and a bfloat16 normaliser."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence, TypeVar

from aieharness.kernels import (
    ADDER_BLOCK,
    DeviationKernel,
    MeanKernel,
    NormKernel,
    aie_adder,
)

T = TypeVar("T")

PLIO_WIDTH_BITS = 128


@dataclass(frozen=True)
class Plio:
    """A programmable-logic port of a graph, bound to a harness channel name."""

    name: str
    data_file: str
    width_bits: int = PLIO_WIDTH_BITS


def _blocks(values: Sequence[T], size: int, count: int) -> Iterator[Sequence[T]]:
    needed = size * count
    if count < 0:
        raise ValueError("the number of iterations must not be negative")
    if len(values) < needed:
        raise ValueError(f"{needed} values are needed, got {len(values)}")
    for start in range(0, needed, size):
        yield values[start : start + size]


class AdderGraph:
    """Two input ports added element by element into one output port."""

    block_size = ADDER_BLOCK

    def __init__(self) -> None:
        self.pl_in0 = Plio("PLIO_01_TO_AIE", "data/DataIn0.txt")
        self.pl_in1 = Plio("PLIO_03_TO_AIE", "data/DataIn1.txt")
        self.pl_out = Plio("PLIO_02_FROM_AIE", "data/DataOut0.txt")
        self.inputs = (self.pl_in0, self.pl_in1)
        self.outputs = (self.pl_out,)

    def run(
        self, in0: Sequence[int], in1: Sequence[int], iterations: int = 1
    ) -> list[int]:
        """Run the graph for the given number of iterations and return the sums."""
        out: list[int] = []
        for block0, block1 in zip(
            _blocks(in0, self.block_size, iterations),
            _blocks(in1, self.block_size, iterations),
        ):
            out.extend(aie_adder(block0, block1))
        return out


class NormalizationGraph:
    """Mean, deviation and normalisation kernels fed from one shared frame buffer."""

    def __init__(
        self, cols: int = 256, rows: int = 384, k_cols: int = 256, k_rows: int = 64
    ) -> None:
        if min(cols, rows, k_cols, k_rows) <= 0:
            raise ValueError("all dimensions must be positive")
        block = k_cols * k_rows
        if (cols * rows) % block:
            raise ValueError("the frame must hold a whole number of kernel blocks")
        self.cols = cols
        self.rows = rows
        self.k_cols = k_cols
        self.k_rows = k_rows
        self.repeat = cols * rows // block
        self.block_size = block
        self.frame_size = cols * rows
        self.k_mean = MeanKernel(k_cols, k_rows, self.repeat)
        self.k_deviation = DeviationKernel(k_cols, k_rows, self.repeat)
        self.k_norm = NormKernel(k_cols, k_rows, self.repeat)
        self.inp = Plio("PLIO_01_TO_AIE", "data/input0.csv")
        self.out = Plio("PLIO_02_FROM_AIE", "data/output0.txt")
        self.inputs = (self.inp,)
        self.outputs = (self.out,)

    def _normalise_frame(self, frame: Sequence[float]) -> list[float]:
        blocks = list(_blocks(frame, self.block_size, self.repeat))
        mean = None
        for block in blocks:
            result = self.k_mean.process(block)
            if result is not None:
                mean = result
        mean_dev = None
        for index, block in enumerate(blocks):
            result = self.k_deviation.process(block, mean if index == 0 else None)
            if result is not None:
                mean_dev = result
        out: list[float] = []
        for index, block in enumerate(blocks):
            out.extend(self.k_norm.process(block, mean_dev if index == 0 else None))
        return out

    def run(self, values: Sequence[float], iterations: int = 4) -> list[float]:
        """Normalise `iterations` frames of cols x rows values, one after another."""
        out: list[float] = []
        for frame in _blocks(values, self.frame_size, iterations):
            out.extend(self._normalise_frame(frame))
        return out