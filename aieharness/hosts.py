"""Host-side drivers of the example graphs through a test harness manager."""

from __future__ import annotations

import random
import re
import struct
import sys
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence, Union

FUNC_MODE = 0
PERF_MODE = 1

PLIO_01_TO_AIE = 0
PLIO_03_TO_AIE = 2
PLIO_02_FROM_AIE = 37

INT_SIZE = 4
SHORT_SIZE = 2
ADDER_VALUES_PER_ITERATION = 4096
NORMALIZATION_VALUES_PER_ITERATION = 256 * 384

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class _HarnessManager(Protocol):
    def run_aie_graph(self, g_idx: int, iters: int) -> None: ...

    def run_test_harness(self, mode: int, args: Sequence["ChannelArg"]) -> None: ...

    def wait_for_res(self, timeout_millisec: int) -> None: ...

    def print_perf(self) -> None: ...

    def is_result_valid(self) -> bool: ...


@dataclass
class HostOptions:
    """Command line settings shared by the host programs."""

    xclbin_path: str
    iterations: int = 1
    repetitions: int = 1
    delay: int = 0


@dataclass
class ChannelArg:
    """One harness channel: its index, byte size, repetitions, delay and buffer."""

    channel: int
    size_in_bytes: int
    repetition: int
    delay: int
    data: Union[bytearray, bytes]


def _atoi(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def parse_host_args(argv: Optional[Sequence[str]] = None) -> HostOptions:
    """Parse `xclbin [iterations [repetitions [delay]]]`; unparsable numbers read as 0."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        raise ValueError("the path of the xclbin file is required")
    path, *numbers = args
    iterations = _atoi(numbers[0]) if len(numbers) >= 1 else 1
    repetitions = _atoi(numbers[1]) if len(numbers) >= 2 else 1
    delay = _atoi(numbers[2]) if len(numbers) >= 3 else 0
    return HostOptions(path, iterations, repetitions, delay)


def make_adder_inputs(
    num_values: int, seed: Optional[int] = None
) -> tuple[list[int], list[int]]:
    """Random operands in [-50, 50) for the adder."""
    rng = random.Random(seed)
    a: list[int] = []
    b: list[int] = []
    for _ in range(num_values):
        a.append(rng.randrange(100) - 50)
        b.append(rng.randrange(100) - 50)
    return a, b


def check_adder_result(
    a: Sequence[int], b: Sequence[int], s: Sequence[int]
) -> list[str]:
    """Return one error message for every sum that differs from a + b."""
    errors = []
    for i, (x, y, got) in enumerate(zip(a, b, s)):
        golden = x + y
        if got != golden:
            errors.append(f"ERROR: s[{i}] = {got} != {golden} = a[{i}] + b[{i}]")
    return errors


def adder_summary(options: HostOptions, num_values: int) -> str:
    """The banner printed before the adder example runs."""
    return "\n".join(
        [
            "Running example ADDER",
            f" - Number of graph iterations         : {options.iterations:8d}",
            f" - Number of values                   : {num_values:8d} "
            f"({num_values * INT_SIZE // 1024}KB)",
            f" - Number of repetitions              : {options.repetitions:8d}",
            f" - Number of graph iterations (total) : "
            f"{options.iterations * options.repetitions:8d}",
            f" - Channel delay                      : {options.delay:8d} cycles",
        ]
    )


def _normalization_summary(options: HostOptions, num_values: int) -> str:
    return "\n".join(
        [
            "Running example ADDER",
            f" - Number of graph iterations (func) : {options.iterations:8d}",
            f" - Number of graph iterations (perf) : "
            f"{options.iterations * options.repetitions:8d}",
            f" - Number of values                  : {num_values:8d} "
            f"({num_values * INT_SIZE // 1024}KB)",
            f" - Number of repetitions             : {options.repetitions:8d}",
            f" - Channel delay                     : {options.delay:8d} cycles",
        ]
    )


def _pack(fmt: str, values: Sequence[int]) -> bytearray:
    return bytearray(struct.pack(f"<{len(values)}{fmt}", *values))


def _unpack_int32(data: Union[bytes, bytearray]) -> list[int]:
    return list(struct.unpack(f"<{len(data) // INT_SIZE}i", bytes(data)))


def _wrap_int16(value: int) -> int:
    value &= 0xFFFF
    return value - 0x10000 if value & 0x8000 else value


def _report(error_count: int) -> None:
    if error_count:
        print(f"Test failed with {error_count} errors")
    else:
        print("TEST PASSED")


def run_adder(
    manager: _HarnessManager, options: HostOptions, seed: Optional[int] = None
) -> int:
    """Run the adder in function and performance mode; return the error count."""
    num_values = options.iterations * ADDER_VALUES_PER_ITERATION
    print(f"Using XCLBIN file: {options.xclbin_path}")
    a, b = make_adder_inputs(num_values, seed)
    print(adder_summary(options, num_values))

    size = num_values * INT_SIZE
    output = ChannelArg(
        PLIO_02_FROM_AIE, size, options.repetitions, options.delay, bytearray(size)
    )
    args = [
        ChannelArg(PLIO_01_TO_AIE, size, options.repetitions, options.delay, _pack("i", a)),
        ChannelArg(PLIO_03_TO_AIE, size, options.repetitions, options.delay, _pack("i", b)),
        output,
    ]

    error_count = 0
    for mode in (FUNC_MODE, PERF_MODE):
        if mode == FUNC_MODE:
            if options.repetitions != 1:
                print(
                    "Skipping example ADDER in function mode with num_repetitions != 1"
                )
                continue
            print("Testing Function mode.")
        else:
            print("Testing Performance mode.")

        manager.run_aie_graph(0, options.iterations * options.repetitions)
        manager.run_test_harness(mode, args)
        manager.wait_for_res(0)
        manager.print_perf()

        if not manager.is_result_valid():
            print(
                "[INFO]: Result checking is not valid if test size is beyond the "
                "capacity of URAM in each channel."
            )
        else:
            for message in check_adder_result(a, b, _unpack_int32(output.data)):
                error_count += 1
                print(message)
        _report(error_count)
    return error_count


def run_normalization(manager: _HarnessManager, options: HostOptions) -> int:
    """Run the normaliser in performance mode; its output is not checked."""
    num_values = options.iterations * NORMALIZATION_VALUES_PER_ITERATION
    print(f"Using XCLBIN file: {options.xclbin_path}")
    a = [_wrap_int16(i) for i in range(num_values)]
    print(_normalization_summary(options, num_values))

    size = num_values * SHORT_SIZE
    print("Running example NORMALIZATION_V2 in performance mode")
    args = [
        ChannelArg(PLIO_01_TO_AIE, size, options.repetitions, options.delay, _pack("h", a)),
        ChannelArg(
            PLIO_02_FROM_AIE, size, options.repetitions, options.delay, bytearray(size)
        ),
    ]
    manager.run_aie_graph(0, options.iterations * options.repetitions)
    manager.run_test_harness(PERF_MODE, args)
    manager.wait_for_res(0)
    manager.print_perf()

    if not manager.is_result_valid():
        print(
            "[INFO]: Result checking is not valid if test size is beyond the "
            "capacity of URAM in each channel."
        )
    error_count = 0
    _report(error_count)
    return error_count