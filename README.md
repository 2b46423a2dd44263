# aieharness

Pure-Python models of small streaming vector kernels, the dataflow graphs
that wire them together, and the host-side drivers that feed a test harness
manager and check what comes back. Use it to reason about a design, to make
reference data, or to exercise a test flow in plain Python.

## Modules

### `aieharness.kernels`

- `aie_adder(in0, in1)` adds two blocks of exactly 4096 integers element by
  element, wrapping the sums to signed 32-bit. Any other block length raises
  `ValueError`.
- `to_bfloat16(value)` rounds a number to the nearest bfloat16 value, ties to
  even.
- `MeanKernel`, `DeviationKernel` and `NormKernel` are the three stages of a
  bfloat16 normalisation pipeline. Each is built with `(cols, rows, repeat)`;
  `cols` must be a positive multiple of 32, and every `process` call takes one
  block of `cols * rows` values (rounded to bfloat16 on the way in).
  - `MeanKernel.process(block)` accumulates and returns `None` until the
    `repeat`-th block, when it returns the bfloat16 mean of all blocks and
    starts over.
  - `DeviationKernel.process(block, mean)` needs `mean` on the first block of
    each run. On the `repeat`-th block it returns `(mean, deviation)`, the
    standard deviation rounded to bfloat16; otherwise `None`.
  - `NormKernel.process(block, mean_dev)` needs the `(mean, deviation)` pair
    on the first block of each run and returns the block with the mean taken
    away and divided by the deviation. A deviation below `1e-5` is raised to
    `1e-5` (in bfloat16).

### `aieharness.graphs`

- `Plio` is a frozen dataclass naming a graph port: `name`, `data_file` and
  `width_bits` (128 by default).
- `AdderGraph()` has the ports `pl_in0`, `pl_in1` and `pl_out`.
  `run(in0, in1, iterations=1)` feeds `iterations` blocks of 4096 values from
  each input through `aie_adder` and returns the sums.
- `NormalizationGraph(cols=256, rows=384, k_cols=256, k_rows=64)` splits each
  `cols x rows` frame into `k_cols x k_rows` blocks and runs them through the
  mean, deviation and norm kernels. `run(values, iterations=4)` normalises
  `iterations` frames one after another and returns the results. Too few
  values, non-positive dimensions, or a frame that is not a whole number of
  blocks raise `ValueError`.

### `aieharness.hosts`

- `parse_host_args(argv=None)` reads
  `<xclbin> [iterations] [repetitions] [delay]` into a `HostOptions`
  (defaults 1, 1 and 0). Numbers are read like C's `atoi`: a leading integer
  is taken and anything unreadable counts as 0. A missing xclbin path raises
  `ValueError`.
- `make_adder_inputs(num_values, seed=None)` returns two lists of random
  integers in `[-50, 50)`.
- `check_adder_result(a, b, s)` returns one error message for every `s[i]`
  that differs from `a[i] + b[i]`.
- `adder_summary(options, num_values)` formats the banner printed before the
  adder runs.
- `run_adder(manager, options, seed=None)` runs the adder in function mode
  (skipped when the repetition count is not 1) and then in performance mode,
  checks the output, prints the outcome and returns the number of errors.
- `run_normalization(manager, options)` runs the normaliser once in
  performance mode. Its output is not checked, so it always returns 0.
- `ChannelArg` describes one harness channel: `channel`, `size_in_bytes`,
  `repetition`, `delay` and the `data` buffer. Output channels get a
  `bytearray` that the manager is expected to fill.

The `manager` passed to the run functions is any object with the methods
`run_aie_graph(g_idx, iters)`, `run_test_harness(mode, args)`,
`wait_for_res(timeout_millisec)`, `print_perf()` and `is_result_valid()`.

### `aieharness.datafile`

- `read_values(path, kind=float)` reads whitespace-separated values, stopping
  at the end of the file or at the first token `kind` cannot parse. A file
  that cannot be opened raises `OSError`.
- `read_complex_values(path, kind=float)` pairs the values up as real and
  imaginary parts; a trailing lone value gets an imaginary part of zero.
- `num_bytes(values, item_size)` is the size of a buffer in bytes.
- `check_size(name, values, item_size)` raises `BufferTooLargeError` (a
  `ValueError`) when a buffer is more than 128 KB.

## Example

```python
from aieharness.kernels import aie_adder
from aieharness.graphs import NormalizationGraph

total = aie_adder(list(range(4096)), [1] * 4096)

graph = NormalizationGraph(256, 384, 256, 64)
normalized = graph.run([float(i % 97) for i in range(256 * 384)], 1)
```

## What it does not do

The package has no command-line program, and it does not include a test
harness manager: it does not open network connections or talk to any device.
The host drivers work only with a manager object you supply.

## Running the tests

The tests use pytest and live in `tests/`; install the `test` extra to get it.