"""Helpers for sizing test buffers and reading whitespace-separated data files."""

from __future__ import annotations

import os
from typing import Callable, Iterator, Sequence, TypeVar, Union

T = TypeVar("T")

BUFFER_CAPACITY_KB = 128

PathLike = Union[str, "os.PathLike[str]"]


class BufferTooLargeError(ValueError):
    """A buffer is larger than the test harness channel can hold."""


def num_bytes(values: Sequence[object], item_size: int) -> int:
    """Size in bytes of a sequence of items that are item_size bytes each."""
    return len(values) * item_size


def check_size(name: str, values: Sequence[object], item_size: int) -> None:
    """Raise BufferTooLargeError if the buffer exceeds the harness capacity."""
    size_kb = num_bytes(values, item_size) // 1024
    if size_kb > BUFFER_CAPACITY_KB:
        raise BufferTooLargeError(
            f"size of {name} ({size_kb}KB) exceeds the capacity of test harness "
            f"buffers ({BUFFER_CAPACITY_KB}KB)."
        )


def _parsed_tokens(path: PathLike, kind: Callable[[str], T]) -> Iterator[T]:
    try:
        handle = open(path, encoding="utf-8")
    except OSError as exc:
        raise OSError(f"Failed to open data file {os.fspath(path)} for reading") from exc
    with handle:
        for line in handle:
            for token in line.split():
                try:
                    yield kind(token)
                except ValueError:
                    return


def read_values(path: PathLike, kind: Callable[[str], T] = float) -> list[T]:
    """Read values up to the end of the file or the first token that does not parse."""
    return list(_parsed_tokens(path, kind))


def read_complex_values(
    path: PathLike, kind: Callable[[str], float] = float
) -> list[complex]:
    """Read real/imaginary pairs; a trailing lone value gets an imaginary part of zero."""
    tokens = _parsed_tokens(path, kind)
    result = []
    for real in tokens:
        imag = next(tokens, 0)
        result.append(complex(real, imag))
    return result