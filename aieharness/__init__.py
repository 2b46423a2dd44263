"""Models of streaming vector kernels and graphs, data-file helpers and host test drivers."""

__version__ = "0.1.0"

__all__ = ["datafile", "graphs", "hosts", "kernels"]