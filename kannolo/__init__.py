"""Quantizers, query evaluators, top-k selection, code packing and recall helpers for nearest neighbour search."""

__version__ = "0.3.1"