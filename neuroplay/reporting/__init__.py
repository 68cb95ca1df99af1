"""Reporting utilities for neuroplay."""

from .artifacts import describe_layers, git_sha, write_manifest
from .metrics import MetricsWriter
from .plots import PlotAdapter, plot_decision_boundary
from .summary import write_summary

__all__ = [
    "MetricsWriter",
    "PlotAdapter",
    "describe_layers",
    "git_sha",
    "plot_decision_boundary",
    "write_manifest",
    "write_summary",
]
