"""Binding report rendering."""

from .writer import FORMATS, ReportOptions, ReportResult, render_report

__all__ = ["FORMATS", "ReportOptions", "ReportResult", "render_report"]
