"""Delimited channel report generation."""

from .csv_report import ReportBuilder, find_channel_files, sanitize_description

__all__ = ["ReportBuilder", "find_channel_files", "sanitize_description"]
