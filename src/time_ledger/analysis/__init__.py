"""Reporting over the time log."""

from time_ledger.analysis.reports import ProjectReport, ReportAggregator, parse_since_date

__all__ = ["ProjectReport", "ReportAggregator", "parse_since_date"]
