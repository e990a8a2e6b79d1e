"""Org-chart ingestion, hierarchy reconciliation and analytics pipeline."""

__version__ = "0.3.0"
