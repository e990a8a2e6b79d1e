"""Shared utilities for the org-chart pipeline."""
