"""Filtering and summary package."""

from expense_tracker.queries.filters import apply_filter, matches_filter, summarize

__all__ = ["apply_filter", "matches_filter", "summarize"]
