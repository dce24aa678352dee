"""RPC surface package."""

from expense_tracker.api.app import create_app, router

__all__ = ["create_app", "router"]
