"""Reconciliation service exports."""

from .service import ReconciliationNotImplementedError, reconcile_customer_lists

__all__ = ["ReconciliationNotImplementedError", "reconcile_customer_lists"]
