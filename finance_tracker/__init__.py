"""
Finance Tracker - Source Package

A personal finance ledger: income and expense transactions, monthly
category budgets, savings goals and an optional Gemini-backed advisor.

DESIGN PRINCIPLES:
1. One explicit ledger store, passed to whoever needs it
2. Every mutation persists the full collection (last write wins)
3. Nothing matched is never an error
4. Advisory failures always reach the caller
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Finance Tracker Team"
