"""
Expense Tracker - Source Package

A small personal expense tracker: record what you spent, when, on what,
and list it back by category, month or year.

DESIGN PRINCIPLES:
1. Every input is validated before it reaches storage
2. Storage encodings never leak past the storage layer
3. Handlers pass errors through, they never hide them
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Expense Tracker Team"
