"""
Command Line Interface Package

Command Structure:
- fintrack: Main entry point with utility commands (version, config)
- fintrack import: Load a CSV export into the ledger
- fintrack summary: Totals, budget usage and warnings
- fintrack budget: List, set and delete category budgets
- fintrack report: Monthly and per-category tables
"""
