"""Personal finance tracker: transactions, budgets, reports and CSV import."""

__version__ = "0.1.0"
