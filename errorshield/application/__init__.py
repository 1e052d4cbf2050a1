"""
Application layer package.

Orchestrates domain pieces into the classification decision table.
"""
