"""
Infrastructure layer package.

Adapters over third-party clients whose failures need inspection.
"""
