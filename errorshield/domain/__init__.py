"""
Domain layer package.

Contains the error taxonomy, the declared-status registry, message
decoration and the per-request diagnostic scope.
No framework imports, no IO, no side effects.
"""
