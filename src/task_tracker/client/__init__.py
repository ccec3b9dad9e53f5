"""
Client side.

Components:
- api_client.py: httpx transport for the five operations
- shell.py: Application Shell (state reconciliation, view routing)
- views.py: text list/form views
- console.py: interactive REPL
"""
