"""FastAPI routers for the worker.

Routers are grouped by domain (insights, providers, entries, analytics).
"""
