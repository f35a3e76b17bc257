"""
Vehicle catalogue package.

The controller keeps the in-memory vehicle sequence together with the
current category filter and search term, mediates create/update/delete
calls against the document store and re-renders the page regions after
each change. The router exposes those operations over HTTP.
"""

from .router import router as catalog_router  # noqa: F401
