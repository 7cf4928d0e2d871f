"""
resultpager - Paged viewing and export of asynchronous query results.

Tracks one call from an execution engine, renders its result set a page at a
time into a text surface, and dispatches row-range exports back to the engine.
"""

__version__ = "0.1.0"
__app_name__ = "resultpager"
