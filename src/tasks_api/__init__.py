"""
Task Manager backend package.

The FastAPI application lives in ``tasks_api.main``; the client-side data
logic of the single-page UI lives in ``tasks_api.client`` and
``tasks_api.view``.
"""

__version__ = "0.1.0"
