"""Mini README: Interactive interfaces for the Memo Ledger.

Exports the FastAPI application factory that serves the ledger over HTTP.
The command line launcher in ``main_ledger_service.py`` builds on it.
"""

from .web_app import create_application

__all__ = ["create_application"]
