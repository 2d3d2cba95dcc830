"""Mini README: Core package initializer for the Memo Ledger service.

This module exposes convenience imports so callers can reach the logging
helpers without knowing the exact module structure. Ledger components live
in :mod:`memoledger.ledger`; the HTTP surface lives in
:mod:`memoledger.interface`.
"""

from .logging_utils import get_logger

__all__ = ["get_logger"]
