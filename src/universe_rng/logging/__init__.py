"""Call logging subsystem for universe-rng.

Provides immutable per-call records and a configurable logger that supports
none/summary/full verbosity and in-memory diagnostic mode.
"""

from universe_rng.logging.logger import CallLogger
from universe_rng.logging.types import ProviderCallRecord

__all__ = [
    "CallLogger",
    "ProviderCallRecord",
]
