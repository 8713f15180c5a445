"""Journal registry on top of a key-value ledger.

Provides the Journal record model, a RecordStore with typed accessors over
the ledger's flat key namespace, the JournalRegistry that keeps the journal
index consistent with the records, the bootstrap reset, and the Dispatcher
that exposes them as init / invoke / query functions.
"""

from .bootstrap import reset
from .dispatch import Dispatcher
from .models import IndexReport, Journal
from .registry import JournalRegistry
from .store import COUNTER_KEY, INDEX_KEY, RESERVED_KEYS, RecordStore

__all__ = [
    "COUNTER_KEY",
    "INDEX_KEY",
    "RESERVED_KEYS",
    "Dispatcher",
    "IndexReport",
    "Journal",
    "JournalRegistry",
    "RecordStore",
    "reset",
]
