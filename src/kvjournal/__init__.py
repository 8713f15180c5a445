"""kvjournal — a ledger-backed record store with an indexed journal registry."""

__version__ = "0.1.0"
