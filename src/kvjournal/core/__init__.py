"""Core infrastructure: config, errors, events, logging, ledger storage."""
