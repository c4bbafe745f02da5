"""Core types, records and exceptions shared across ledger agent layers."""
