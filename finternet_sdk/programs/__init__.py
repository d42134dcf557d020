"""Instruction builders for the ledger programs the SDK calls."""
