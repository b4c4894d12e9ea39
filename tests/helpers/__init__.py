"""Shared builders for ledger tests."""
