"""Credential store adapters.

The authentication service only needs a read-only lookup by login
identifier. Production deployments plug in a database-backed store; the
in-memory store serves tests and local runs.
"""
