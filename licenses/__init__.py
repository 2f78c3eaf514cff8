"""
Licenses module - license issuance and activation.

This module handles:
- License entity and key generation
- The ASSIGNED -> ACTIVATED state machine
- License persistence and status lookups
"""
