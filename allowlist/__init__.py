"""
Allow-list module - eligibility of user IDs to request a license.

This module handles:
- AllowListEntry entity (eligible / consumed)
- Atomic, at-most-once consumption of an identity
- Loading operator-maintained ID lists
"""
