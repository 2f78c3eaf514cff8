"""
Core module for shared domain infrastructure.

This module contains:
- Domain events, exceptions and value objects
- Event bus, cache and notification adapters
- Middleware components
- Health checks and management commands
"""
