"""
Web Initialization Module.

This module contains all initialization logic split into focused modules:
- logging: Logger configuration
- services: Database, image store and reconciliation wiring
"""

__all__ = []
