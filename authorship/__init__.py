"""Authorship registry package.

This package contains:
- config: Configuration loading and management
- registry: Access control, content registry, reward token and events
"""

from __future__ import annotations

__all__: list[str] = []
