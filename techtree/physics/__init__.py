"""
Rope physics for tech tree edges.

This module provides:
- SpringRope: damped spring-mass chain pinned to two moving anchors
- RopeConfig: tuning and colour palette
"""

from .spring_rope import SpringRope, RopeConfig, DEFAULT_COLORS

__all__ = [
    'SpringRope',
    'RopeConfig',
    'DEFAULT_COLORS',
]
