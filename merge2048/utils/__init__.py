# -*- coding: utf-8 -*-
"""
Presentation helpers for playing the game by hand.
"""

from .windows import WindowBoard

__all__ = ["WindowBoard"]
