"""
connectn - Multi-player N-in-a-row game engine

This package provides a generalized Connect Four implementation with a
configurable grid size, player count and win length, along with text,
terminal and HTTP front ends that drive the engine.
"""

# Version number
__version__ = '0.1.0'
