"""
Dolphin Jump: a pygame arcade game about jumping over drifting ice.
"""

__version__ = "1.0.0"
