"""
roofquote - roof outline measurement and slope-based quote pricing
"""

__version__ = "0.1.0"
