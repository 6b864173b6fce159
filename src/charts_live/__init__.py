"""
charts-live: scaffold a chart workspace and serve it with live reload.
"""

__version__ = "0.1.0"
