"""
upt - a simple uptime CLI tool.

Reports how long the machine (or a manually reset session) has been
running, once or as a live-refreshing display.
"""

__version__ = "0.4.0"
