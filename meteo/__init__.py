"""Synthetic weather queries over a single-datagram UDP protocol"""

__version__ = "1.0.0"
