"""
sitewatch: periodic HTTP availability and latency monitor.
"""

__version__ = "0.1.0"
