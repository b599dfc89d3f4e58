"""
Materials Exchange
Multi-tenant catalog of surplus materials offered between balance units
"""

__version__ = "1.2.0"
