"""
RecordHub core package.

User accounts, role-based access and per-user business data records kept
in a pluggable key-value store.
"""

__version__ = "1.0.0"
