"""
Data models module.

Immutable request, result and settings structures for position sizing.
"""
