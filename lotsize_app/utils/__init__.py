"""
Utility functions module.

Numeric parsing of host text fields, lot quantization and fixed-point
formatting shared by the calculator and the session.
"""
