"""
SmartWash - doorstep car-wash booking for Sikkim.
"""

__version__ = "1.0.0"
