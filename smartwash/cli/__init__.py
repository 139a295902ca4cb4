"""
Command line presentation layer.
"""
