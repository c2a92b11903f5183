"""
Core parsing, analytics and export functionality.
"""
