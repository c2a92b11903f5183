"""
HTTP API for parsing and analyzing KMZ archives.
"""
