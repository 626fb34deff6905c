"""
Database plugins.
"""
