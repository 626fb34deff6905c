"""
Server plugins.
"""
