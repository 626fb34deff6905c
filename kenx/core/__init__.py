"""
Core composition layer: resource registry, resolver, factories and dispatcher.
"""
