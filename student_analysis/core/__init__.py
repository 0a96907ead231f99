"""
Core module - configuration and the error taxonomy.
"""
