"""
Utilities - upload staging and local text extraction.
"""
