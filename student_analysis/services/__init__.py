"""
Services - AI enrichment pipeline, external clients and persistence.
"""
