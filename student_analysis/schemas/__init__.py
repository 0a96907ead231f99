"""
Schemas module - Request/Response schemas for API endpoints.

Enrichment results themselves are plain dicts produced by the schema
normalizer; these models describe the HTTP envelopes around them.
"""
