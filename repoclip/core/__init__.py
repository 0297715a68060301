"""
Core engine: locator parsing, archive extraction and orchestration.
"""
