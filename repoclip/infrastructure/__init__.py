"""
Cross-cutting infrastructure: logging and error taxonomy.
"""
