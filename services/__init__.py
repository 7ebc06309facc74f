"""
services/ - Annotation Pipeline
===============================
Frame capture, source map loading, position translation and query annotation.
None of these modules touch the database.
"""
