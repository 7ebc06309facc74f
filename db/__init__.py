"""
db/ - Database Layer
====================
Handles the PostgreSQL connection pool, query execution, and the annotating
wrapper that tags each query with the source location that issued it.
"""
