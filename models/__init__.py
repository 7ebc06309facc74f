"""
models/ - Domain Models
=======================
Plain dataclasses passed between the database layer and the annotation services.
"""
