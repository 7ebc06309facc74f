"""utils/ - Shared helpers."""
