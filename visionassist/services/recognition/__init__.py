"""Face embedding model adapters."""
