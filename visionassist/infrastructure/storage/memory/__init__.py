from .descriptor_store import InMemoryDescriptorStore

__all__ = ["InMemoryDescriptorStore"]
