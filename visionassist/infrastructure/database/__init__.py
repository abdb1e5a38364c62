from .descriptor_store import SqlDescriptorStore

__all__ = ["SqlDescriptorStore"]
