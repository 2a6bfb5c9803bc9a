"""Mapping persistence exports."""

from .mapping_store import JsonMappingStore, MappingStoreError

__all__ = ["JsonMappingStore", "MappingStoreError"]
