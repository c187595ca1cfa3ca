from .id_allocator import IdAllocator, numeric_suffix
from .json_repository import JsonRepository

__all__ = ['IdAllocator', 'JsonRepository', 'numeric_suffix']
