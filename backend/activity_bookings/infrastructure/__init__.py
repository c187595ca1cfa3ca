"""
Infrastructure layer - external system integrations.
Keeps business logic clean from implementation details.
"""

from .file_storage import ensure_directory_exists, read_json_file, write_json_file

__all__ = ['ensure_directory_exists', 'read_json_file', 'write_json_file']
