"""Utility modules for build-runner-mcp."""

from .project import find_project_root, get_client_roots, parse_file_uri

__all__ = [
    "find_project_root",
    "get_client_roots",
    "parse_file_uri",
]
