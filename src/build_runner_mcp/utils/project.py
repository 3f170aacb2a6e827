"""Project directory detection.

Project directories come from, in priority order:
1. MCP Roots from the client (via Context.list_roots())
2. Explicit --project paths
3. A marker search upward from the startup CWD (--project-from-cwd)
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from pathlib import Path
from typing import TYPE_CHECKING
from urllib.parse import unquote, urlparse

from ..build.resolver import CONFIG_FILENAMES

if TYPE_CHECKING:
    from mcp.server.fastmcp import Context

logger = logging.getLogger(__name__)


def parse_file_uri(uri: str) -> Path | None:
    """Parse a file:// URI to a Path.

    Handles platform-specific path formats:
    - Unix: file:///home/user/project → /home/user/project
    - Windows: file:///C:/Users/project → C:\\Users\\project
    - Windows UNC: file://server/share → \\\\server\\share

    Returns:
        Absolute path, or None if the URI is not a usable file URI
    """
    parsed = urlparse(str(uri))
    if parsed.scheme != "file":
        logger.warning(f"Not a file URI: {uri}")
        return None

    path_str = unquote(parsed.path)

    if sys.platform == "win32":
        # file:///C:/path → "/C:/path"
        if path_str.startswith("/") and len(path_str) > 2 and path_str[2] == ":":
            path_str = path_str[1:]
        if parsed.netloc:
            path_str = f"\\\\{parsed.netloc}{path_str}"

    path = Path(path_str)
    if not path.is_absolute():
        logger.warning(f"Parsed path is not absolute: {path}")
        return None
    return path


def find_project_root(
    start_dir: str | Path | None = None,
    boundary: str | Path | None = None,
) -> Path:
    """Find the project root by walking up from a directory.

    The nearest directory holding a build configuration file wins; otherwise
    the nearest .git root; otherwise start_dir itself.

    Args:
        start_dir: Directory to start from (defaults to CWD)
        boundary: If given, the search does not go above this directory
    """
    current = Path(start_dir or Path.cwd()).resolve()
    limit = Path(boundary).resolve() if boundary is not None else None

    def ancestors() -> Iterator[Path]:
        yield current
        if limit is not None and current == limit:
            return
        for parent in current.parents:
            yield parent
            if limit is not None and parent == limit:
                return

    for directory in ancestors():
        if any((directory / name).is_file() for name in CONFIG_FILENAMES):
            return directory

    for directory in ancestors():
        if (directory / ".git").exists():  # file for worktrees
            return directory

    return current


async def get_client_roots(ctx: Context | None) -> list[Path]:
    """Directories the MCP client exposes as roots.

    Returns an empty list when the client does not support roots.
    """
    if ctx is None:
        return []
    try:
        roots = await ctx.list_roots()
    except Exception as e:
        # Client may not support roots
        logger.info(f"Could not get roots from client: {e}")
        return []

    directories: list[Path] = []
    for root in roots or []:
        path = parse_file_uri(str(root.uri))
        if path is not None and path.is_dir():
            directories.append(path)
        else:
            logger.warning(f"MCP root not usable as project directory: {root.uri}")
    return directories
