"""Entry point for build-runner-mcp server."""

import argparse
import asyncio
import logging
import os
import sys

from .build import TriggerPolicy
from .config import BuildSettings
from .server import create_server, get_controller
from .utils.project import find_project_root


def configure_logging() -> None:
    """Configure logging based on environment."""
    level = os.environ.get("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Build Runner MCP Server - run project build commands via MCP"
    )
    parser.add_argument(
        "--project",
        action="append",
        default=None,
        help="Project directory searched for build configuration. "
        "May be given more than once.",
    )
    parser.add_argument(
        "--project-from-cwd",
        action="store_true",
        default=False,
        help="Auto-detect the project from the current working directory. "
        "Searches upward for a .build-runner config file or a .git marker. "
        "Cannot be used with --project.",
    )
    parser.add_argument(
        "--trigger-policy",
        choices=[p.value for p in TriggerPolicy],
        default=None,
        help="What a trigger does while a build runs (default: ignore, "
        "or BUILD_RUNNER_TRIGGER_POLICY).",
    )
    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace) -> BuildSettings:
    """Merge environment settings with command line arguments.

    Raises:
        ValueError: If --project and --project-from-cwd are combined
    """
    settings = BuildSettings.from_env()
    if args.project_from_cwd:
        if args.project:
            raise ValueError("--project-from-cwd cannot be used with --project")
        settings.project_paths = [str(find_project_root())]
    else:
        settings.project_paths = args.project or [os.getcwd()]
    if args.trigger_policy:
        settings.trigger_policy = TriggerPolicy(args.trigger_policy)
    return settings


async def main() -> None:
    """Main entry point."""
    configure_logging()
    logger = logging.getLogger(__name__)

    args = parse_args()
    try:
        settings = build_settings(args)
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)

    logger.info(f"Starting Build Runner MCP Server (projects: {settings.project_paths})...")

    mcp = create_server(settings)

    try:
        await mcp.run_stdio_async()
    except Exception:
        logger.exception("Server error")
        raise
    finally:
        await get_controller().shutdown()
        logger.info("Server stopped")


def run() -> None:
    """Run the server."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
