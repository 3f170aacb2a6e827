"""MCP Server exposing the build runner."""

from __future__ import annotations

import asyncio
import json
import logging

from mcp.server.fastmcp import Context, FastMCP
from pydantic import AnyUrl

from .build import BuildController, TargetResolver
from .config import BuildSettings
from .utils.project import get_client_roots

logger = logging.getLogger(__name__)

# Global controller (single client mode)
_controller: BuildController | None = None
_settings: BuildSettings | None = None


def get_controller() -> BuildController:
    """Get or create the build controller.

    Note: Single client mode - one build session at a time.
    """
    global _controller
    if _controller is None:
        settings = _settings or BuildSettings.from_env()
        _controller = BuildController(
            settings.project_paths,
            resolver=TargetResolver(home_dir=settings.home_dir),
            trigger_policy=settings.trigger_policy,
            tick_interval=settings.tick_interval,
        )
    return _controller


async def sync_project_paths(ctx: Context, controller: BuildController) -> None:
    """Use the client's roots as project directories when it provides any."""
    roots = await get_client_roots(ctx)
    if not roots:
        return
    paths = [str(p) for p in roots]
    if paths != controller.project_paths:
        logger.info(f"Updating project directories: {controller.project_paths} -> {paths}")
        controller.set_project_paths(paths)


def create_server(settings: BuildSettings | None = None) -> FastMCP:
    """Create and configure the MCP server.

    Args:
        settings: Runtime settings; read from the environment when omitted
    """
    global _settings, _controller
    _settings = settings or BuildSettings.from_env()
    _controller = None
    mcp = FastMCP("build-runner-mcp")
    controller = get_controller()

    async def notify_state_changed(ctx: Context) -> None:
        """Notify client that build resources have changed."""
        try:
            if ctx.session:
                await ctx.session.send_resource_updated(AnyUrl("build://state"))
                await ctx.session.send_resource_updated(AnyUrl("build://output"))
        except Exception:
            pass  # Notification failure shouldn't break the tool

    # ============== Build Control Tools ==============

    @mcp.tool()
    async def trigger_build(
        ctx: Context,
        wait: bool = False,
        timeout: float = 600.0,
    ) -> dict:
        """
        Run the build command configured for the project.

        Resolves targets from .build-runner.json / .build-runner.yml in the
        project directories, then runs the selected target (or the first one).
        Returns as soon as the process has started unless wait=True.

        While a build runs, another trigger is ignored unless the server was
        started with --trigger-policy restart.

        Args:
            wait: Wait for the build to finish before returning
            timeout: Seconds to wait when wait=True (the build keeps running on timeout)
        """
        try:
            await sync_project_paths(ctx, controller)
            session = await controller.trigger()
            data = session.to_dict()
            if wait and not session.done.is_set():
                try:
                    result = await controller.wait(timeout=timeout)
                    data = result.to_dict()
                except asyncio.TimeoutError:
                    data = session.to_dict()
                    data["timedOut"] = True
            await notify_state_changed(ctx)
            return {"success": True, "data": data}
        except Exception as e:
            return {"success": False, "error": str(e)}

    @mcp.tool()
    async def stop_build(ctx: Context) -> dict:
        """
        Stop the running build.

        The first call sends an interrupt, which the build may ignore. Call
        again to force-kill it.
        """
        try:
            session = controller.session
            escalated = bool(session and session.stop_requested)
            signalled = controller.stop()
            await notify_state_changed(ctx)
            return {
                "success": True,
                "data": {
                    "signalled": signalled,
                    "forced": signalled and escalated,
                    "state": controller.state.value,
                },
            }
        except Exception as e:
            return {"success": False, "error": str(e)}

    @mcp.tool()
    async def select_target(ctx: Context, name: str) -> dict:
        """Select the build target used by subsequent trigger_build calls."""
        try:
            await sync_project_paths(ctx, controller)
            target = controller.select_target(name)
            return {"success": True, "data": target.to_dict()}
        except Exception as e:
            return {"success": False, "error": str(e)}

    @mcp.tool()
    async def refresh_targets(ctx: Context) -> dict:
        """Re-read build configuration and list available targets."""
        try:
            await sync_project_paths(ctx, controller)
            report = controller.refresh_targets()
            return {
                "success": True,
                "data": {
                    "targets": [t.to_dict() for t in report.targets],
                    "selected": controller.selected_target_name,
                    "errors": [str(e) for e in report.errors],
                    "searched": report.searched,
                },
            }
        except Exception as e:
            return {"success": False, "error": str(e)}

    @mcp.tool()
    async def get_build_state() -> dict:
        """Get the build state, elapsed time, target and output length."""
        try:
            return {"success": True, "data": controller.to_dict()}
        except Exception as e:
            return {"success": False, "error": str(e)}

    @mcp.tool()
    async def get_build_output(tail_bytes: int = 0) -> dict:
        """
        Get output captured from the current build.

        Args:
            tail_bytes: Return only the last N bytes (0 = everything)
        """
        try:
            sink = controller.sink
            raw = sink.tail(tail_bytes) if tail_bytes > 0 else sink.getvalue()
            return {
                "success": True,
                "data": {
                    "output": raw.decode("utf-8", errors="replace"),
                    "length": sink.get_accumulated_length(),
                    "state": controller.state.value,
                },
            }
        except Exception as e:
            return {"success": False, "error": str(e)}

    # ============== Prompts ==============

    @mcp.prompt(
        name="build",
        description="Run the project build and react to the result",
    )
    def build_prompt() -> list[dict]:
        return [
            {
                "role": "user",
                "content": """Build the project:

1. `refresh_targets()` - list configured targets; `select_target(name)` if needed
2. `trigger_build(wait=True)` - run it and wait for the result
3. On state "error", read `get_build_output(tail_bytes=4000)` and fix the cause
4. A hanging build: `stop_build()`, and `stop_build()` again to force-kill
""",
            },
        ]

    # ============== Resources ==============

    @mcp.resource("build://state", mime_type="application/json")
    async def build_state_resource() -> str:
        """Current build state (JSON).

        Contains: state, target, elapsed seconds, output length, last result.
        """
        return json.dumps(controller.to_dict(), indent=2)

    @mcp.resource("build://output", mime_type="text/plain")
    async def build_output_resource() -> str:
        """Output of the current build (plain text, verbatim)."""
        return controller.sink.text()

    logger.info("Build runner MCP Server initialized")
    return mcp
