"""
Google Slides MCP Server.
Provides MCP tools for Google Slides operations via OAuth2.
"""

import asyncio
import json
import time
from functools import partial
from pathlib import Path
from typing import Any, Dict, List, Optional

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import Tool, TextContent

from gslides_mcp.services.google_services import ServiceBundle, build_services
from gslides_mcp.tools.registry import ToolRegistry
from gslides_mcp.utils.audit import get_audit_logger
from gslides_mcp.utils.config_loader import SlidesServerConfig, get_config
from gslides_mcp.utils.exceptions import ConfigurationError, SlidesToolError
from gslides_mcp.utils.google_auth import OAuthAuth
from gslides_mcp.utils.logging_config import get_logger, setup_logging

logger = get_logger(__name__)

SERVER_NAME = "google-slides-mcp"


class GoogleSlidesMCPServer:
    """MCP Server for Google Slides operations."""

    def __init__(
        self,
        config: Optional[SlidesServerConfig] = None,
        services: Optional[ServiceBundle] = None,
        registry: Optional[ToolRegistry] = None
    ):
        """
        Initialize Google Slides MCP Server.

        Args:
            config: Server settings (defaults to the global configuration)
            services: Prebuilt Slides/Drive services; built from the stored
                      OAuth token on first use when omitted
            registry: Tool registry (defaults to all tools)
        """
        self.config = config or get_config()
        self._services = services
        self.registry = registry or ToolRegistry()
        self.audit = get_audit_logger()
        self.server = Server(SERVER_NAME)
        self._setup_tools()

    def _get_services(self) -> ServiceBundle:
        """Get or create the Slides and Drive API services."""
        if self._services is None:
            auth = OAuthAuth(self.config.token_path, self.config.client_secrets_path)
            self._services = build_services(
                auth.get_credentials(),
                max_attempts=self.config.retry_attempts,
                max_wait=self.config.retry_max_wait,
                upload_folder_id=self.config.upload_folder_id
            )
        return self._services

    def list_tool_specs(self) -> List[Tool]:
        return [
            Tool(
                name=tool.name,
                description=tool.description,
                inputSchema=tool.input_schema
            )
            for tool in self.registry.get_all_tools()
        ]

    def _execute(self, name: str, arguments: Dict[str, Any]) -> Dict[str, Any]:
        tool = self.registry.get_tool(name)
        if tool is None:
            raise SlidesToolError(f"Unknown tool: {name}", error_code="UNKNOWN_TOOL")
        params = tool.parse(arguments)
        return tool.handler(self._get_services(), params)

    async def dispatch(self, name: str, arguments: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Run a tool and return its result or an error payload.

        Handlers do blocking HTTP calls, so they run in the default executor.
        Every call is written to the audit log.

        Args:
            name: Tool name
            arguments: Raw tool arguments

        Returns:
            Result dict, or {"error", "error_code", "details"} on failure
        """
        arguments = arguments or {}
        start = time.perf_counter()
        try:
            result = await asyncio.get_running_loop().run_in_executor(
                None, partial(self._execute, name, arguments)
            )
        except SlidesToolError as e:
            logger.warning(f"Tool {name} failed: [{e.error_code}] {e.message}")
            payload = {"error": e.message, "error_code": e.error_code, "details": e.details}
        except Exception as e:
            logger.exception(f"Error executing tool {name}: {e}")
            payload = {"error": str(e), "error_code": "INTERNAL_ERROR", "details": {}}
        else:
            self.audit.log_tool_call(
                name, arguments, result=result, duration_ms=(time.perf_counter() - start) * 1000
            )
            return result

        self.audit.log_tool_call(
            name, arguments, error=payload["error"], duration_ms=(time.perf_counter() - start) * 1000
        )
        return payload

    def _setup_tools(self):
        """Register MCP tools."""

        @self.server.list_tools()
        async def list_tools() -> List[Tool]:
            """List available tools."""
            return self.list_tool_specs()

        @self.server.call_tool()
        async def call_tool(name: str, arguments: Dict[str, Any]) -> List[TextContent]:
            """Handle tool calls."""
            result = await self.dispatch(name, arguments)
            return [TextContent(
                type="text",
                text=json.dumps(result, indent=2, ensure_ascii=False)
            )]

    async def run(self):
        """Run the MCP server."""
        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options()
            )


def build_parser():
    import argparse

    parser = argparse.ArgumentParser(description="Google Slides MCP Server")
    parser.add_argument("--token-path", type=str, default=None, help="Path to OAuth token file")
    parser.add_argument("--client-secrets-path", type=str, default=None, help="Path to OAuth client secrets file")
    parser.add_argument("--log-level", type=str, default=None, help="Logging level (DEBUG, INFO, WARNING, ERROR)")
    parser.add_argument("--log-dir", type=str, default=None, help="Directory for log files")
    parser.add_argument("--no-file-logging", action="store_true", help="Log to stderr only")
    parser.add_argument(
        "--authorize",
        action="store_true",
        help="Run the OAuth flow in a browser, store the token and exit"
    )
    return parser


def apply_cli_overrides(config: SlidesServerConfig, args) -> SlidesServerConfig:
    """Return a copy of the settings with command line flags applied."""
    overrides: Dict[str, Any] = {}
    if args.token_path:
        overrides["token_path"] = Path(args.token_path)
    if args.client_secrets_path:
        overrides["client_secrets_path"] = Path(args.client_secrets_path)
    if args.log_level:
        overrides["log_level"] = args.log_level.upper()
    if args.log_dir:
        overrides["log_dir"] = Path(args.log_dir)
    if args.no_file_logging:
        overrides["enable_file_logging"] = False
    if not overrides:
        return config
    return SlidesServerConfig.model_validate({**config.model_dump(), **overrides})


async def main(argv: Optional[List[str]] = None):
    """Main entry point for the MCP server."""
    args = build_parser().parse_args(argv)
    config = apply_cli_overrides(get_config(), args)

    setup_logging(config.log_level, config.log_dir, config.enable_file_logging)

    if args.authorize:
        OAuthAuth(config.token_path, config.client_secrets_path).authorize()
        return

    server = GoogleSlidesMCPServer(config)
    logger.info(f"Starting {SERVER_NAME} with {len(server.registry.get_all_tools())} tools")
    await server.run()


def cli():
    """Console script entry point."""
    try:
        asyncio.run(main())
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e.message}")
        raise SystemExit(1)


if __name__ == "__main__":
    cli()
