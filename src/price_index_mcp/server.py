"""
MCP server for the price index tree.

Exposes category browsing and weight edits through the Model Context Protocol.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from price_index_mcp.core.exceptions import IndexTreeError
from price_index_mcp.core.session import IndexTreeSession
from price_index_mcp.tools.tools import IndexTreeTools, create_tool_schemas

logger = logging.getLogger(__name__)


class IndexTreeServer:
    """MCP server for the price index tree."""

    def __init__(self, csv_path: Optional[Path] = None, delimiter: str = ","):
        """
        Initialize the MCP server.

        Args:
            csv_path: Optional path to the source CSV file.
                     If None, uses the default file in the working directory.
            delimiter: CSV field delimiter
        """
        self.session = IndexTreeSession(csv_path, delimiter=delimiter)
        self.tools = IndexTreeTools(self.session)
        self.server = Server("price-index-mcp")

        # Register handlers
        self._register_handlers()

    def _register_handlers(self) -> None:
        """Register MCP protocol handlers."""

        @self.server.list_tools()
        async def list_tools() -> list[Tool]:
            """List available tools."""
            schemas = create_tool_schemas()
            return [
                Tool(
                    name=schema["name"],
                    description=schema["description"],
                    inputSchema=schema["inputSchema"],
                )
                for schema in schemas
            ]

        @self.server.call_tool()
        async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
            """Handle tool calls."""
            return await self.handle_tool_call(name, arguments)

    async def handle_tool_call(
        self, name: str, arguments: Optional[dict[str, Any]]
    ) -> list[TextContent]:
        """Route a tool call and format its result as JSON text."""
        arguments = arguments or {}

        # Check if source data is available
        if not self.session.is_available():
            error_msg = (
                f"Price index data not available. Expected a CSV file at "
                f"{self.session.csv_path}; provide one with --csv-path."
            )
            return [TextContent(type="text", text=error_msg)]

        try:
            # Route to appropriate tool handler
            if name == "get_category_tree":
                result = self.tools.get_category_tree(**arguments)
            elif name == "get_category":
                result = self.tools.get_category(**arguments)
            elif name == "list_categories":
                result = self.tools.list_categories(**arguments)
            elif name == "update_weight":
                result = self.tools.update_weight(**arguments)
            elif name == "reset_weights":
                result = self.tools.reset_weights()
            else:
                return [
                    TextContent(
                        type="text",
                        text=f"Unknown tool: {name}",
                    )
                ]

            return [
                TextContent(
                    type="text",
                    text=json.dumps(result, indent=2, ensure_ascii=False),
                )
            ]

        except (IndexTreeError, ValueError) as e:
            # Handle expected errors (e.g., category not found, bad weight)
            return [TextContent(type="text", text=f"Error: {str(e)}")]
        except Exception as e:
            logger.exception(f"Error executing tool {name}")
            return [
                TextContent(
                    type="text",
                    text=f"Error executing tool: {str(e)}",
                )
            ]

    async def run(self) -> None:  # pragma: no cover
        """Run the MCP server using stdio transport."""
        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options(),
            )


async def run_server(
    csv_path: Optional[Path] = None, delimiter: str = ","
) -> None:  # pragma: no cover
    """
    Run the price index MCP server.

    Args:
        csv_path: Optional path to the source CSV file.
                 If None, uses the default file in the working directory.
        delimiter: CSV field delimiter
    """
    server = IndexTreeServer(csv_path, delimiter=delimiter)
    await server.run()
