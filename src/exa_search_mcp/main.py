import asyncio
from typing import Literal

import asyncclick as click
from fastmcp import FastMCP
from fastmcp.server.middleware.logging import LoggingMiddleware
from fastmcp.tools import FunctionTool

from exa_search_mcp.clients.exa import ExaClient
from exa_search_mcp.servers.search import SearchServer


def build_mcp(exa_client: ExaClient | None = None) -> FastMCP[None]:
    search_server = SearchServer(exa_client=exa_client or ExaClient())

    mcp = FastMCP[None](name="Exa Search MCP")

    mcp.add_tool(tool=FunctionTool.from_function(fn=search_server.search, name="search"))
    mcp.add_tool(tool=FunctionTool.from_function(fn=search_server.find_similar, name="find_similar"))
    mcp.add_tool(tool=FunctionTool.from_function(fn=search_server.get_contents, name="get_contents"))

    mcp.add_middleware(middleware=LoggingMiddleware())

    return mcp


@click.command()
@click.option(
    "--mcp-transport", type=click.Choice(["stdio", "streamable-http"]), default="stdio", help="The transport to run the MCP server on"
)
@click.option("--api-key", type=str, default=None, help="The Exa API key. Defaults to the EXASEARCH_API_KEY environment variable")
@click.option("--base-url", type=str, default=None, help="The base URL of the Exa API")
async def cli(mcp_transport: Literal["stdio", "streamable-http"], api_key: str | None, base_url: str | None):
    exa_client = ExaClient(api_key=api_key, base_url=base_url)

    async with exa_client:
        await build_mcp(exa_client=exa_client).run_async(transport=mcp_transport)


def run_mcp():
    asyncio.run(cli())


if __name__ == "__main__":
    run_mcp()
