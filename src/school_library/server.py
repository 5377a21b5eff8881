"""School Library MCP Server - FastMCP Implementation

Serves the school library's books, students and loans over MCP.
Clients connect via stdio transport.

Features exposed:
- Resources: Catalog, roster and loan lists, dashboard stats and reminders
- Tools: Catalog and roster edits, lending and returns, search, backups
"""

import logging
import signal
import sys
from typing import Any

from fastmcp import FastMCP

from .config import LibraryConfig, get_config
from .database.session import DatabaseManager
from .database.store import LibraryStore
from .engine import LibraryEngine, clock_in
from .resources import all_resources
from .tools import all_tools

# Initialize logging - stderr for logs, stdout for MCP protocol
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stderr)],
)

logger = logging.getLogger(__name__)


def create_engine_for(config: LibraryConfig) -> LibraryEngine:
    """Open the store, create the schema if needed and load the first snapshot."""
    store = LibraryStore(DatabaseManager(config.get_database_url()))
    store.initialize()

    engine = LibraryEngine(
        store,
        clock=clock_in(config.timezone),
        loan_period_days=config.loan_period_days,
        due_soon_days=config.due_soon_days,
    )
    snapshot = engine.reload()
    logger.info(
        "Loaded %d books, %d students, %d loans",
        len(snapshot.books),
        len(snapshot.students),
        len(snapshot.loans),
    )
    return engine


def create_server(engine: LibraryEngine, config: LibraryConfig) -> FastMCP:
    """Build the FastMCP instance with every resource and tool bound to ``engine``."""
    mcp = FastMCP(
        name=config.server_name,
        version=config.server_version,
        instructions=(
            "School Library MCP Server - keeps the books, students and loans of a "
            "school library. Use resources to read the lists and the dashboard, and "
            "tools to lend and return books, edit records, search and back up data."
        ),
    )

    resources = all_resources(engine)
    for resource in resources:
        logger.debug("Registering resource: %s with URI: %s", resource["name"], resource["uri"])
        try:
            mcp.resource(
                uri=resource["uri"],
                name=resource["name"],
                description=resource["description"],
                mime_type=resource["mime_type"],
            )(resource["handler"])
        except Exception:
            logger.exception("Failed to register resource %s", resource["name"])
            raise

    logger.info("Registered %d resources", len(resources))

    tools = all_tools(engine)
    for tool in tools:
        logger.debug("Registering tool: %s", tool["name"])
        try:
            mcp.tool(
                name=tool["name"],
                description=tool["description"],
            )(tool["handler"])
        except Exception:
            logger.exception("Failed to register tool %s", tool["name"])
            raise

    logger.info("Registered %d tools", len(tools))
    return mcp


def run_stdio_server(mcp: FastMCP, engine: LibraryEngine, config: LibraryConfig) -> None:
    """Run the MCP server using stdio transport.

    Stdin receives JSON-RPC requests, stdout sends responses.
    """
    logger.info("Starting %s v%s on stdio transport", config.server_name, config.server_version)

    def signal_handler(signum: int, _frame: Any) -> None:
        logger.info("Received signal %s, initiating shutdown...", signum)
        engine.store.close()
        sys.exit(0)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    try:
        logger.info("MCP Server ready and waiting for connections...")
        mcp.run(transport="stdio")
    except Exception:
        logger.exception("Fatal error in MCP server")
        sys.exit(1)
    finally:
        engine.store.close()


def main() -> None:
    """Main entry point for the MCP server."""
    try:
        config = get_config()

        if config.debug:
            logging.getLogger().setLevel(logging.DEBUG)
            logger.debug("Debug mode enabled - verbose protocol logging active")
        else:
            logging.getLogger().setLevel(config.log_level)
            logging.getLogger("fastmcp").setLevel(logging.WARNING)

        logger.info("=" * 60)
        logger.info("School Library MCP Server")
        logger.info("Version: %s", config.server_version)
        logger.info("Transport: %s", config.transport)
        logger.info("Database: %s", config.get_database_url())
        logger.info("=" * 60)

        engine = create_engine_for(config)
        mcp = create_server(engine, config)
        run_stdio_server(mcp, engine, config)

    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    except Exception:
        logger.exception("Failed to start MCP server")
        sys.exit(1)


if __name__ == "__main__":
    main()
