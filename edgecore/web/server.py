"""
FastAPI server for the EdgeCore journal.

Provides:
- Workbook preview and import
- Trade listing, statistics and equity curves
- Flip X5 and rotational simulators
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from edgecore import __version__
from edgecore.config import settings
from edgecore.db.models import init_db
from edgecore.logging_utils import configure_logging
from edgecore.web.routes import (
    imports_router,
    simulations_router,
    system_router,
    trades_router,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("Database initialized")
    yield


# Initialize FastAPI app
app = FastAPI(
    title="EdgeCore Journal",
    description="Trading journal with spreadsheet import and what-if simulators",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(system_router)
app.include_router(imports_router)
app.include_router(trades_router)
app.include_router(simulations_router)


def run_server(host: str = "127.0.0.1", port: int = 8000):
    """Run the web server."""
    import uvicorn

    configure_logging(settings.log_level)
    print("\nEdgeCore Journal API")
    print(f"   Open http://{host}:{port}/docs in your browser\n")
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run_server()
