"""
Main FastAPI application for Inkwell
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from .. import __version__
from ..config import settings
from ..database import Database
from ..logging import configure_logging, get_logger
from ..middleware import LoggingContextMiddleware

configure_logging(debug=settings.debug, level=settings.log_level)
logger = get_logger(__name__)


def create_app(database: Database | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        database: Storage handle to serve from. When omitted, one is created
            from settings at startup and disposed at shutdown; a missing or
            invalid connection string then aborts startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        logger.info("Starting Inkwell API...")
        owns_database = getattr(app.state, "database", None) is None
        if owns_database:
            app.state.database = Database.from_url()

        success, error_message = await app.state.database.ping()
        if success:
            logger.info("Database connection validation successful")
        else:
            logger.error("Database connection validation failed", error=error_message)
            if settings.environment.lower() in ("production", "prod"):
                raise RuntimeError(error_message)

        yield

        logger.info("Shutting down Inkwell API...")
        if owns_database:
            await app.state.database.dispose()
            app.state.database = None

    app = FastAPI(
        title="Inkwell API",
        description="GraphQL API derived from the Inkwell relational schema",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )
    app.state.database = database

    app.add_middleware(LoggingContextMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/", response_class=PlainTextResponse)
    async def root():  # pyright: ignore [reportUnusedFunction]
        """Static acknowledgement for liveness probes."""
        return "Hello Inkwell!"

    @app.get("/health")
    async def health_check(request: Request):  # pyright: ignore [reportUnusedFunction]
        """Health check endpoint."""
        db = request.app.state.database
        database_status = "unavailable"
        if db is not None:
            success, _ = await db.ping()
            database_status = "ok" if success else "unavailable"
        return {"status": "healthy", "version": __version__, "database": database_status}

    from ..graphql.schema import create_graphql_router, validate_schema

    try:
        logger.info("Validating GraphQL schema...")
        validate_schema()

        graphql_router = create_graphql_router()
        app.include_router(graphql_router, prefix="")
        logger.info("GraphQL endpoint initialized successfully", endpoint=settings.graphql_path)
    except Exception as e:  # pragma: no cover
        logger.error("Failed to initialize GraphQL endpoint", error=str(e))
        raise

    return app


# Serving app; the database is created by its lifespan, not at import
app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "inkwell.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level=settings.log_level.lower(),
    )
