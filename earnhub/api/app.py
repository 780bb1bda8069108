"""
API application.

Builds the aiohttp application and runs it as the ``earnhub-api``
entrypoint.
"""

from aiohttp import web
from loguru import logger
from sqlalchemy.ext.asyncio import async_sessionmaker

from earnhub.api.dependencies import SESSION_MAKER_KEY
from earnhub.api.responses import error_response
from earnhub.api.routes import admin_routes, user_routes, withdrawal_routes
from earnhub.config.logging import setup_logging
from earnhub.config.settings import settings


@web.middleware
async def error_middleware(request: web.Request, handler) -> web.StreamResponse:
    """Turn unexpected failures into the JSON error body."""
    try:
        return await handler(request)
    except web.HTTPException:
        raise
    except Exception as e:
        logger.exception(
            "Unhandled API error",
            extra={"method": request.method, "path": request.path, "error": str(e)},
        )
        return error_response("Internal server error", "INTERNAL_ERROR")


def create_app(session_maker: async_sessionmaker | None = None) -> web.Application:
    """
    Create the API application.

    Args:
        session_maker: Session factory (defaults to the configured database)

    Returns:
        Configured aiohttp application
    """
    if session_maker is None:
        from earnhub.config.database import async_session_maker

        session_maker = async_session_maker

    app = web.Application(middlewares=[error_middleware])
    app[SESSION_MAKER_KEY] = session_maker
    app.add_routes(user_routes)
    app.add_routes(withdrawal_routes)
    app.add_routes(admin_routes)
    return app


def main() -> None:
    """Run the API server."""
    setup_logging("api")
    logger.info(
        f"API listening on {settings.api_host}:{settings.api_port}"
    )
    web.run_app(create_app(), host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    main()
