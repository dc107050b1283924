"""FastAPI application entry point.

This module initialises the FastAPI app, configures logging and
registers API routes.  The `uvicorn` ASGI server can point to
``chat_backend.main:app`` to serve the application.
"""

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from .utils.logger import setup_logging
from .config.app_config import get_app_config
from .controllers.chat_controller import router as chat_router
from .controllers.agent_controller import router as agent_router
from .utils.error_handler import register_exception_handlers
from .utils.logging_middleware import RequestLoggingMiddleware


def create_app() -> FastAPI:
    """Create and configure a FastAPI application."""
    app_config = get_app_config()
    setup_logging(app_config)

    app = FastAPI(title="Chat Backend", version="0.1.0", debug=app_config.app_debug)

    app.add_middleware(RequestLoggingMiddleware)
    # Allow credentials only when origins are listed explicitly
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_config.cors_origins,
        allow_credentials="*" not in app_config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Translate domain, input and unexpected errors into error envelopes
    register_exception_handlers(app)

    app.include_router(chat_router)
    app.include_router(agent_router)

    @app.get("/health", tags=["Health"])
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        logger.debug("Health check invoked")
        return {"status": "ok"}

    return app


# Create an application instance for ASGI servers
app = create_app()


if __name__ == "__main__":
    config = get_app_config()
    uvicorn.run("chat_backend.main:app", host=config.app_host, port=config.app_port)
