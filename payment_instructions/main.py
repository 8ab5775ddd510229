"""FastAPI application entrypoint."""

from typing import Optional

from fastapi import FastAPI

from payment_instructions.api.errors import register_exception_handlers
from payment_instructions.api.router import api_router
from payment_instructions.config import Settings, get_settings
from payment_instructions.logging_setup import configure_logging


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the API application from settings."""

    settings = settings or get_settings()
    configure_logging(settings.log_level, fmt=settings.log_format)

    app = FastAPI(title=settings.app_name, debug=settings.debug)
    app.include_router(api_router, prefix=settings.api_v1_prefix)
    register_exception_handlers(app)

    @app.get("/health", tags=["system"])
    async def health() -> dict[str, str]:
        """Simple liveness endpoint for uptime checks."""

        return {"status": "ok"}

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("payment_instructions.main:app", host="0.0.0.0", port=8000, reload=True)
