import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from campaign_market.api.errors import register_exception_handlers
from campaign_market.api.routes import api_router
from campaign_market.core.config import settings


def create_app() -> FastAPI:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = FastAPI(title=settings.app_name, version="0.1.0", debug=settings.debug)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(api_router)

    @app.get("/", tags=["health"])
    async def root() -> dict[str, str]:
        return {"message": f"{settings.app_name} ready"}

    return app


app = create_app()
