from typing import Optional

from fastapi import FastAPI

from .api.app import router
from .constants import APP_NAME, APP_VERSION
from .container import Container, build_container


def create_app(container: Optional[Container] = None) -> FastAPI:
    app = FastAPI(title=APP_NAME, version=APP_VERSION)
    app.state.container = container or build_container()
    app.include_router(router)
    return app
