from fastapi import FastAPI

from .. import __version__, config
from .routers import compare


def create_app() -> FastAPI:
    config.setup_logging()
    app = FastAPI(title="Production Comparison API", version=__version__)
    app.include_router(compare.router)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()
