# ===== Part 1: Imports & Logging ============================================
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI

from modules import drawings
from modules.drawings.api import close_service

logger = logging.getLogger(__name__)
logging.basicConfig(
    level=os.environ.get("WEARCO_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)


# ===== Part 2: Application ==================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    close_service()
    logger.info("Drawing export API stopped")


def create_app() -> FastAPI:
    """Build the API application with every module's routes mounted."""
    app = FastAPI(title="Wearco Drawings", version="0.1.0", lifespan=lifespan)
    drawings.register_api(app)

    @app.get("/healthz")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    logger.info("Drawing export API ready")
    return app


app = create_app()


# ===== Part 3: Entrypoint ===================================================
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=os.environ.get("WEARCO_HOST", "127.0.0.1"),
        port=int(os.environ.get("WEARCO_PORT", "8000")),
    )
