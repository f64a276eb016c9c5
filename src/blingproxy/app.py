"""FastAPI application for blingproxy."""

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from blingproxy import __version__
from blingproxy.config import settings
from blingproxy.models import HealthResponse
from blingproxy.routers import produto
from blingproxy.services.bling import BlingClient

PUBLIC_DIR = Path(__file__).parent / "public"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the Bling client on startup and close its connections on shutdown."""
    app.state.bling = BlingClient.from_settings(settings)
    try:
        yield
    finally:
        await app.state.bling.aclose()


app = FastAPI(
    title="blingproxy",
    description="Product lookup proxy for the Bling ERP API",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(produto.router, prefix="/produto", tags=["produto"])


@app.get("/", include_in_schema=False)
async def home() -> FileResponse:
    """Serve the landing page."""
    return FileResponse(PUBLIC_DIR / "index.html")


@app.get("/health", response_model=HealthResponse)
async def health():
    """Liveness check."""
    return HealthResponse(version=__version__)


# Mounted last so it only sees paths no route above claimed
app.mount("/", StaticFiles(directory=PUBLIC_DIR), name="public")
