import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import CORS_ALLOW_ORIGINS, HANDOFF_SWEEP_INTERVAL_SECONDS, LOG_LEVEL
from app.core.data_store import get_data_store
from app.routes.slice_routes import router as slice_router
from app.routes.forecast_routes import router as forecast_router

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)


async def _sweep_handoff_store():
    store = get_data_store()
    while True:
        await asyncio.sleep(HANDOFF_SWEEP_INTERVAL_SECONDS)
        store.sweep()


@asynccontextmanager
async def lifespan(app: FastAPI):
    sweeper = asyncio.create_task(_sweep_handoff_store())
    logger.info("[STARTUP] Handoff sweep every %ss", HANDOFF_SWEEP_INTERVAL_SECONDS)
    try:
        yield
    finally:
        sweeper.cancel()
        try:
            await sweeper
        except asyncio.CancelledError:
            pass


app = FastAPI(title="Slice Forecast Simulator", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)

app.include_router(slice_router, prefix="/api", tags=["Backlog Handoff"])
app.include_router(forecast_router, prefix="/api/forecast", tags=["Forecast"])

@app.get("/")
async def root():
    return {"message": "Monte Carlo deadline simulator is active 🚀"}
