"""
FastAPI application for the ad composer.
Accepts product images with promotional text and returns the composed
advertisement images together with a combined text summary.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .exceptions import setup_exception_handlers
from .logging_config import setup_logging
from .routers.ad_routes import router as ad_router

setup_logging()

app = FastAPI(title="Ad Composer API")

# -----------------------------------------------------------
#                CORS CONFIGURATION
# -----------------------------------------------------------

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(ad_router)
setup_exception_handlers(app)

# -----------------------------------------------------------
#                ROOT / HEALTH
# -----------------------------------------------------------

@app.get("/")
async def read_root():
    return {"message": "Welcome to the Ad Composer API"}


@app.get("/health")
async def health():
    return {"status": "ok"}
