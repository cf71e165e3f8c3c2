import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from kguardian.core.database import engine, Base
from kguardian.core.config import settings
from kguardian.core.events import redis_client
from kguardian.core.exceptions import register_exception_handlers
from kguardian.core.logging_config import setup_logging
from kguardian.routers import auth, incidents, dashboard

setup_logging(settings.LOG_LEVEL, settings.LOG_JSON)
logger = logging.getLogger("kguardian")

app = FastAPI(title="K-Guardian API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(auth.router)
app.include_router(incidents.router)
app.include_router(dashboard.router)

@app.on_event("startup")
async def startup():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("K-Guardian API started")

@app.on_event("shutdown")
async def shutdown():
    await redis_client.aclose()

@app.get("/")
async def root():
    return {"message": "K-Guardian API is running"}
