import logging

from daily_forge.entries import routes as entries_router
from daily_forge.goals import routes as goals_router
from daily_forge.reading_plans import routes as reading_plans_router
from daily_forge.stats import routes as stats_router
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from daily_forge.core.config import CORS_ORIGINS, LOG_LEVEL
from daily_forge.core.database import Base, engine

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

app = FastAPI(
    title="Daily Forge API",
    version="1.0.0",
    description="Backend for Daily Forge: daily entries, goals, reading plans and progress stats.",
)

# CORS config
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(entries_router.router)
app.include_router(goals_router.router)
app.include_router(reading_plans_router.router)
app.include_router(stats_router.router)


@app.get("/health", tags=["System"])
def health_route():
    return {"status": "ok"}


# DB Tables
@app.on_event("startup")
def create_tables():
    Base.metadata.create_all(bind=engine)
