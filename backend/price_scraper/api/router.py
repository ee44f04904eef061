"""API router -- aggregates all endpoint routers."""

from fastapi import APIRouter

from price_scraper.api import health, scrape

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(scrape.router, tags=["scrape"])
