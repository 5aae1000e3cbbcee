from fastapi import APIRouter

from cleanclick.api.routes import availability, bookings, cleaners, pricing

api_router = APIRouter()
api_router.include_router(availability.router)
api_router.include_router(pricing.router)
api_router.include_router(bookings.router)
api_router.include_router(cleaners.router)
