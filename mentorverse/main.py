"""
Main FastAPI application
"""
from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
from contextlib import asynccontextmanager

from mentorverse.core.config import settings
from mentorverse.models.models import SuccessResponse, ErrorResponse
from mentorverse.services.catalog.catalog_service import catalog_service
from mentorverse.services.store.profile_store import profile_store
from mentorverse.services.store.seed import seed_demo_data
from mentorverse.api.auth.routes import router as auth_router
from mentorverse.api.user.routes import router as user_router
from mentorverse.api.mentor.routes import router as mentor_router
from mentorverse.api.booking.routes import router as booking_router
from mentorverse.api.group_session.routes import router as group_session_router
from mentorverse.api.webinar.routes import router as webinar_router
from mentorverse.api.recommendation.routes import router as recommendation_router

# Configure logging
logging.basicConfig(level=logging.DEBUG if settings.debug else logging.INFO)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("Starting Mentorverse Backend API")
    if settings.seed_demo_data:
        seed_demo_data(profile_store, catalog_service)
    yield
    logger.info("Shutting down Mentorverse Backend API")

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Backend API for Mentorverse - mentorship marketplace",
    version="1.0.0",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    logger.error(f"Global exception: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(
            message="Internal server error",
            error_code="INTERNAL_ERROR"
        ).model_dump()
    )

# Health check endpoint
@app.get("/health", response_model=SuccessResponse)
async def health_check():
    """Health check endpoint"""
    return SuccessResponse(message="Mentorverse Backend API is running")

# Include routers
app.include_router(auth_router)
app.include_router(user_router)
app.include_router(mentor_router)
app.include_router(booking_router)
app.include_router(group_session_router)
app.include_router(webinar_router)
app.include_router(recommendation_router)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
