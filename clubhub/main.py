import logging
from datetime import timedelta
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from clubhub.config import settings
from clubhub.database import Base, engine
from clubhub.auth import router as auth_router
from clubhub.auth.otp import InMemoryOTPStore
from clubhub.events import router as events_router
from clubhub.bookings import router as bookings_router
from clubhub.tickets import router as tickets_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    description="Club events, bookings and ticket check-in API",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.state.otp_store = InMemoryOTPStore(
    ttl=timedelta(minutes=settings.OTP_TTL_MINUTES),
    max_attempts=settings.OTP_MAX_ATTEMPTS,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000"],  # Next.js dev server
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(
    auth_router.router,
    prefix=f"{settings.API_V1_STR}/auth",
    tags=["Authentication"]
)

app.include_router(
    events_router,
    prefix=f"{settings.API_V1_STR}/events",
    tags=["Clubs & Events"]
)

app.include_router(
    bookings_router,
    prefix=f"{settings.API_V1_STR}/bookings",
    tags=["Bookings"]
)

app.include_router(
    tickets_router.router,
    prefix=f"{settings.API_V1_STR}/bookings",
    tags=["Tickets & Check-in"]
)

@app.on_event("startup")
def on_startup():
    Base.metadata.create_all(bind=engine)
    logger.info("%s started (%s)", settings.PROJECT_NAME, settings.ENVIRONMENT)

@app.get("/")
def root():
    """Root endpoint"""
    return {
        "message": settings.PROJECT_NAME,
        "version": "1.0.0",
        "docs": "/docs"
    }

@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
