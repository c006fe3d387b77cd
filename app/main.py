from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.logging import setup_logging
from app.api.errors import register_exception_handlers
from app.api.routes import availability, bookings, calendar_settings, meeting_types, unavailable_times

from app.db.init_db import init_db
from app.db.session import engine

setup_logging()

app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json"
)

# Set all CORS enabled origins
if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

register_exception_handlers(app)

app.include_router(availability.router, prefix=f"{settings.API_V1_STR}/availability", tags=["availability"])
app.include_router(bookings.router, prefix=f"{settings.API_V1_STR}/bookings", tags=["bookings"])
app.include_router(calendar_settings.router, prefix=f"{settings.API_V1_STR}/calendar-settings", tags=["calendar-settings"])
app.include_router(meeting_types.router, prefix=f"{settings.API_V1_STR}/meeting-types", tags=["meeting-types"])
app.include_router(unavailable_times.router, prefix=f"{settings.API_V1_STR}/unavailable-times", tags=["unavailable-times"])

@app.get("/health")
def health_check():
    return {"status": "ok"}

@app.on_event("startup")
def create_tables_on_startup():
    if settings.AUTO_CREATE_TABLES:
        init_db(engine)
