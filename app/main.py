from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1.attendance.router import router as attendance_router
from app.api.v1.auth.router import router as auth_router
from app.api.v1.employees.router import router as employees_router
from app.api.v1.scanners.router import router as scanners_router
from app.core.config import settings
from app.core.dependencies import get_qr_code_service
from app.core.logging_config import setup_logging


def create_app() -> FastAPI:
    setup_logging(settings.log_level)
    # Build the QR code service now so a bad salt stops startup instead of the first scan
    get_qr_code_service()

    app = FastAPI(title="Breakfast Counter")

    # CORS: scanner stations and the admin UI call this API from the browser
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routers
    app.include_router(auth_router)
    app.include_router(attendance_router)
    app.include_router(employees_router)
    app.include_router(scanners_router)

    return app


app = create_app()
