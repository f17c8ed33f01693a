"""
MIREGA Maintenance Admin API
Maintenance report PDFs, building QR labels and certification alerts
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

from routers import maintenance_pdfs, qr_codes, certifications

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Maintenance API starting up...")
    yield
    # Shutdown
    logger.info("Maintenance API shutting down...")

app = FastAPI(
    title="MIREGA Maintenance API",
    description="Elevator maintenance reports and QR labels",
    version="1.0.0",
    lifespan=lifespan
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Tighten in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(maintenance_pdfs.router, prefix="/api/maintenance-pdfs", tags=["Maintenance PDFs"])
app.include_router(qr_codes.router, prefix="/api/qr-codes", tags=["QR Codes"])
app.include_router(certifications.router, prefix="/api/certifications", tags=["Certifications"])

@app.get("/")
async def root():
    return {"status": "ok", "service": "MIREGA Maintenance API", "version": "1.0.0"}

@app.get("/health")
async def health():
    return {"status": "healthy"}
