"""
FastAPI Application for the Clinic Workflow Engine.

Exposes registration, scheduling, consultation, billing, payment and
reporting as JSON endpoints. All business decisions are taken by
clinic.ClinicWorkflow; this module only translates HTTP to calls and
typed failures to JSON errors.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import settings

from clinic import ClinicRepository, ClinicWorkflow
from clinic.errors import ClinicError
from clinic.reporting import InvoiceBreakdown
from clinic.schemas import (
    AppointmentCreate,
    ConsultationCreate,
    DoctorCreate,
    InvoiceCreate,
    PatientCreate,
    PaymentCreate,
)

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Reduce Azure SDK logging verbosity
logging.getLogger("azure.cosmos").setLevel(logging.WARNING)
logging.getLogger("azure.core").setLevel(logging.WARNING)
logging.getLogger("azure.identity").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)

# HTTP status for each workflow failure code
ERROR_STATUS = {
    "not_found": 404,
    "slot_conflict": 409,
    "duplicate_invoice": 409,
    "already_paid": 409,
    "invalid_transition": 409,
    "invalid_item": 422,
    "invalid_rate": 422,
    "amount_mismatch": 422,
    "invalid_fee": 422,
}

# Global instances
workflow: Optional[ClinicWorkflow] = None


def build_repository() -> ClinicRepository:
    """Create the repository selected by STORE_BACKEND."""
    backend = settings.store_backend.strip().lower()
    if backend == "memory":
        return ClinicRepository.in_memory()
    if backend == "cosmos":
        from clinic.cosmos_store import build_cosmos_repository
        return build_cosmos_repository()
    raise ValueError(f"Unknown store backend: {settings.store_backend}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager - handles startup and shutdown."""
    global workflow

    logger.info("Starting Clinic Workflow Application...")
    workflow = ClinicWorkflow(build_repository())
    logger.info(f"Clinic workflow ready ({settings.store_backend} store)")

    yield

    logger.info("Shutting down...")
    workflow = None


# Create FastAPI app
app = FastAPI(
    title="Clinic Workflow",
    description="Appointments, consultations, invoices and payments for a small clinic",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc"
)

# CORS middleware for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_workflow() -> ClinicWorkflow:
    if workflow is None:
        raise HTTPException(status_code=500, detail="Server not initialized")
    return workflow


@app.exception_handler(ClinicError)
async def clinic_error_handler(request: Request, exc: ClinicError):
    status_code = ERROR_STATUS.get(exc.code, 400)
    logger.info(f"{request.method} {request.url.path} rejected: {exc.code} - {exc.message}")
    return JSONResponse(status_code=status_code, content=exc.to_dict())


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.error(f"{request.method} {request.url.path} failed: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": "internal_error", "message": "Internal server error", "details": {}},
    )


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": "1.0.0",
        "store_backend": settings.store_backend,
        "initialized": workflow is not None,
    }


# =============================================================================
# REGISTRATION ENDPOINTS
# =============================================================================

@app.post("/api/patients", status_code=201)
def register_patient(request: PatientCreate, clinic: ClinicWorkflow = Depends(get_workflow)):
    patient = clinic.register_patient(
        request.name,
        phone=request.phone,
        email=request.email,
        date_of_birth=request.date_of_birth,
    )
    return patient.to_dict()


@app.get("/api/patients")
def list_patients(clinic: ClinicWorkflow = Depends(get_workflow)):
    return [patient.to_dict() for patient in clinic.list_patients()]


@app.post("/api/doctors", status_code=201)
def register_doctor(request: DoctorCreate, clinic: ClinicWorkflow = Depends(get_workflow)):
    doctor = clinic.register_doctor(
        request.name,
        request.specialization,
        request.fee,
        phone=request.phone,
        email=request.email,
    )
    return doctor.to_dict()


@app.get("/api/doctors")
def list_doctors(clinic: ClinicWorkflow = Depends(get_workflow)):
    return [doctor.to_dict() for doctor in clinic.list_doctors()]


# =============================================================================
# APPOINTMENT ENDPOINTS
# =============================================================================

@app.post("/api/appointments", status_code=201)
def schedule_appointment(request: AppointmentCreate, clinic: ClinicWorkflow = Depends(get_workflow)):
    appointment = clinic.schedule_appointment(request.patient_id, request.doctor_id, request.slot)
    return appointment.to_dict()


@app.get("/api/appointments")
def list_appointments(clinic: ClinicWorkflow = Depends(get_workflow)):
    return [row.to_dict() for row in clinic.list_appointments()]


@app.post("/api/appointments/{appointment_id}/cancel")
def cancel_appointment(appointment_id: str, clinic: ClinicWorkflow = Depends(get_workflow)):
    return clinic.cancel_appointment(appointment_id).to_dict()


# =============================================================================
# CONSULTATION, BILLING AND PAYMENT ENDPOINTS
# =============================================================================

@app.post("/api/consultations", status_code=201)
def record_consultation(request: ConsultationCreate, clinic: ClinicWorkflow = Depends(get_workflow)):
    recorded = clinic.record_consultation(
        request.appointment_id,
        request.notes,
        [line.to_item() for line in request.prescriptions],
    )
    return {
        "consultation": recorded.consultation.to_dict(),
        "rejected_items": [error.to_dict() for error in recorded.rejected_items],
    }


@app.post("/api/invoices", status_code=201)
def generate_invoice(request: InvoiceCreate, clinic: ClinicWorkflow = Depends(get_workflow)):
    tax_rate = request.tax_rate if request.tax_rate is not None else settings.default_tax_rate
    invoice = clinic.generate_invoice(request.consultation_id, tax_rate)
    return InvoiceBreakdown.of(invoice).to_dict()


@app.get("/api/invoices/{invoice_id}")
def get_invoice(invoice_id: str, clinic: ClinicWorkflow = Depends(get_workflow)):
    return clinic.invoice_breakdown(invoice_id).to_dict()


@app.post("/api/payments", status_code=201)
def record_payment(request: PaymentCreate, clinic: ClinicWorkflow = Depends(get_workflow)):
    return clinic.record_payment(request.invoice_id, request.amount).to_dict()


@app.get("/api/payments")
def list_payments(clinic: ClinicWorkflow = Depends(get_workflow)):
    return [payment.to_dict() for payment in clinic.list_payments()]


# =============================================================================
# REPORTS
# =============================================================================

@app.get("/api/reports/outstanding-dues")
def outstanding_dues(clinic: ClinicWorkflow = Depends(get_workflow)):
    return [row.to_dict() for row in clinic.outstanding_dues()]


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=False,
        log_level=settings.log_level.lower()
    )
