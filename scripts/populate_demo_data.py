"""
Demo Data Population Script for the Clinic Workflow application.

Runs a small clinic day through the workflow: registers patients and
doctors, books appointments, records consultations, raises invoices and
settles one of them. Writes to the backend selected by STORE_BACKEND.

Usage:
    python scripts/populate_demo_data.py

Environment:
    STORE_BACKEND   - 'memory' (default, dry run) or 'cosmos'
    COSMOS_ENDPOINT - Override the default Cosmos DB endpoint
    COSMOS_DATABASE - Override the default database name

Containers Required (cosmos backend, partition key /id):
    - Clinic_Patients
    - Clinic_Doctors
    - Clinic_Appointments
    - Clinic_Consultations
    - Clinic_Invoices
    - Clinic_Payments
"""

import logging
import sys
from datetime import datetime
from decimal import Decimal
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from config import settings
from shared.cosmos_config import CLINIC_CONTAINERS, COSMOS_ENDPOINT, DATABASE_NAME

from clinic import ClinicRepository, ClinicWorkflow
from clinic.errors import ClinicError
from clinic.models import PrescriptionItem

# Configure logging
logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


# =============================================================================
# SAMPLE DATA
# =============================================================================

PATIENTS = [
    {"name": "Asha Rao", "phone": "555-0101", "email": "asha.rao@example.com", "date_of_birth": "1988-04-12"},
    {"name": "Daniel Kim", "phone": "555-0102", "email": "daniel.kim@example.com", "date_of_birth": "1975-11-30"},
]

DOCTORS = [
    {"name": "Dr. Meera Iyer", "specialization": "General Medicine", "fee": Decimal("500.00")},
    {"name": "Dr. Tom Walsh", "specialization": "Dermatology", "fee": Decimal("700.00")},
]


def build_repository() -> ClinicRepository:
    if settings.store_backend.strip().lower() == "cosmos":
        from clinic.cosmos_store import build_cosmos_repository
        return build_cosmos_repository()
    return ClinicRepository.in_memory()


def populate(clinic: ClinicWorkflow) -> None:
    patients = [clinic.register_patient(**p) for p in PATIENTS]
    doctors = [clinic.register_doctor(**d) for d in DOCTORS]

    first = clinic.schedule_appointment(patients[0].id, doctors[0].id, datetime(2026, 11, 2, 10, 0))
    second = clinic.schedule_appointment(patients[1].id, doctors[1].id, datetime(2026, 11, 2, 10, 0))
    clinic.schedule_appointment(patients[1].id, doctors[0].id, datetime(2026, 11, 2, 10, 30))

    visit = clinic.record_consultation(
        first.id,
        "Seasonal flu, rest and fluids",
        [PrescriptionItem("Paracetamol", 10, Decimal("5.00"))],
    )
    invoice = clinic.generate_invoice(visit.consultation.id, settings.default_tax_rate)
    clinic.record_payment(invoice.id, invoice.total)

    visit = clinic.record_consultation(second.id, "Mild eczema", [PrescriptionItem("Hydrocortisone cream", 1, Decimal("120.00"))])
    clinic.generate_invoice(visit.consultation.id, settings.default_tax_rate)


def main():
    """Main function to populate the clinic with sample data."""
    logger.info("=" * 60)
    logger.info("Clinic Workflow - Demo Data Population Script")
    logger.info("=" * 60)
    logger.info(f"Store backend: {settings.store_backend}")
    if settings.store_backend.strip().lower() == "cosmos":
        logger.info(f"Endpoint: {COSMOS_ENDPOINT}")
        logger.info(f"Database: {DATABASE_NAME}")
    logger.info("=" * 60)

    clinic = ClinicWorkflow(build_repository())
    try:
        populate(clinic)
    except ClinicError as e:
        logger.error(f"Demo data rejected ({e.code}): {e.message}")
        logger.error("The store probably already holds demo data")
        return

    logger.info("\n--- Appointments ---")
    for row in clinic.list_appointments():
        logger.info(f"  {row.appointment_id}  {row.slot}  {row.patient_name} with {row.doctor_name}  [{row.status}]")

    logger.info("\n--- Outstanding dues ---")
    for row in clinic.outstanding_dues():
        logger.info(f"  {row.invoice_id}  {row.patient_name}  {row.to_dict()['total']}")

    # Print Azure CLI commands for creating all containers
    logger.info("\n--- Azure CLI Commands to Create All Containers ---")
    logger.info("# If containers don't exist, run these commands:")
    for key, (container_name, partition_key) in CLINIC_CONTAINERS.items():
        logger.info(f'az cosmosdb sql container create --account-name "<account>" --database-name "{DATABASE_NAME}" --name "{container_name}" --partition-key-path "{partition_key}" --resource-group "<resource-group>"')


if __name__ == "__main__":
    main()
