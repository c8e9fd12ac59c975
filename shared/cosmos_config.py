"""
Azure Cosmos DB Configuration.

Centralized configuration for all Cosmos DB settings used across the application.
This ensures consistency between the application, scripts, and data population tools.

Environment Variables (optional overrides):
    COSMOS_ENDPOINT - Override the default Cosmos DB endpoint
    COSMOS_DATABASE - Override the default database name
"""

import os

# =============================================================================
# COSMOS DB CONNECTION
# =============================================================================

COSMOS_ENDPOINT = os.getenv(
    "COSMOS_ENDPOINT",
    "https://localhost:8081/"
)

DATABASE_NAME = os.getenv(
    "COSMOS_DATABASE",
    "clinic"
)

# =============================================================================
# CLINIC DATA CONTAINERS
# =============================================================================

# Container names for clinic workflow data, one per entity kind
# Format: logical_name -> (container_name, partition_key_path)
CLINIC_CONTAINERS = {
    "patients": ("Clinic_Patients", "/id"),
    "doctors": ("Clinic_Doctors", "/id"),
    "appointments": ("Clinic_Appointments", "/id"),
    "consultations": ("Clinic_Consultations", "/id"),
    "invoices": ("Clinic_Invoices", "/id"),
    "payments": ("Clinic_Payments", "/id"),
}

# Simple container name lookup (without partition key)
CLINIC_CONTAINER_NAMES = {
    key: name for key, (name, _) in CLINIC_CONTAINERS.items()
}

# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def get_clinic_container_name(logical_name: str) -> str:
    """Get the actual container name for a logical clinic container name."""
    if logical_name in CLINIC_CONTAINER_NAMES:
        return CLINIC_CONTAINER_NAMES[logical_name]
    raise ValueError(f"Unknown clinic container: {logical_name}")
