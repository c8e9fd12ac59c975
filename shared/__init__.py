"""
Shared modules for the Clinic Workflow application.

This package contains shared configuration used by the application and scripts.
"""

from shared.cosmos_config import (
    COSMOS_ENDPOINT,
    DATABASE_NAME,
    CLINIC_CONTAINERS,
    get_clinic_container_name,
)

__all__ = [
    "COSMOS_ENDPOINT",
    "DATABASE_NAME",
    "CLINIC_CONTAINERS",
    "get_clinic_container_name",
]
