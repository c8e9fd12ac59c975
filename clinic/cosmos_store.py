"""
Azure Cosmos DB backend for the clinic repository.

One container per entity kind, documents keyed and partitioned by id.
Uses DefaultAzureCredential for flexible authentication.

Cosmos does not keep insertion order, so every document carries a `seq`
number assigned on first save and reused on every later upsert.
"""

import logging
from typing import Any, Dict, List, Optional, Type, TypeVar

from azure.cosmos import CosmosClient
from azure.cosmos.exceptions import CosmosResourceNotFoundError
from azure.identity import DefaultAzureCredential

from core.data import Repository
from shared.cosmos_config import COSMOS_ENDPOINT, DATABASE_NAME, get_clinic_container_name

from .repository import ENTITY_TYPES, ClinicRepository, EntityKind

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CosmosRepository(Repository[T]):
    """Repository over a single Cosmos DB container."""

    def __init__(self, container, entity_type: Type[T]):
        self._container = container
        self._entity_type = entity_type
        self._next_seq: Optional[int] = None

    def _read_document(self, id: str) -> Optional[Dict[str, Any]]:
        try:
            return self._container.read_item(item=id, partition_key=id)
        except CosmosResourceNotFoundError:
            return None

    def _allocate_seq(self) -> int:
        if self._next_seq is None:
            result = list(self._container.query_items(
                "SELECT VALUE MAX(c.seq) FROM c",
                enable_cross_partition_query=True,
            ))
            current = result[0] if result and result[0] is not None else 0
            self._next_seq = current + 1
        seq = self._next_seq
        self._next_seq += 1
        return seq

    def get_by_id(self, id: str) -> Optional[T]:
        doc = self._read_document(id)
        return self._entity_type.from_dict(doc) if doc else None

    def list_all(self) -> List[T]:
        docs = self._container.query_items(
            "SELECT * FROM c ORDER BY c.seq",
            enable_cross_partition_query=True,
        )
        return [self._entity_type.from_dict(doc) for doc in docs]

    def save(self, entity: T) -> T:
        doc = entity.to_dict()
        existing = self._read_document(doc["id"])
        doc["seq"] = existing["seq"] if existing else self._allocate_seq()
        self._container.upsert_item(doc)
        return entity


def build_cosmos_repository(
    endpoint: str = COSMOS_ENDPOINT,
    database_name: str = DATABASE_NAME,
) -> ClinicRepository:
    """
    Connect to Cosmos DB and wrap one container per entity kind.

    Containers are expected to exist already (see scripts/populate_demo_data.py
    for the Azure CLI commands that create them).
    """
    logger.info("Initializing Cosmos DB connection...")
    credential = DefaultAzureCredential(
        exclude_interactive_browser_credential=False,
        exclude_shared_token_cache_credential=False,
    )
    client = CosmosClient(endpoint, credential=credential)
    database = client.get_database_client(database_name)

    tables = {}
    for kind in EntityKind:
        container_name = get_clinic_container_name(kind.value)
        container = database.get_container_client(container_name)
        try:
            container.read()
        except CosmosResourceNotFoundError:
            raise RuntimeError(
                f"Clinic container '{container_name}' not found in Cosmos DB database "
                f"'{database_name}'. Create it using Azure CLI or Azure Portal."
            )
        tables[kind] = CosmosRepository(container, ENTITY_TYPES[kind])

    logger.info(f"Connected to Cosmos DB: {database_name}")
    return ClinicRepository(tables)
