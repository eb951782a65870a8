"""
Configuration Loader

Fetches a client and its facility configuration for one resolution pass and
freezes it into a BillingSnapshot.
"""

import json
import logging
from pathlib import Path

from .models import BillingSnapshot, Client, FacilitySnapshot

logger = logging.getLogger(__name__)


class ClientNotFoundError(LookupError):
    """The client does not exist or is outside the caller's company."""

    def __init__(self, client_id: str):
        super().__init__(f"Client not found: {client_id}")
        self.client_id = client_id


class ConfigurationStore:
    """Read path to client configuration. Subclasses back it with real storage."""

    def get_client(self, client_id: str, company_id: str) -> Client | None:
        raise NotImplementedError


class InMemoryConfigurationStore(ConfigurationStore):
    """Configuration store holding already-parsed clients keyed by id."""

    def __init__(self, clients: list[Client] | None = None):
        self._clients = {c.id: c for c in clients or []}

    def add(self, client: Client) -> None:
        self._clients[client.id] = client

    def get_client(self, client_id: str, company_id: str) -> Client | None:
        client = self._clients.get(str(client_id))
        if client is None or client.company_id != str(company_id):
            return None
        return client

    @classmethod
    def from_dict(cls, data: dict) -> "InMemoryConfigurationStore":
        return cls([Client.from_dict(c) for c in data.get("clients", [])])

    @classmethod
    def from_json_file(cls, path: str | Path) -> "InMemoryConfigurationStore":
        with open(path, encoding="utf-8") as fh:
            return cls.from_dict(json.load(fh))


class ConfigurationLoader:
    """Builds the per-month snapshot the resolver works from."""

    def __init__(self, store: ConfigurationStore):
        self.store = store

    def load(self, client_id: str, company_id: str, year: int, month: int) -> BillingSnapshot:
        """
        Load the client's facilities with their active seasonal rules and the
        single override matching (year, month).

        Raises:
            ClientNotFoundError: unknown client or wrong company.
        """
        client = self.store.get_client(client_id, company_id)
        if client is None:
            raise ClientNotFoundError(client_id)

        logger.debug(f"Loaded client {client.id} with {len(client.facilities)} facilities for {year}-{month:02d}")

        facilities = sorted(client.facilities, key=lambda fp: fp.sort_order)
        return BillingSnapshot(
            client=client,
            year=year,
            month=month,
            facilities=tuple(
                FacilitySnapshot(
                    profile=fp,
                    seasonal_rules=tuple(r for r in fp.seasonal_rules if r.is_active),
                    override=fp.override_for(year, month),
                )
                for fp in facilities
            ),
        )
