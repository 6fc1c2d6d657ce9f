"""
Gateway Configuration Repository

Stores the values an administrator entered for a gateway's declared config
fields. Keys listed as secret are encrypted before they reach the database and
decrypted on the way out.
"""

import logging
from typing import Any, Dict, Iterable, Optional

from sqlalchemy.orm import Session

from subscription_gateway.database.models.gateway_configuration import GatewayConfiguration
from subscription_gateway.utils.encryption import decrypt_value, encrypt_value

logger = logging.getLogger(__name__)


class GatewayConfigurationRepository:
    def __init__(self, session: Session):
        self.session = session

    def get(self, gateway: str) -> Optional[GatewayConfiguration]:
        return self.session.get(GatewayConfiguration, gateway)

    def get_values(self, gateway: str, secret_keys: Iterable[str] = ()) -> Dict[str, Any]:
        """
        Load stored values for a gateway.

        Args:
            gateway: Gateway identifier
            secret_keys: Keys whose stored value is encrypted

        Returns:
            Plain values (empty dict when nothing is stored)
        """
        row = self.get(gateway)
        if row is None:
            return {}
        secrets = set(secret_keys)
        values = dict(row.values or {})
        for key in secrets & values.keys():
            values[key] = decrypt_value(values[key])
        return values

    def save_values(
        self,
        gateway: str,
        values: Dict[str, Any],
        secret_keys: Iterable[str] = (),
        updated_by: str = "system",
    ) -> GatewayConfiguration:
        secrets = set(secret_keys)
        stored = {
            key: encrypt_value(str(value)) if key in secrets else value
            for key, value in values.items()
        }

        row = self.get(gateway)
        if row is None:
            row = GatewayConfiguration(gateway=gateway, values=stored, updated_by=updated_by)
            self.session.add(row)
        else:
            row.values = stored
            row.updated_by = updated_by
        self.session.flush()
        logger.info(f"Stored configuration for gateway {gateway} ({len(stored)} field(s))")
        return row

    def is_configured(self, gateway: str) -> bool:
        return self.get(gateway) is not None
