"""
Store a gateway's configuration from the command line.

Values are validated against the gateway's declared fields; secret fields are
encrypted before they are written.

Usage (from the project root, with .env configured):
    python scripts/configure-gateway.py example-subscription-gateway \
        mode=sandbox client_id=abc client_secret=xyz

    python scripts/configure-gateway.py --list

Requires: database reachable and migrations applied (alembic upgrade head).
"""

import argparse
import os
import sys
from pathlib import Path

root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(root))
os.chdir(root)

from dotenv import load_dotenv
load_dotenv()

from subscription_gateway.database.repositories.gateway_configuration_repository import (
    GatewayConfigurationRepository,
)
from subscription_gateway.database.session import get_session
from subscription_gateway.payments import GatewayConfigError, GatewayNotFoundError, get_gateway, get_registry


def parse_pairs(pairs):
    values = {}
    for pair in pairs:
        if "=" not in pair:
            raise SystemExit(f"Invalid value '{pair}', expected key=value")
        key, value = pair.split("=", 1)
        values[key.strip()] = value
    return values


def main() -> None:
    parser = argparse.ArgumentParser(description="Configure a subscription gateway")
    parser.add_argument("identifier", nargs="?", help="Gateway identifier")
    parser.add_argument("values", nargs="*", help="key=value pairs")
    parser.add_argument("--list", action="store_true", help="List registered gateways and their fields")
    parser.add_argument("--updated-by", default="cli")
    args = parser.parse_args()

    if args.list or not args.identifier:
        for identifier in get_registry().list_identifiers():
            gateway = get_gateway(identifier)
            print(f"{identifier} (v{gateway.version}) currencies={','.join(gateway.currencies)}")
            for cfg in gateway.config_fields().values():
                print(f"  {cfg.key:<16} {cfg.type:<7} {','.join(cfg.rules)}")
        return

    try:
        gateway = get_gateway(args.identifier)
        values = gateway.validate_config(parse_pairs(args.values))
    except GatewayNotFoundError as e:
        raise SystemExit(str(e))
    except GatewayConfigError as e:
        for key, message in e.errors.items():
            print(f"  {key}: {message}")
        raise SystemExit(str(e))

    with get_session() as session:
        GatewayConfigurationRepository(session).save_values(
            args.identifier,
            values,
            secret_keys=gateway.secret_keys(),
            updated_by=args.updated_by,
        )
    print(f"  Stored {len(values)} value(s) for {args.identifier}")


if __name__ == "__main__":
    main()
