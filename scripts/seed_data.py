#!/usr/bin/env python3
"""Seed the CRM store with a reproducible synthetic agency.

Collections already present in the store are left alone unless
``--reset`` is given, in which case every collection is overwritten.

Backend and connection settings come from the environment (see
``CrmConfig.from_env``); command-line flags override them.
"""

import argparse
import logging
import sys
import time
from dataclasses import replace
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from estate_crm.config import STORAGE_BACKENDS, CrmConfig, SeedConfig, StorageConfig
from estate_crm.exceptions import CrmError
from estate_crm.generators import SeedScenario
from estate_crm.logging import setup_logging_from_config
from estate_crm.storage import open_store
from estate_crm.store import CrmDataStore

logger = logging.getLogger(__name__)


def build_config(args: argparse.Namespace) -> CrmConfig:
    """Environment configuration with command-line overrides applied."""
    config = CrmConfig.from_env()
    config.storage = StorageConfig(
        backend=args.backend or config.storage.backend,
        data_dir=args.data_dir or config.storage.data_dir,
        pretty_json=args.pretty or config.storage.pretty_json,
    )
    config.seed_sizes = replace(
        config.seed_sizes,
        num_properties=args.properties,
        num_clients=args.clients,
        num_users=args.users,
    )
    if args.seed is not None:
        config.seed = args.seed
    return config


def seed_store(config: CrmConfig, reset: bool = False) -> CrmDataStore:
    """Generate the scenario and write it to the configured store."""
    store = open_store(config)
    scenario = SeedScenario(sizes=config.seed_sizes, seed=config.seed)
    if not reset:
        return scenario.build_store(store)

    snapshot = scenario.generate()
    crm = CrmDataStore(store, clock=lambda: scenario.now)
    for key, records in snapshot.items():
        crm.repository(key).replace_all(records)
    return crm


def print_summary(summary: dict[str, int], elapsed: float) -> None:
    logger.info("=" * 60)
    logger.info("Seed Complete! (%.1fs total)", elapsed)
    logger.info("=" * 60)
    for name, count in summary.items():
        logger.info("  - %s: %d", name.replace("_", " ").capitalize(), count)
    logger.info("=" * 60)


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Seed the CRM store with synthetic data")
    parser.add_argument(
        "--backend",
        choices=STORAGE_BACKENDS,
        default=None,
        help="Storage backend (default: CRM_STORAGE_BACKEND or json)",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directory for the json backend (default: CRM_DATA_DIR or ./data)",
    )
    parser.add_argument(
        "--properties",
        type=int,
        default=SeedConfig.num_properties,
        help=f"Number of properties to generate (default: {SeedConfig.num_properties})",
    )
    parser.add_argument(
        "--clients",
        type=int,
        default=SeedConfig.num_clients,
        help=f"Number of clients to generate (default: {SeedConfig.num_clients})",
    )
    parser.add_argument(
        "--users",
        type=int,
        default=SeedConfig.num_users,
        help=f"Number of staff users to generate (default: {SeedConfig.num_users})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducibility (default: SEED or random)",
    )
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Overwrite collections that already hold data",
    )
    parser.add_argument(
        "--pretty",
        action="store_true",
        help="Indent JSON values",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (default: LOG_LEVEL or INFO)",
    )
    args = parser.parse_args()

    try:
        config = build_config(args)
        setup_logging_from_config(config, args.log_level)
    except CrmError as e:
        parser.error(str(e))

    logger.info(
        "Seeding %s store (seed=%s, reset=%s)",
        config.storage.backend,
        config.seed,
        args.reset,
    )
    start = time.perf_counter()
    crm = seed_store(config, reset=args.reset)
    print_summary(crm.summary(), time.perf_counter() - start)


if __name__ == "__main__":
    main()
