"""
Create the catalog schema and seed reference data.

This script:
1) Reads the database URL from the environment (.env supported)
2) Creates any missing tables
3) Inserts the default age ratings and genres

Usage:
    python -m scripts.init_catalog

Running it again is safe: existing tables and reference rows are kept.
"""

from loguru import logger  # console logging

from film_catalog.config import Config, configure_logging  # environment settings
from film_catalog.database import create_catalog_engine  # storage handle
from film_catalog.schema import create_schema, seed_reference_data  # DDL + seed rows


def main():
	configure_logging(Config.LOG_LEVEL)

	# Headline banner for visibility in console
	logger.info("=" * 60)
	logger.info("Initialize Film Catalog")
	logger.info("=" * 60)

	# 1) Connect
	logger.info("[1/3] Connecting...")
	engine = create_catalog_engine(Config.DATABASE_URL, echo=Config.ECHO_SQL)

	# 2) Tables
	logger.info("[2/3] Creating schema...")
	create_schema(engine)

	# 3) Reference rows
	logger.info("[3/3] Seeding ratings and genres...")
	seed_reference_data(engine)

	engine.dispose()
	logger.info("All done!")
	logger.info("=" * 60)


if __name__ == '__main__':
	main()
