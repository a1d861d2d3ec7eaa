"""CLI entry point for ledger CSV imports.

Usage:
    python -m scripts.ingest_ledger --file ledger.csv [--db-url sqlite:///ledger.db] [--init]
    python -m scripts.ingest_ledger --directory exports/ --table transactions --chunk-size 100

Database settings default to DB_URL or DB_HOST/DB_PORT/DB_UID/DB_PASSWORD/DB_NAME/DB_TLS,
read from the environment or a .env file in the working directory.
"""

import logging
import sys
from typing import Sequence

from dotenv import find_dotenv, load_dotenv

from ledgerdb import DatabaseError, create_service
from ledger_ingest.config import load_config
from ledger_ingest.errors import LedgerIngestError
from ledger_ingest.pipeline import ImportReport, ensure_schema, run_import

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger(__name__)


def main(argv: Sequence[str] | None = None) -> ImportReport:
    load_dotenv(find_dotenv(usecwd=True))
    try:
        config = load_config(argv)
    except LedgerIngestError as e:
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
        logger.error("%s", e)
        sys.exit(1)

    logging.basicConfig(level=config.log_level, format=LOG_FORMAT)

    try:
        service = create_service(config.db_url)
    except ValueError as e:
        logger.error("%s", e)
        sys.exit(1)

    report = ImportReport()
    try:
        service.connect()
        if config.init_schema:
            ensure_schema(service, config.table)
        run_import(service, config.source, config.table, config.chunk_size, report)
    except (DatabaseError, LedgerIngestError) as e:
        logger.error("%s", e)
        logger.error("Import aborted. %s", report.summary())
        sys.exit(1)
    finally:
        service.close()

    logger.info("Done. %s", report.summary())
    return report


if __name__ == "__main__":
    main()
