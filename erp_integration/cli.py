"""
Command line entry point for the ERP integration.

    erp-integration run [FILE]           apply an ERP products file
    erp-integration cancel-order ID      mark an order canceled in the ERP orders file
    erp-integration init-db              create the catalog tables
"""
import argparse
import sys
from typing import Callable, List, Optional, TextIO

from sqlalchemy.orm import Session

from erp_integration.core.config import settings
from erp_integration.core.erp_logger import ErpIntegrationLogger, configure_erp_logging
from erp_integration.core.exceptions import EmptyBatchError, ErpFileReadError
from erp_integration.db.session import SessionLocal, init_db
from erp_integration.repositories.catalog_repository import CatalogRepository
from erp_integration.services.erp_file_reader import read_erp_products
from erp_integration.services.order_cancel_service import OrderCancelService
from erp_integration.services.product_batch_processor import ProductBatchProcessor

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="erp-integration",
        description="Processes ERP product integration actions (update, new, enable, disable) from JSON file",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    run_p = sub.add_parser("run", help="Apply an ERP products file to the catalog.")
    run_p.add_argument(
        "file", nargs="?", default=None,
        help=f"Path to the JSON file (default: {settings.products_json_path})",
    )

    cancel_p = sub.add_parser("cancel-order", help="Mark an order as canceled in the ERP orders file.")
    cancel_p.add_argument("increment_id", help="Order increment id.")

    sub.add_parser("init-db", help="Create the catalog tables.")
    return p


def run_import(
    file_path: Optional[str],
    erp_logger: ErpIntegrationLogger,
    session_factory: Callable[[], Session] = SessionLocal,
) -> int:
    file_path = file_path or settings.products_json_path
    try:
        records = read_erp_products(file_path)
    except ErpFileReadError as e:
        erp_logger.error(f"Failed to read ERP file: {e}")
        return EXIT_FAILURE

    db = session_factory()
    try:
        report = ProductBatchProcessor(CatalogRepository(db)).process(records)
    except EmptyBatchError as e:
        erp_logger.error(str(e))
        return EXIT_FAILURE
    finally:
        db.close()

    for outcome in report.outcomes:
        if outcome.succeeded:
            erp_logger.info(outcome.message)

    if report.nothing_processed:
        erp_logger.comment("No records were processed.")
    for failure in report.failures:
        erp_logger.error(failure)
    erp_logger.comment(report.summary())
    return EXIT_SUCCESS


def main(
    argv: Optional[List[str]] = None,
    output: Optional[TextIO] = None,
    session_factory: Callable[[], Session] = SessionLocal,
) -> int:
    args = build_parser().parse_args(argv)
    configure_erp_logging()
    erp_logger = ErpIntegrationLogger(output=output or sys.stdout)

    if args.cmd == "run":
        return run_import(args.file, erp_logger, session_factory)

    if args.cmd == "cancel-order":
        result = OrderCancelService(erp_logger=erp_logger).mark_order_canceled(args.increment_id)
        return EXIT_SUCCESS if result.updated else EXIT_FAILURE

    if args.cmd == "init-db":
        init_db()
        erp_logger.info(f"Catalog tables ready on {settings.database_url}")
        return EXIT_SUCCESS

    erp_logger.error("Unknown command.")
    return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
