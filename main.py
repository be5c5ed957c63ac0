import logging
import os
import sys
import customtkinter as ctk

# Ensure project root is on sys.path when run directly
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from database.db_manager import DatabaseManager
from database.transaction_dao import TransactionDAO
from database.category_dao import CategoryDAO
from database.savings_dao import SavingsDAO
from database.override_store import SqliteKeyValueStore

from services.category_service import CategoryService
from services.instance_service import InstanceService
from services.override_service import OverrideService
from services.recurring_service import RecurringService
from services.report_service import ReportService
from services.savings_service import SavingsService
from services.transaction_service import TransactionService

from ui.app_window import AppWindow
from utils.app_config import get_db_folder, get_person_labels
from utils.config_logging import configure_logging
from utils.constants import APP_NAME

log = logging.getLogger(__name__)


def main():
    # ── Bootstrap: logging and DB folder from pre-DB config ──────────────────
    configure_logging()
    log.info("Starting %s", APP_NAME)
    db_folder = get_db_folder()
    people = get_person_labels()

    # ── Database ─────────────────────────────────────────────────────────────
    db = DatabaseManager.open_default(db_folder=db_folder)

    # ── DAOs ─────────────────────────────────────────────────────────────────
    tx_dao = TransactionDAO(db)
    category_dao = CategoryDAO(db)
    savings_dao = SavingsDAO(db)
    override_store = SqliteKeyValueStore(db)

    # ── Services ─────────────────────────────────────────────────────────────
    override_svc = OverrideService(override_store)
    recurring_svc = RecurringService()
    tx_svc = TransactionService(tx_dao, category_dao, override_svc, people)
    category_svc = CategoryService(category_dao)
    savings_svc = SavingsService(savings_dao, people)
    instance_svc = InstanceService(tx_dao, recurring_svc, override_svc)
    report_svc = ReportService(instance_svc, tx_dao, recurring_svc, savings_svc)

    # ── Appearance ───────────────────────────────────────────────────────────
    ctk.set_appearance_mode(db.get_setting("appearance_mode", "System"))
    ctk.set_default_color_theme("blue")

    # ── Launch UI ────────────────────────────────────────────────────────────
    app = AppWindow(
        db=db,
        tx_service=tx_svc,
        instance_service=instance_svc,
        override_service=override_svc,
        report_service=report_svc,
        category_service=category_svc,
        savings_service=savings_svc,
    )

    def on_close():
        log.info("Closing %s", APP_NAME)
        db.close()
        app.destroy()

    app.protocol("WM_DELETE_WINDOW", on_close)
    app.mainloop()


if __name__ == "__main__":
    main()
