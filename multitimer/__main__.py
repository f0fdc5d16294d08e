"""Allow running MultiTimer as a module: python -m multitimer."""

import logging
import os
import sys

from PyQt6.QtWidgets import QApplication

from .database.db import init_db
from .timer.persistence import TimerPersistence
from .timer.store import TimerStore
from .app import MultiTimerApp


def configure_logging() -> None:
    level = os.environ.get("MULTITIMER_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    configure_logging()
    logger = logging.getLogger("multitimer")
    init_db()

    app = QApplication(sys.argv)
    app.setApplicationName("MultiTimer")
    app.setOrganizationName("MultiTimer")

    store = TimerStore(TimerPersistence())
    store.load()

    window = MultiTimerApp(store)
    window.show()
    logger.info("MultiTimer ready")

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
