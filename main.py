# ===== Part 1: Imports & Logging ============================================
import logging
import sys

from PySide6.QtWidgets import QApplication

from modules.proposals import create_proposal_window
from utils.app_settings import DEV_MODE, load_settings

logger = logging.getLogger(__name__)
logging.basicConfig(
    level=logging.DEBUG if DEV_MODE else logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)


# ===== Part 2: Application entry ============================================
def main() -> int:
    app = QApplication(sys.argv)
    app.setApplicationName("Activity Proposals")
    settings = load_settings()
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    logger.info("Using data directory %s", settings.data_dir.resolve())
    window = create_proposal_window(settings=settings)
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
