"""Entry point for venue-ops."""

import logging
import sys
from pathlib import Path

from venue_ops.config import Settings
from venue_ops.db.database import Database
from venue_ops.db.scenarios import ScenarioStore
from venue_ops.db.songs import SqliteSongStore
from venue_ops.remote.workflow import WorkflowClient
from venue_ops.web.app import create_app


def main():
    """Configure logging, open the database and serve the app."""
    settings = Settings.from_env()

    log_path = Path.cwd() / "venue_ops.log"
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=[
            logging.FileHandler(str(log_path), encoding="utf-8"),
            logging.StreamHandler(sys.stderr),
        ],
    )
    logger = logging.getLogger("venue_ops")
    logger.info("Starting venue-ops for %s", settings.venue_name)
    logger.info("Log file: %s", log_path)

    database = Database(settings.db_path)
    workflow = WorkflowClient(
        retrieve_url=settings.retrieve_webhook,
        refresh_url=settings.refresh_webhook,
        band_status_url=settings.band_status_webhook,
        timeout=settings.http_timeout,
    )
    try:
        app = create_app(
            settings,
            SqliteSongStore(database.connection),
            workflow,
            scenario_store=ScenarioStore(database.connection),
        )
        app.run(host=settings.host, port=settings.port)
    except Exception:
        logger.exception("Fatal error")
        raise
    finally:
        workflow.close()
        database.close()


if __name__ == "__main__":
    main()
