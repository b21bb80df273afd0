"""Create the schema and seed default stages, role prices and the admin account."""
from __future__ import annotations

import logging

from quickride.core.config import get_settings
from quickride.core.logging import configure_logging
from quickride.db.seed import seed_reference_data
from quickride.db.session import SessionLocal, engine
from quickride.models import Base

logger = logging.getLogger("quickride.scripts.seed")


def main() -> None:
    settings = get_settings()
    configure_logging(level=settings.log_level)
    Base.metadata.create_all(bind=engine)
    with SessionLocal() as session:
        admin = seed_reference_data(session, settings)
        logger.info("Seed complete; admin shareholder id %s", admin.id)


if __name__ == "__main__":
    main()
