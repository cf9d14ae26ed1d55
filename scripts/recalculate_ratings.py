from __future__ import annotations

import logging
from decimal import Decimal

from sqlalchemy import func, select

from murabaat.core.config import settings
from murabaat.core.logging_config import configure_logging
from murabaat.db.session import SessionLocal
from murabaat.models.companies import Company
from murabaat.services.ratings import recompute_all_company_ratings, round_half_up

logger = logging.getLogger("recalculate_ratings")


def main() -> int:
    configure_logging(log_dir=settings.log_dir, level=settings.log_level)

    db = SessionLocal()
    try:
        logger.info("Recalculating ratings for all companies...")
        count = recompute_all_company_ratings(db)

        avg, total_reviews = db.execute(
            select(func.avg(Company.rating), func.sum(Company.reviews_count))
        ).one()
        logger.info("Done: companies=%s", count)
        logger.info("Average company rating: %s", round_half_up(Decimal(str(avg or 0))))
        logger.info("Total approved reviews: %s", int(total_reviews or 0))
        return 0
    except Exception:
        logger.exception("Rating recalculation failed")
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    raise SystemExit(main())
