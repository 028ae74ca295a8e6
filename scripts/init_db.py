import logging
from rwjobs.db.session import ENGINE, current_engine_url
from rwjobs.db.models import Base

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

def main():
    logger.info("Initializing database schema at %s...", current_engine_url())
    Base.metadata.create_all(bind=ENGINE)
    logger.info("Database schema initialized successfully.")

if __name__ == "__main__":
    main()
