"""
Database configuration - SQLite by default, any SQLAlchemy URL via DATABASE_URL
"""
import logging
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from pms.config import settings

logger = logging.getLogger(__name__)

connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(settings.DATABASE_URL, connect_args=connect_args)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Dependency: yield a database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    """Create tables and seed the default tax configuration"""
    from pms.models import ontology  # noqa
    from pms.services.tax_service import TaxService

    bind = bind or engine
    Base.metadata.create_all(bind=bind)

    db = sessionmaker(autocommit=False, autoflush=False, bind=bind)()
    try:
        created = TaxService(db).seed_defaults()
        if created:
            logger.info(f"Seeded tax configuration: {', '.join(created)}")
    finally:
        db.close()
