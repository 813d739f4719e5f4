# create_tables.py
import logging

from todoapp.config.settings import settings
from todoapp.database import Base, SessionLocal, engine
from todoapp.logging_setup import setup_logging
from todoapp.models import User, UserRole
from todoapp.utils.security import hash_password

logger = logging.getLogger("todoapp.create_tables")


def create_tables():
    """Create all tables"""
    Base.metadata.create_all(bind=engine)
    logger.info(f"Tables ready: {', '.join(sorted(Base.metadata.tables))}")


def create_default_admin():
    """Create the bootstrap admin user if it does not exist yet"""
    email = settings.DEFAULT_ADMIN_EMAIL.lower()
    db = SessionLocal()
    try:
        if db.query(User).filter(User.email == email).first():
            logger.info(f"Admin user {email} already exists")
            return

        db.add(User(
            name=settings.DEFAULT_ADMIN_NAME,
            email=email,
            hashed_password=hash_password(settings.DEFAULT_ADMIN_PASSWORD),
            role=UserRole.ADMIN.value,
            is_active=True,
        ))
        db.commit()
        logger.info(f"Default admin user created: {email}")
    finally:
        db.close()


if __name__ == "__main__":
    setup_logging(settings.LOG_LEVEL)
    create_tables()
    create_default_admin()
