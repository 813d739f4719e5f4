from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from todoapp.config.settings import settings

engine = create_engine(
    settings.DATABASE_URL,
    connect_args=settings.get_connect_args(),
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

# Wherever a DB session is needed, depend on this
def get_db():
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()
