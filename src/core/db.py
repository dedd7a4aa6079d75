from sqlmodel import Session, SQLModel, create_engine

# make sure all SQLModel models are imported (models) before initializing DB
# otherwise, SQLModel might fail to initialize relationships properly
# for more details: https://github.com/tiangolo/full-stack-fastapi-postgresql/issues/28
import models  # noqa: F401
from core.config import settings

engine = create_engine(str(settings.SQLALCHEMY_DATABASE_URI), pool_pre_ping=True)


def init_db(session: Session) -> None:
    SQLModel.metadata.create_all(session.get_bind())
