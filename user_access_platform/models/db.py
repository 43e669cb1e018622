from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.engine import make_url
from sqlmodel import SQLModel, Session, create_engine

# ensure models registered
from user_access_platform.models import user  # noqa: F401
from user_access_platform.utils.logging_config import get_logger

logger = get_logger(__name__)


class Database:
    """Owns the engine for one application instance.

    Created by ``create_app`` and disposed on shutdown.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        connect_args = {}
        engine_kwargs = {}
        if make_url(url).get_backend_name() == "sqlite":
            connect_args["check_same_thread"] = False
        else:
            engine_kwargs["pool_pre_ping"] = True
        self.engine = create_engine(url, echo=echo, connect_args=connect_args, **engine_kwargs)

    def init_db(self) -> None:
        """初始化数据库，创建所有表。"""
        SQLModel.metadata.create_all(self.engine)

    def get_session(self) -> Session:
        """获取 Session，用于 CRUD 操作"""
        return Session(self.engine, expire_on_commit=False)

    @contextmanager
    def session(self) -> Iterator[Session]:
        with self.get_session() as session:
            try:
                yield session
            except Exception:
                session.rollback()
                raise

    def dispose(self) -> None:
        self.engine.dispose()
        logger.info("Database engine disposed")
