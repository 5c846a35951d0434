from typing import Any, Dict, Generator

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from starlette.requests import Request

from src.common.logger import logger

Base = declarative_base()


def create_db(engine: Engine) -> str:
    """Создаёт недостающие таблицы моделей, зарегистрированных на Base."""
    existing = set(inspect(engine).get_table_names())
    if set(Base.metadata.tables) <= existing:
        logger.info("Database already exists")
        return "Database already exists"
    Base.metadata.create_all(bind=engine)
    return "Database created successfully"


def _engine_options(url: str) -> Dict[str, Any]:
    if not url.startswith("sqlite"):
        return {}
    # sync-эндпоинты выполняются в threadpool FastAPI
    options: Dict[str, Any] = {"connect_args": {"check_same_thread": False}}
    if url in ("sqlite://", "sqlite:///:memory:"):
        options["poolclass"] = StaticPool
    return options


class Database:
    """
    Пул соединений + фабрика сессий. Создаётся явно при старте
    приложения и закрывается через dispose() при остановке.
    """

    def __init__(self, url: str, echo: bool = False) -> None:
        self.url = url
        self.engine: Engine = create_engine(
            url,
            echo=echo,
            pool_pre_ping=True,
            future=True,
            **_engine_options(url),
        )
        self.SessionLocal = sessionmaker(bind=self.engine, autoflush=False, autocommit=False)

    def connect(self) -> bool:
        """
        Проверяет соединение и создаёт таблицы.
        Ошибка подключения логируется и не роняет приложение.
        """
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            message = create_db(self.engine)
        except SQLAlchemyError as e:
            logger.error("Error db Connection - %s", e)
            return False
        logger.info("Successfully connection to db: %s", message)
        return True

    def session(self) -> Generator[Session, None, None]:
        db = self.SessionLocal()
        try:
            yield db
        finally:
            db.close()

    def dispose(self) -> None:
        self.engine.dispose()
        logger.info("Database connection pool closed")


def get_db(request: Request) -> Generator[Session, None, None]:
    database: Database = request.app.state.database
    yield from database.session()
