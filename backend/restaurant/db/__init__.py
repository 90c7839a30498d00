import importlib
import logging

from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker

from restaurant.config import settings

log = logging.getLogger(__name__)

DATABASE_URL = settings.DATABASE_URL
_is_sqlite = DATABASE_URL.startswith("sqlite")

engine = create_engine(
    DATABASE_URL,
    future=True,
    echo=False,
    connect_args={"check_same_thread": False} if _is_sqlite else {},
)

if _is_sqlite:
    # pysqlite only emits BEGIN before the first write, so reads of a checkout
    # would run outside the transaction and SAVEPOINTs misbehave. Emit it ourselves.
    # Deferred BEGIN under WAL: readers keep their snapshot while one writer commits.
    @event.listens_for(engine, "connect")
    def _sqlite_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _sqlite_begin(conn):
        conn.exec_driver_sql("BEGIN")


SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

# every module declaring tables; imported before create_all so metadata is complete
MODEL_MODULES = [
    "restaurant.models.category",
    "restaurant.models.menu_item",
    "restaurant.models.cart",
    "restaurant.models.cart_item",
    "restaurant.models.order",
]


def init_db(reset: bool = False):
    """
    Initialize DB schema.

    Imports all model modules so Base.metadata is populated, then creates any
    missing tables. With reset=True every table is dropped first, which is what
    the test suite uses to start from a clean database.
    """
    for mod in MODEL_MODULES:
        importlib.import_module(mod)

    if reset:
        log.info("Resetting database schema")
        Base.metadata.drop_all(bind=engine)

    Base.metadata.create_all(bind=engine)
    log.debug("Database initialized (%s)", engine.url.render_as_string(hide_password=True))


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
