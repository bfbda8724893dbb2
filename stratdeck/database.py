"""SQLModel database engine and session management."""

import logging

from sqlalchemy import inspect
from sqlmodel import SQLModel, create_engine, Session

from stratdeck.config import settings

logger = logging.getLogger(__name__)

# SQLite needs check_same_thread=False; PostgreSQL does not
connect_args = {}
if settings.database_url.startswith("sqlite"):
    connect_args["check_same_thread"] = False

engine = create_engine(
    settings.database_url,
    echo=False,
    connect_args=connect_args,
)


def _run_migrations():
    """Run lightweight schema migrations for column renames."""
    from sqlalchemy import text

    inspector = inspect(engine)

    if "trade" not in inspector.get_table_names():
        return

    # Early ledgers named the instrument column after the UI label
    columns = {col["name"] for col in inspector.get_columns("trade")}
    if "stock_option" in columns and "instrument" not in columns:
        logger.info("Migrating: renaming trade.stock_option -> trade.instrument")
        with engine.connect() as conn:
            conn.execute(text("ALTER TABLE trade RENAME COLUMN stock_option TO instrument"))
            conn.commit()

    # One deployment per (user, strategy)
    if "user_strategy" in inspector.get_table_names():
        existing_indexes = inspector.get_indexes("user_strategy")
        has_unique_idx = any(
            idx["name"] == "ix_user_strategy_user_strategy_unique" for idx in existing_indexes
        )
        has_unique_constraint = any(
            set(uc["column_names"]) == {"user_id", "strategy_id"}
            for uc in inspector.get_unique_constraints("user_strategy")
        )
        if not has_unique_idx and not has_unique_constraint:
            with engine.connect() as conn:
                conn.execute(text(
                    "CREATE UNIQUE INDEX ix_user_strategy_user_strategy_unique "
                    "ON user_strategy (user_id, strategy_id)"
                ))
                conn.commit()


def create_db_and_tables():
    """Create all tables. Called on startup."""
    import stratdeck.models  # noqa: F401  (registers tables on the metadata)

    SQLModel.metadata.create_all(engine)
    _run_migrations()


def get_session() -> Session:
    """Dependency that yields a database session."""
    with Session(engine) as session:
        yield session
