"""The Alembic migration builds the same payments table the models expect."""

from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import inspect

from payrec.common.db import build_engine

ROOT = Path(__file__).resolve().parents[1]


def test_upgrade_creates_payments_table(tmp_path):
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    config = Config(str(ROOT / "alembic.ini"))
    config.set_main_option("script_location", str(ROOT / "alembic" / "payments"))
    config.set_main_option("sqlalchemy.url", url)

    command.upgrade(config, "head")

    inspector = inspect(build_engine(url))
    columns = {col["name"] for col in inspector.get_columns("payments")}
    assert columns == {
        "id",
        "external_id",
        "amount",
        "currency",
        "status",
        "description",
        "created_at",
        "updated_at",
    }
    unique = [ix for ix in inspector.get_indexes("payments") if ix["unique"]]
    assert [ix["column_names"] for ix in unique] == [["external_id"]]
