from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import and_, select
from sqlalchemy.engine import Connection, Engine

from waterbill.domain.models.tariff import TariffRow

from .mappers import row_to_tariff, tariff_to_values
from .models import metadata, tariffs
from .session import connection_scope


def ensure_tariffs_schema(conn: Connection) -> None:
    metadata.create_all(bind=conn, checkfirst=True)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


class SqlTariffRepository:
    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        with connection_scope(engine) as conn:
            ensure_tariffs_schema(conn)

    def fetch_tariff(self, customer_type: str, year: int) -> TariffRow | None:
        stmt = (
            select(tariffs)
            .where(and_(tariffs.c.customer_type == customer_type, tariffs.c.year == int(year)))
            .limit(1)
        )
        with connection_scope(self._engine) as conn:
            return row_to_tariff(conn.execute(stmt).first())

    def list_tariffs(self) -> list[TariffRow]:
        stmt = select(tariffs).order_by(tariffs.c.year.desc(), tariffs.c.customer_type)
        with connection_scope(self._engine) as conn:
            rows = conn.execute(stmt).all()
        return [t for t in (row_to_tariff(r) for r in rows) if t is not None]

    def upsert_tariff(self, tariff: TariffRow) -> TariffRow:
        values = tariff_to_values(tariff)
        now = _now_iso()
        key = and_(
            tariffs.c.customer_type == values["customer_type"],
            tariffs.c.year == values["year"],
        )
        with connection_scope(self._engine) as conn:
            existing = conn.execute(select(tariffs.c.id).where(key)).first()
            if existing is None:
                conn.execute(tariffs.insert().values(**values, created_at=now, updated_at=now))
            else:
                conn.execute(tariffs.update().where(key).values(**values, updated_at=now))
            stored = row_to_tariff(conn.execute(select(tariffs).where(key)).first())
        if stored is None:  # pragma: no cover - the row was written in this transaction
            raise RuntimeError("tariff row vanished after upsert")
        return stored
