"""
SQLite-backed storage for imported flights.

Uses SQLAlchemy 2.0 style with a declarative base. The engine belongs to a
FlightStore instance that the caller creates and passes around; nothing
here opens a database at import time.
"""

from contextlib import contextmanager
from dataclasses import replace
from typing import Generator, List, Optional

from sqlalchemy import Integer, String, Text, create_engine, func, select
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker

from .domain import FlightRecord


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class FlightRow(Base):
    """One imported flight."""

    __tablename__ = 'flights'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Date token as exported by the tracker, or ISO-8601 import time
    date: Mapped[str] = mapped_column(Text, nullable=False)
    departed_code: Mapped[str] = mapped_column(String(8), nullable=False)
    arrived_code: Mapped[str] = mapped_column(String(8), nullable=False)

    airline: Mapped[Optional[str]] = mapped_column(Text)
    flight_number: Mapped[Optional[str]] = mapped_column(Text)
    plane_model: Mapped[Optional[str]] = mapped_column(Text)
    registration: Mapped[Optional[str]] = mapped_column(Text)

    distance_direct_meters: Mapped[Optional[int]] = mapped_column(Integer)
    distance_flown_meters: Mapped[Optional[int]] = mapped_column(Integer)
    duration_minutes: Mapped[Optional[int]] = mapped_column(Integer)

    csv_path: Mapped[Optional[str]] = mapped_column(Text)
    kml_path: Mapped[Optional[str]] = mapped_column(Text)
    fr24_url: Mapped[Optional[str]] = mapped_column(Text)

    @classmethod
    def from_record(cls, record: FlightRecord) -> 'FlightRow':
        return cls(
            date=record.date,
            departed_code=record.departed_code,
            arrived_code=record.arrived_code,
            airline=record.airline,
            flight_number=record.flight_number,
            plane_model=record.aircraft_model,
            registration=record.registration,
            distance_direct_meters=record.distance_direct_m,
            distance_flown_meters=record.distance_flown_m,
            duration_minutes=record.duration_minutes,
            csv_path=record.csv_path,
            kml_path=record.kml_path,
            fr24_url=record.external_link_url,
        )

    def to_record(self, chronological_id: Optional[int] = None) -> FlightRecord:
        return FlightRecord(
            id=self.id,
            date=self.date,
            departed_code=self.departed_code,
            arrived_code=self.arrived_code,
            airline=self.airline or '',
            flight_number=self.flight_number or '',
            aircraft_model=self.plane_model or '',
            registration=self.registration or '',
            distance_direct_m=self.distance_direct_meters or 0,
            distance_flown_m=self.distance_flown_meters or 0,
            duration_minutes=self.duration_minutes or 0,
            csv_path=self.csv_path or '',
            kml_path=self.kml_path or '',
            external_link_url=self.fr24_url or '',
            chronological_id=chronological_id,
        )


class FlightStore:
    """Flight records in a relational database (SQLite by default)."""

    def __init__(self, url: str = 'sqlite:///flights.db', echo: bool = False):
        kwargs = {'echo': echo}
        if url.startswith('sqlite'):
            kwargs['connect_args'] = {'check_same_thread': False}
        self.engine = create_engine(url, **kwargs)
        self._session_factory = sessionmaker(
            bind=self.engine,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
        )

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """Session that commits on success and rolls back on error."""
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def init_schema(self) -> None:
        """Create the flights table if it does not exist."""
        Base.metadata.create_all(bind=self.engine)

    def add_flight(self, record: FlightRecord) -> FlightRecord:
        """Insert a flight and return it with its new id."""
        self.init_schema()
        with self.session() as session:
            row = FlightRow.from_record(record)
            session.add(row)
            session.flush()
            return replace(record, id=row.id)

    def list_flights(self) -> List[FlightRecord]:
        """
        All flights, newest date first.

        Each record carries chronological_id: its 1-based position when
        sorted by date ascending (first flight ever = 1).
        """
        self.init_schema()
        rank = func.row_number().over(order_by=FlightRow.date.asc()).label('chronological_id')
        stmt = select(FlightRow, rank).order_by(FlightRow.date.desc())
        with self.session() as session:
            return [row.to_record(chronological_id=n) for row, n in session.execute(stmt).all()]

    def get_flight(self, flight_id: int) -> Optional[FlightRecord]:
        self.init_schema()
        with self.session() as session:
            row = session.get(FlightRow, flight_id)
            return row.to_record() if row is not None else None

    def delete_flight(self, flight_id: int) -> bool:
        """Delete one flight. Returns False if it did not exist."""
        self.init_schema()
        with self.session() as session:
            row = session.get(FlightRow, flight_id)
            if row is None:
                return False
            session.delete(row)
            return True

    def clear(self) -> None:
        """Drop every stored flight and recreate an empty table."""
        Base.metadata.drop_all(bind=self.engine)
        self.init_schema()
