"""Persistence layer for auctions and the sale outcome of each player."""

from __future__ import annotations

import logging
import os
import sqlite3
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional
from uuid import uuid4

from pyauction.models import SaleOutcome


logger = logging.getLogger(__name__)

_DB_PATH_ENV = "PYAUCTION_DB_PATH"


def default_db_path() -> Path:
    return Path(__file__).resolve().parent.parent / "pyauction.sqlite"


class DuplicateSaleError(ValueError):
    """Raised when a player already has an outcome recorded in an auction."""


@dataclass
class AuctionRecord:
    auction_id: str
    name: str
    constraints: str
    state: str
    created_at: datetime
    updated_at: datetime
    completed_at: Optional[datetime]


@dataclass
class SaleRecord:
    auction_id: str
    player_id: str
    status: str
    team_id: Optional[str]
    price: Optional[int]
    recorded_at: datetime

    @property
    def sold(self) -> bool:
        return self.status == "sold"


class SaleStore:
    """SQLite-backed store for auctions and their completed lots."""

    def __init__(self, db_path: Path | str):
        self._use_uri = False
        env_db = os.getenv(_DB_PATH_ENV)
        if env_db:
            if env_db.startswith("file:"):
                self.db_path = env_db
                self._use_uri = True
            else:
                self.db_path = Path(env_db)
        elif os.getenv("PYTEST_CURRENT_TEST") and str(db_path) == str(default_db_path()):
            test_dir = Path(tempfile.gettempdir()) / "pyauction-test"
            test_dir.mkdir(parents=True, exist_ok=True)
            self.db_path = test_dir / "pyauction.sqlite"
        else:
            self.db_path = Path(db_path)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        if isinstance(self.db_path, Path):
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            try:
                conn = sqlite3.connect(self.db_path)
            except sqlite3.OperationalError:
                fallback_dir = Path(tempfile.gettempdir()) / "pyauction-runtime"
                fallback_dir.mkdir(parents=True, exist_ok=True)
                fallback = fallback_dir / "pyauction.sqlite"
                logger.warning("Cannot open %s; falling back to %s", self.db_path, fallback)
                conn = sqlite3.connect(fallback)
                self.db_path = fallback
                self._create_schema(conn)
        else:
            conn = sqlite3.connect(self.db_path, uri=self._use_uri)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            self._create_schema(conn)

    def _create_schema(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS auctions (
                id TEXT PRIMARY KEY,
                name TEXT,
                constraints TEXT NOT NULL,
                state TEXT NOT NULL,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                completed_at TEXT
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS player_sales (
                auction_id TEXT NOT NULL REFERENCES auctions(id),
                player_id TEXT NOT NULL,
                status TEXT NOT NULL,
                team_id TEXT,
                price INTEGER,
                recorded_at TEXT NOT NULL,
                PRIMARY KEY (auction_id, player_id)
            )
            """
        )
        conn.commit()

    def start_auction(
        self,
        *,
        name: str = "",
        constraints: str = "T20",
        auction_id: Optional[str] = None,
    ) -> AuctionRecord:
        auction_id = auction_id or uuid4().hex
        now = datetime.now(timezone.utc).isoformat()
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO auctions (id, name, constraints, state, created_at, updated_at)
                VALUES (?, ?, ?, 'running', ?, ?)
                """,
                (auction_id, name, constraints, now, now),
            )
            conn.commit()
        logger.info("Started auction %s (%s)", auction_id, constraints)
        record = self.get_auction(auction_id)
        if record is None:  # pragma: no cover
            raise KeyError(f"Auction {auction_id} not found after insert")
        return record

    def _insert_outcome(
        self,
        auction_id: str,
        player_id: str,
        status: str,
        team_id: Optional[str],
        price: Optional[int],
    ) -> SaleRecord:
        if self.get_auction(auction_id) is None:
            raise KeyError(f"Auction {auction_id} not found")
        now = datetime.now(timezone.utc).isoformat()
        with self._connect() as conn:
            try:
                conn.execute(
                    """
                    INSERT INTO player_sales (auction_id, player_id, status, team_id, price, recorded_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (auction_id, player_id, status, team_id, price, now),
                )
            except sqlite3.IntegrityError as exc:
                raise DuplicateSaleError(
                    f"Player {player_id} already has an outcome in auction {auction_id}"
                ) from exc
            conn.execute("UPDATE auctions SET updated_at = ? WHERE id = ?", (now, auction_id))
            conn.commit()
        return SaleRecord(
            auction_id=auction_id,
            player_id=player_id,
            status=status,
            team_id=team_id,
            price=price,
            recorded_at=datetime.fromisoformat(now),
        )

    def record_sale(self, auction_id: str, player_id: str, team_id: str, price: int) -> SaleRecord:
        return self._insert_outcome(auction_id, player_id, "sold", team_id, price)

    def mark_unsold(self, auction_id: str, player_id: str) -> SaleRecord:
        return self._insert_outcome(auction_id, player_id, "unsold", None, None)

    def complete_auction(self, auction_id: str) -> AuctionRecord:
        now = datetime.now(timezone.utc).isoformat()
        with self._connect() as conn:
            cursor = conn.execute(
                """
                UPDATE auctions
                SET state = 'completed', updated_at = ?, completed_at = COALESCE(completed_at, ?)
                WHERE id = ?
                """,
                (now, now, auction_id),
            )
            conn.commit()
        if cursor.rowcount == 0:
            raise KeyError(f"Auction {auction_id} not found")
        logger.info("Completed auction %s", auction_id)
        record = self.get_auction(auction_id)
        if record is None:  # pragma: no cover
            raise KeyError(f"Auction {auction_id} not found after update")
        return record

    def get_auction(self, auction_id: str) -> Optional[AuctionRecord]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM auctions WHERE id = ?", (auction_id,)).fetchone()
            if row is None:
                return None
            return self._row_to_auction(row)

    def list_auctions(self, limit: int = 50) -> List[AuctionRecord]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM auctions ORDER BY datetime(created_at) DESC LIMIT ?",
                (limit,),
            ).fetchall()
        return [self._row_to_auction(row) for row in rows]

    def list_sales(self, auction_id: str, *, status: Optional[str] = None) -> List[SaleRecord]:
        query = "SELECT * FROM player_sales WHERE auction_id = ?"
        params: list[str] = [auction_id]
        if status:
            query += " AND status = ?"
            params.append(status)
        query += " ORDER BY recorded_at, rowid"
        with self._connect() as conn:
            rows = conn.execute(query, tuple(params)).fetchall()
        return [self._row_to_sale(row) for row in rows]

    def _row_to_auction(self, row: sqlite3.Row) -> AuctionRecord:
        return AuctionRecord(
            auction_id=row["id"],
            name=row["name"] or "",
            constraints=row["constraints"],
            state=row["state"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
            completed_at=datetime.fromisoformat(row["completed_at"]) if row["completed_at"] else None,
        )

    def _row_to_sale(self, row: sqlite3.Row) -> SaleRecord:
        return SaleRecord(
            auction_id=row["auction_id"],
            player_id=row["player_id"],
            status=row["status"],
            team_id=row["team_id"],
            price=row["price"],
            recorded_at=datetime.fromisoformat(row["recorded_at"]),
        )


class SaleStoreSink:
    """Session listener that writes every closed lot into a ``SaleStore``."""

    def __init__(self, store: SaleStore, auction_id: str):
        self.store = store
        self.auction_id = auction_id

    def __call__(self, outcome: SaleOutcome) -> None:
        if outcome.team_id is None:
            self.store.mark_unsold(self.auction_id, outcome.player_id)
            return
        if outcome.price is None:
            raise ValueError(f"Sale of {outcome.player_id} to {outcome.team_id} has no price")
        self.store.record_sale(self.auction_id, outcome.player_id, outcome.team_id, outcome.price)


__all__ = [
    "AuctionRecord",
    "DuplicateSaleError",
    "SaleRecord",
    "SaleStore",
    "SaleStoreSink",
    "default_db_path",
]
