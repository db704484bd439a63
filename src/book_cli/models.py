import enum
from dataclasses import dataclass
from typing import Any, Mapping, Optional


class UpsertResult(enum.Enum):
    """Outcome of :meth:`~book_cli.db.purchases.PurchaseStore.upsert`."""

    INSERTED = "insert"
    UPDATED = "update"


@dataclass(frozen=True)
class PurchaseRecord:
    """One purchased volume of a series.

    ``series`` and ``volume`` together identify the record. ``store``,
    ``notes`` and ``bought_at`` are overwritten when the same volume is
    recorded again.
    """

    series: str
    volume: int
    store: Optional[str] = None
    notes: Optional[str] = None
    bought_at: Optional[str] = None
    id: Optional[int] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "PurchaseRecord":
        return cls(
            series=row["series"],
            volume=row["volume"],
            store=row["store"],
            notes=row["notes"],
            bought_at=row["bought_at"],
            id=row["id"]
        )


@dataclass
class BatchSummary:
    inserted: int = 0
    updated: int = 0
    skipped: int = 0
    total: int = 0

    def record(self, result: UpsertResult) -> None:
        if result is UpsertResult.INSERTED:
            self.inserted += 1
        else:
            self.updated += 1

    def __str__(self) -> str:
        return (
            f"{self.inserted} inserted; {self.updated} updated; "
            f"{self.skipped} skipped; {self.total} lines total"
        )
