"""Invoice Reconciler

Maps a client-supplied desired list of invoice children (items or
adjustments) onto the rows already stored for an invoice, producing the
create/update/delete operations that converge storage to the desired state.

Identities are opaque strings on the desired side. A desired entry without
an identity is new; one with an identity must match a stored row.
"""

from dataclasses import dataclass, field
from typing import Dict, Generic, List, Sequence, Set, Tuple, TypeVar
from src.domain.errors import ChildNotFoundError, ValidationError

Row = TypeVar("Row")
Desired = TypeVar("Desired")


def _canonical_id(invoice_id: int, child_id: str) -> str:
    """Normalise a desired id to the str(row.id) form (leading zeros dropped)"""
    try:
        return str(int(child_id))
    except ValueError:
        raise ChildNotFoundError(invoice_id, child_id)


@dataclass
class ReconcilePlan(Generic[Row, Desired]):
    """Operations needed to converge one child collection"""

    invoice_id: int
    to_create: List[Desired] = field(default_factory=list)
    to_update: List[Tuple[Row, Desired]] = field(default_factory=list)
    to_delete: List[Row] = field(default_factory=list)

    @property
    def operation_count(self) -> int:
        return len(self.to_create) + len(self.to_update) + len(self.to_delete)

    def summary(self) -> str:
        return (
            f"create={len(self.to_create)} update={len(self.to_update)} "
            f"delete={len(self.to_delete)}"
        )


def reconcile_children(
    invoice_id: int,
    existing: Sequence[Row],
    desired: Sequence[Desired],
) -> ReconcilePlan[Row, Desired]:
    """
    Diff desired children against the stored ones

    Args:
        invoice_id: Parent invoice ID
        existing: Stored rows, each exposing an integer id
        desired: Requested children, each exposing an optional string id

    Returns:
        ReconcilePlan with creates (desired order), updates as
        (stored row, desired) pairs (desired order) and deletes

    Raises:
        ChildNotFoundError: A desired id does not belong to this invoice
        ValidationError: The same id appears twice in the desired list
    """
    existing_by_id: Dict[str, Row] = {str(row.id): row for row in existing}
    kept: Set[str] = set()
    plan: ReconcilePlan[Row, Desired] = ReconcilePlan(invoice_id=invoice_id)

    for entry in desired:
        if entry.id is None or entry.id == "":
            plan.to_create.append(entry)
            continue

        child_id = _canonical_id(invoice_id, entry.id)
        if child_id in kept:
            raise ValidationError(f"Duplicate child id {child_id} on invoice {invoice_id}")

        row = existing_by_id.get(child_id)
        if row is None:
            raise ChildNotFoundError(invoice_id, child_id)

        kept.add(child_id)
        plan.to_update.append((row, entry))

    plan.to_delete = [row for key, row in existing_by_id.items() if key not in kept]
    return plan
