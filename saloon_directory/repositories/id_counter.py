from sqlalchemy.orm import Session

from saloon_directory.db.models.stable import StableCell


class IdCounter:
    """
    Durable, monotonically increasing identifier source.

    The counter starts at `initial` and is bumped before each id is handed
    out, so with the default the first id is 1. Ids are never reissued,
    including those of deleted entities.
    """

    def __init__(self, memory_id: int, initial: int = 0):
        self.memory_id = memory_id
        self.initial = initial

    def _cell(self, db: Session) -> StableCell:
        cell = db.get(StableCell, self.memory_id)
        if cell is None:
            cell = StableCell(memory_id=self.memory_id, value=self.initial)
            db.add(cell)
        return cell

    def next_id(self, db: Session) -> int:
        """Increment the counter and return the new value."""
        cell = self._cell(db)
        cell.value = cell.value + 1
        db.flush()
        return cell.value
