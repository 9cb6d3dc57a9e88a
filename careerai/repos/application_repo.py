from sqlalchemy.orm import Session

from careerai.models.application import ApplicationRecord
from careerai.core.security import generate_id


def create(db: Session, user_id: str, job: dict, cover_letter: str) -> ApplicationRecord:
    """Append one application record. created_at is set by the database."""
    record = ApplicationRecord(
        id=generate_id(),
        user_id=user_id,
        job=job,
        cover_letter=cover_letter or "",
    )
    db.add(record)
    try:
        db.commit()
    except Exception:
        # Leave the session usable for the next append in a batch.
        db.rollback()
        raise
    db.refresh(record)
    return record
