"""
Base repository class for data access.

Repositories keep query logic out of the services, so the campaign service
only deals in domain values and the repository deals in rows.

Example:
    class CampaignRepository(BaseRepository[CampaignProgressState]):
        def find_progress(self, profile_id: str) -> Optional[CampaignProgressState]:
            return self.filter_by_first(profile_id=profile_id)
"""
from abc import ABC
from typing import TypeVar, Generic, Type, Optional
from sqlalchemy.orm import Query, Session

T = TypeVar("T")


class BaseRepository(Generic[T], ABC):
    """
    Common data access methods shared by the repositories.

    Attributes:
        model_type: The SQLAlchemy model class this repository manages
        db: The database session
    """

    def __init__(self, model_type: Type[T], db: Session):
        self.model_type = model_type
        self.db = db

    # ========================================================================
    # Reads
    # ========================================================================

    def query(self) -> Query:
        """Get a new query object for this model."""
        return self.db.query(self.model_type)

    def filter_by_first(self, **kwargs) -> Optional[T]:
        """Filter records by keyword arguments and return the first match."""
        return self.db.query(self.model_type).filter_by(**kwargs).first()

    # ========================================================================
    # Writes (not committed until save())
    # ========================================================================

    def create(self, **kwargs) -> T:
        """Create a new record and add it to the session."""
        instance = self.model_type(**kwargs)
        self.db.add(instance)
        return instance

    def delete_where(self, **kwargs) -> int:
        """Delete every record matching keyword filters; returns the row count."""
        return self.db.query(self.model_type).filter_by(**kwargs).delete(synchronize_session=False)

    # ========================================================================
    # Unit of work
    # ========================================================================

    def save(self) -> None:
        """Commit pending changes to the database."""
        self.db.commit()

    def flush(self) -> None:
        """Flush pending changes without committing."""
        self.db.flush()

    def rollback(self) -> None:
        """Rollback pending changes."""
        self.db.rollback()
