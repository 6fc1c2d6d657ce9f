"""
Repository Pattern Base Classes

Keeps query code out of routers, gateways and jobs:
- BaseRepository: lookup by id, creation and counting for any model
- Specialized repositories: domain queries (SubscriptionRepository, ...)
"""

from abc import ABC
from typing import Any, Generic, Optional, TypeVar
from sqlalchemy.orm import Session
from subscription_gateway.database.models.model_base import SqlAlchemyModel


ModelType = TypeVar("ModelType", bound=SqlAlchemyModel)


class BaseRepository(Generic[ModelType], ABC):
    """
    Abstract base repository.

    Type Parameters:
        ModelType: The SQLAlchemy model class

    Example:
        class SubscriptionRepository(BaseRepository[Subscription]):
            def __init__(self, session: Session):
                super().__init__(session, Subscription)
    """

    def __init__(self, session: Session, model: type[ModelType]):
        self.session = session
        self.model = model

    def get_by_id(self, id: Any) -> Optional[ModelType]:
        return self.session.query(self.model).filter(self.model.id == id).first()

    def create(self, **kwargs) -> ModelType:
        """
        Create and commit a new record.

        Returns:
            Created model instance, refreshed with database defaults
        """
        instance = self.model(**kwargs)
        self.session.add(instance)
        self.session.commit()
        self.session.refresh(instance)
        return instance

    def count(self) -> int:
        return self.session.query(self.model).count()
