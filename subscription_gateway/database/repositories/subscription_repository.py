"""
Subscription Repository

Lookups used by the host API, gateway callbacks/webhooks and the status job.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from subscription_gateway.database.models.subscription import Subscription
from subscription_gateway.database.repositories.repository import BaseRepository
from subscription_gateway.utils.enums import SubscriptionStatus


class SubscriptionRepository(BaseRepository[Subscription]):
    """
    Repository for Subscription model.

    Example:
        repo = SubscriptionRepository(session)
        subscription = repo.get_by_token(request_token)
        active = repo.get_active()
    """

    def __init__(self, session: Session):
        super().__init__(session, Subscription)

    def get_by_token(self, token: str) -> Optional[Subscription]:
        if not token:
            return None
        return self.session.query(Subscription).filter(Subscription.token == token).first()

    def get_by_remote_id(self, subscription_id: str) -> Optional[Subscription]:
        """Find by the identifier the remote gateway assigned."""
        if not subscription_id:
            return None
        return (
            self.session.query(Subscription)
            .filter(Subscription.subscription_id == subscription_id)
            .first()
        )

    def list(
        self,
        status: Optional[str] = None,
        gateway: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Subscription]:
        query = self._filtered(status, gateway)
        return query.order_by(Subscription.id.desc()).offset(skip).limit(limit).all()

    def count(self, status: Optional[str] = None, gateway: Optional[str] = None) -> int:
        return self._filtered(status, gateway).count()

    def get_active(self) -> List[Subscription]:
        return (
            self.session.query(Subscription)
            .filter(Subscription.status == SubscriptionStatus.ACTIVE)
            .order_by(Subscription.id)
            .all()
        )

    def _filtered(self, status: Optional[str], gateway: Optional[str]):
        query = self.session.query(Subscription)
        if status:
            query = query.filter(Subscription.status == status)
        if gateway:
            query = query.filter(Subscription.gateway == gateway)
        return query
