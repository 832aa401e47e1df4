"""Group membership repository."""

from typing import Optional, List
from sqlalchemy.orm import Session, joinedload

from app.repositories.base import BaseRepository
from app.db.models.group_member import GroupMember


class GroupMemberRepository(BaseRepository[GroupMember]):
    """Repository for GroupMember rows. Memberships are hard deleted on leave."""

    def __init__(self, db: Session, correlation_id: Optional[str] = None):
        super().__init__(db, GroupMember, correlation_id)

    def get_membership(self, group_id: int, user_id: int) -> Optional[GroupMember]:
        result = self.db.query(self.model).filter(
            self.model.group_id == group_id,
            self.model.user_id == user_id
        ).first()
        self._log_operation("get_membership", group_id=group_id, user_id=user_id, found=result is not None)
        return result

    def is_member(self, group_id: int, user_id: int) -> bool:
        return self.db.query(self.model.id).filter(
            self.model.group_id == group_id,
            self.model.user_id == user_id
        ).first() is not None

    def count_members(self, group_id: int) -> int:
        return self.db.query(self.model).filter(self.model.group_id == group_id).count()

    def add_member(self, group_id: int, user_id: int, role: str = "member") -> GroupMember:
        return self.create({"group_id": group_id, "user_id": user_id, "role": role})

    def list_members(self, group_id: int) -> List[GroupMember]:
        """Members in join order with their user loaded."""
        results = (
            self.db.query(self.model)
            .options(joinedload(self.model.user))
            .filter(self.model.group_id == group_id)
            .order_by(self.model.joined_at, self.model.id)
            .all()
        )
        self._log_operation("list_members", group_id=group_id, count=len(results))
        return results

    def remove_member(self, group_id: int, user_id: int) -> bool:
        membership = self.get_membership(group_id, user_id)
        if membership is None:
            return False
        self.db.delete(membership)
        self.db.flush()
        return True
