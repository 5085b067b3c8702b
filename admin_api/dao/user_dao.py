"""
UserDAO

DynamoDB layout:
  PK = USER#<userId>
  SK = PROFILE

GSI usage:
  GSI1_EntityByDate — list_all()   query entityType="USER", createdAt desc

Every read projects PUBLIC_ATTRIBUTES only; the password hash stored on
the item is never fetched.
"""

from datetime import datetime, timezone
from typing import Any

from boto3.dynamodb.conditions import Key

from admin_api.dao.base import BaseDAO
from admin_api.models.user import UserRole

ENTITY_TYPE = "USER"
LIST_INDEX = "GSI1_EntityByDate"
PUBLIC_ATTRIBUTES = ("userId", "email", "role", "createdAt")


class UserDAO(BaseDAO):

    @staticmethod
    def _pk(user_id: str) -> str:
        return f"USER#{user_id}"

    SK = "PROFILE"

    def _key(self, user_id: str) -> dict[str, str]:
        return {"PK": self._pk(user_id), "SK": self.SK}

    # ── Write ─────────────────────────────────────────────────────────────────

    def update_role(self, user_id: str, role: UserRole) -> None:
        """
        Set the user's role.
        Raises ConditionalCheckFailedException if the user no longer exists.
        """
        expr, names, values = self._build_update_expr(
            {
                "role": role.value,
                "updatedAt": datetime.now(timezone.utc).isoformat(),
            }
        )
        self._table.update_item(
            Key=self._key(user_id),
            UpdateExpression=expr,
            ExpressionAttributeNames=names,
            ExpressionAttributeValues=values,
            ConditionExpression=self._item_exists_condition(),
        )

    def delete(self, user_id: str) -> None:
        self._table.delete_item(Key=self._key(user_id))

    # ── Read ──────────────────────────────────────────────────────────────────

    def get(self, user_id: str) -> dict[str, Any] | None:
        projection, names = self._build_projection(PUBLIC_ATTRIBUTES)
        resp = self._table.get_item(
            Key=self._key(user_id),
            ProjectionExpression=projection,
            ExpressionAttributeNames=names,
        )
        return resp.get("Item") or None

    def list_all(self) -> list[dict[str, Any]]:
        """All users, newest first (GSI1 sorted by createdAt, read backwards)."""
        projection, names = self._build_projection(PUBLIC_ATTRIBUTES)
        return self._query_all(
            IndexName=LIST_INDEX,
            KeyConditionExpression=Key("entityType").eq(ENTITY_TYPE),
            ScanIndexForward=False,
            ProjectionExpression=projection,
            ExpressionAttributeNames=names,
        )
