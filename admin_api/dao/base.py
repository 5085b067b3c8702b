from typing import Any

import boto3
from boto3.dynamodb.conditions import Attr

from admin_api.core.config import get_settings


class BaseDAO:
    def __init__(self, table: Any = None) -> None:
        if table is not None:
            self._table = table
            return
        settings = get_settings()
        dynamodb = boto3.resource(
            "dynamodb",
            region_name=settings.aws_region,
            endpoint_url=settings.dynamodb_endpoint_url or None,
        )
        self._table = dynamodb.Table(settings.dynamodb_table_name)

    def _build_update_expr(
        self, fields: dict[str, Any]
    ) -> tuple[str, dict[str, str], dict[str, Any]]:
        """
        Build a SET UpdateExpression from a flat dict of {field: value}.
        Field names are aliased because several ("role", "name", ...) are
        DynamoDB reserved words.

        Returns (expression, ExpressionAttributeNames, ExpressionAttributeValues).
        """
        parts: list[str] = []
        names: dict[str, str] = {}
        values: dict[str, Any] = {}

        for i, (key, val) in enumerate(fields.items()):
            n = f"#f{i}"
            v = f":v{i}"
            names[n] = key
            values[v] = val
            parts.append(f"{n} = {v}")

        return "SET " + ", ".join(parts), names, values

    @staticmethod
    def _build_projection(attributes: tuple[str, ...]) -> tuple[str, dict[str, str]]:
        """Aliased ProjectionExpression for exactly the given attributes."""
        names = {f"#p{i}": attr for i, attr in enumerate(attributes)}
        return ", ".join(names), names

    def _query_all(self, **kwargs: Any) -> list[dict[str, Any]]:
        """Run a Query and follow LastEvaluatedKey until every page is read."""
        items: list[dict[str, Any]] = []
        while True:
            resp = self._table.query(**kwargs)
            items.extend(resp.get("Items", []))
            last_key = resp.get("LastEvaluatedKey")
            if not last_key:
                return items
            kwargs["ExclusiveStartKey"] = last_key

    def _item_exists_condition(self) -> Attr:
        return Attr("PK").exists()
