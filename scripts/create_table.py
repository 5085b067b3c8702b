"""
Create (or verify) the AdminUserDirectory DynamoDB table.

Usage:
    # Against real AWS (reads credentials from env / ~/.aws)
    python scripts/create_table.py

    # Against DynamoDB Local (docker run -p 8000:8000 amazon/dynamodb-local)
    python scripts/create_table.py --local
"""

import argparse
import sys

import boto3
from botocore.exceptions import ClientError

# ── Table definition ──────────────────────────────────────────────────────────

TABLE_NAME = "AdminUserDirectory"

# Only attributes used as table/GSI keys need to be declared here.
ATTRIBUTE_DEFINITIONS = [
    {"AttributeName": "PK", "AttributeType": "S"},
    {"AttributeName": "SK", "AttributeType": "S"},
    # GSI-1: every entity of one type, sorted by creation time
    {"AttributeName": "entityType", "AttributeType": "S"},
    {"AttributeName": "createdAt", "AttributeType": "S"},
]

KEY_SCHEMA = [
    {"AttributeName": "PK", "KeyType": "HASH"},
    {"AttributeName": "SK", "KeyType": "RANGE"},
]

GLOBAL_SECONDARY_INDEXES = [
    {
        # GSI-1: admin user list → query(entityType="USER", ScanIndexForward=False)
        "IndexName": "GSI1_EntityByDate",
        "KeySchema": [
            {"AttributeName": "entityType", "KeyType": "HASH"},
            {"AttributeName": "createdAt", "KeyType": "RANGE"},
        ],
        "Projection": {"ProjectionType": "ALL"},
    },
]


# ── Helpers ───────────────────────────────────────────────────────────────────

def get_client(local: bool, region: str) -> "boto3.client":
    if local:
        return boto3.client(
            "dynamodb",
            region_name=region,
            endpoint_url="http://localhost:8000",
            aws_access_key_id="local",
            aws_secret_access_key="local",
        )
    return boto3.client("dynamodb", region_name=region)


def table_exists(client, table_name: str) -> bool:
    try:
        client.describe_table(TableName=table_name)
        return True
    except ClientError as e:
        if e.response["Error"]["Code"] == "ResourceNotFoundException":
            return False
        raise


def create_table(client, table_name: str) -> dict:
    return client.create_table(
        TableName=table_name,
        AttributeDefinitions=ATTRIBUTE_DEFINITIONS,
        KeySchema=KEY_SCHEMA,
        GlobalSecondaryIndexes=GLOBAL_SECONDARY_INDEXES,
        BillingMode="PAY_PER_REQUEST",
        Tags=[{"Key": "Project", "Value": "AdminUserDirectory"}],
    )


def wait_for_active(client, table_name: str) -> None:
    print(f"  Waiting for table '{table_name}' to become ACTIVE …", end="", flush=True)
    waiter = client.get_waiter("table_exists")
    waiter.wait(TableName=table_name, WaiterConfig={"Delay": 2, "MaxAttempts": 30})
    print(" done.")


def print_table_summary(client, table_name: str) -> None:
    desc = client.describe_table(TableName=table_name)["Table"]
    print(f"\nTable:  {desc['TableName']}")
    print(f"Status: {desc['TableStatus']}")
    for gsi in desc.get("GlobalSecondaryIndexes", []):
        print(f"GSI:    {gsi['IndexName']} [{gsi['IndexStatus']}]")


# ── Main ──────────────────────────────────────────────────────────────────────

def main() -> None:
    parser = argparse.ArgumentParser(description="Create the admin user directory table.")
    parser.add_argument(
        "--local",
        action="store_true",
        help="Target DynamoDB Local at http://localhost:8000",
    )
    parser.add_argument(
        "--table-name",
        default=TABLE_NAME,
        help=f"Override table name (default: {TABLE_NAME})",
    )
    parser.add_argument("--region", default="us-east-1", help="AWS region")
    args = parser.parse_args()

    client = get_client(local=args.local, region=args.region)
    print(f"Target: {'DynamoDB Local' if args.local else 'AWS DynamoDB'}")

    if table_exists(client, args.table_name):
        print(f"Table '{args.table_name}' already exists — skipping creation.")
        print_table_summary(client, args.table_name)
        sys.exit(0)

    print(f"Creating table '{args.table_name}' …")
    try:
        create_table(client, args.table_name)
    except ClientError as e:
        print(f"ERROR: {e.response['Error']['Message']}", file=sys.stderr)
        sys.exit(1)

    wait_for_active(client, args.table_name)
    print_table_summary(client, args.table_name)


if __name__ == "__main__":
    main()
