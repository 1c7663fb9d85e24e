"""Pytest configuration and fixtures for query tests."""

from typing import Any, Callable, Dict, List, Optional

import pytest
from botocore.exceptions import ClientError
from dotenv import load_dotenv

from hephaestus.engine import DynamoDB
from hephaestus.schema import QueryKeyValue, QueryOptions

# Load environment variables
load_dotenv()


def make_items(prefix: str, count: int) -> List[Dict[str, Any]]:
    """Low-level items tagged with their page so ordering can be asserted."""
    return [{"id": {"S": f"{prefix}-{i}"}, "seq": {"N": str(i)}} for i in range(count)]


# Synthetic backend for executor tests
class FakeDynamoDBClient:
    """Serves canned Query pages the way a boto3 DynamoDB client would.

    - Every page but the last carries a `LastEvaluatedKey`
    - `fail_on_page` raises a ClientError on that (1-based) page
    - `on_page` is called with the page number after a page is produced
    """

    def __init__(
        self,
        pages: List[List[Dict[str, Any]]],
        fail_on_page: Optional[int] = None,
        on_page: Optional[Callable[[int], None]] = None,
    ) -> None:
        self.pages = pages
        self.fail_on_page = fail_on_page
        self.on_page = on_page
        self.calls: List[Dict[str, Any]] = []

    def query(self, **kwargs: Any) -> Dict[str, Any]:
        self.calls.append(kwargs)
        page_number = len(self.calls)
        if self.fail_on_page == page_number:
            raise ClientError(
                {"Error": {"Code": "ProvisionedThroughputExceededException", "Message": "Rate exceeded"}},
                "Query",
            )
        items = self.pages[page_number - 1]
        response: Dict[str, Any] = {"Items": items, "Count": len(items), "ScannedCount": len(items)}
        if page_number < len(self.pages):
            response["LastEvaluatedKey"] = {"Status": {"S": "active"}, "id": {"S": f"key-{page_number}"}}
        if self.on_page:
            self.on_page(page_number)
        return response


@pytest.fixture
def three_pages():
    """Pages of 3, 3 and 2 items."""
    return [make_items("p1", 3), make_items("p2", 3), make_items("p3", 2)]


@pytest.fixture
def fake_client(three_pages):
    return FakeDynamoDBClient(three_pages)


@pytest.fixture
def db(fake_client):
    return DynamoDB(fake_client)


@pytest.fixture
def base_options():
    """Valid options with only the required fields set."""
    return QueryOptions(
        table="movies",
        index="Status",
        partition=QueryKeyValue(key="Status", value="active"),
    )


@pytest.fixture
def make_client():
    """Factory for FakeDynamoDBClient with custom pages or failure hooks."""
    return FakeDynamoDBClient


@pytest.fixture(name="make_items")
def make_items_fixture():
    return make_items
