"""
Query executor for DynamoDB secondary indexes.

This module provides `DynamoDB`, which validates `QueryOptions`, compiles the
key condition and the optional `Where` filter into a native Query request,
and drives pagination until the index is exhausted, returning every item in
the order the backend produced it.
"""

import json
import logging
from typing import Any, Dict, Optional, Union

from boto3.dynamodb.conditions import ConditionBase, ConditionExpressionBuilder

from .constants import DEFAULT_LIMIT, PageState
from .context import Context
from .exceptions import (
    BuildFilterExpressionError,
    CompileError,
    ExecutionError,
    IndexNotSetError,
    InvalidValueError,
    QueryCancelledError,
    QueryFailedError,
    TableNotSetError,
)
from .logger import Logger
from .querydsl.compilers.dynamodb import dynamodb_where
from .querydsl.keys import build_key_condition
from .schema import QueryOptions
from .settings import HephaestusSettings
from .types import Item, Items, QueryClient
from .utils import build_projection, decode_cursor, encode_cursor, serialize_values


def _format_request(request: Dict[str, Any]) -> str:
    return json.dumps(request, default=str, indent=2)


class QueryPaginator:
    """Fetch Query pages one at a time.

    Starts in `HAS_MORE` (from `ExclusiveStartKey` when the request carries
    one) and moves to `EXHAUSTED` once a response has no `LastEvaluatedKey`.
    Each page's start key comes from the previous response, so pages can only
    be fetched in order.
    """

    def __init__(self, client: QueryClient, request: Dict[str, Any]) -> None:
        self._client = client
        self._request = {k: v for k, v in request.items() if k != "ExclusiveStartKey"}
        self._next_key: Optional[Item] = request.get("ExclusiveStartKey")
        self.state = PageState.HAS_MORE
        self.pages_fetched = 0

    def has_more_pages(self) -> bool:
        return self.state == PageState.HAS_MORE

    @property
    def next_cursor(self) -> Optional[str]:
        """Cursor for the page after the last one fetched; None once exhausted."""
        return encode_cursor(self._next_key)

    def next_page(self) -> Dict[str, Any]:
        if not self.has_more_pages():
            raise ExecutionError("no more pages available", pages_fetched=self.pages_fetched)

        kwargs = dict(self._request)
        if self._next_key:
            kwargs["ExclusiveStartKey"] = self._next_key

        response = self._client.query(**kwargs)
        self.pages_fetched += 1
        self._next_key = response.get("LastEvaluatedKey") or None
        if self._next_key is None:
            self.state = PageState.EXHAUSTED
        return response


class DynamoDB:
    """Query executor bound to one DynamoDB client.

    The client is only read from; one `DynamoDB` can serve concurrent
    `query` calls as long as the client itself is thread-safe (boto3
    low-level clients are).

    Example:
        db = DynamoDB.from_settings()
        items = db.query(
            QueryOptions(
                table="movies",
                index="Status",
                partition=QueryKeyValue(key="Status", value="active"),
                where=Where(conditions=[WhereCondition(field="Keywords", operator="CONTAINS", value="pika")]),
            )
        )
    """

    def __init__(self, client: QueryClient) -> None:
        self._client = client
        self.logger = Logger(self.__class__.__name__)

    @classmethod
    def from_settings(cls, settings: Optional[HephaestusSettings] = None) -> "DynamoDB":
        """Build an executor with a client configured from settings (default: module settings)."""
        from .connection import client_from_settings
        from .settings import settings as default_settings

        return cls(client_from_settings(settings or default_settings))

    @property
    def client(self) -> QueryClient:
        return self._client

    # ------------------------------------------------------------------
    # Request building
    # ------------------------------------------------------------------
    def _compile_filter(self, options: QueryOptions) -> Optional[ConditionBase]:
        if options.where is None:
            return None
        try:
            return dynamodb_where.to_where(options.where)
        except CompileError as e:
            raise BuildFilterExpressionError(table=options.table, index=options.index, reason=str(e)) from e

    def build_request(self, options: Union[QueryOptions, Dict[str, Any]]) -> Dict[str, Any]:
        """Validate options and assemble the keyword arguments for `client.query`.

        Nothing is sent to the backend. Checks run in order: table, index,
        partition, sort key operator, filter, cursor.

        Raises:
            TableNotSetError: `table` is empty
            IndexNotSetError: `index` is empty
            PartitionNotSetError: partition missing or incomplete
            UnsupportedSortOperatorError: sort key operator other than equality
            InvalidValueError: a key value cannot be serialized
            BuildFilterExpressionError: the `where` tree does not compile, or one of
                its values cannot be serialized
            InvalidCursorError: `cursor` cannot be decoded
        """
        if isinstance(options, dict):
            options = QueryOptions.model_validate(options)

        if not options.table:
            raise TableNotSetError()
        if not options.index:
            raise IndexNotSetError(table=options.table)

        key_condition = build_key_condition(options.partition, options.sort)
        filter_condition = self._compile_filter(options)

        # One builder for both expressions keeps #n/:v placeholders unique
        builder = ConditionExpressionBuilder()
        key_expr = builder.build_expression(key_condition, is_key_condition=True)
        names: Dict[str, str] = dict(key_expr.attribute_name_placeholders)
        values = serialize_values(key_expr.attribute_value_placeholders)

        request: Dict[str, Any] = {
            "TableName": options.table,
            "IndexName": options.index,
            "KeyConditionExpression": key_expr.condition_expression,
            "Limit": options.limit or DEFAULT_LIMIT,
        }

        if filter_condition is not None:
            filter_expr = builder.build_expression(filter_condition)
            request["FilterExpression"] = filter_expr.condition_expression
            names.update(filter_expr.attribute_name_placeholders)
            try:
                values.update(serialize_values(filter_expr.attribute_value_placeholders))
            except InvalidValueError as e:
                raise BuildFilterExpressionError(
                    table=options.table, index=options.index, stage="serialize", reason=str(e)
                ) from e

        projection = build_projection(options.projection, names)
        if projection:
            request["ProjectionExpression"] = projection

        request["ExpressionAttributeNames"] = names
        request["ExpressionAttributeValues"] = values

        if options.cursor:
            request["ExclusiveStartKey"] = decode_cursor(options.cursor)

        return request

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------
    def query(self, options: Union[QueryOptions, Dict[str, Any]], ctx: Optional[Context] = None) -> Items:
        """Run the query across all pages and return the accumulated items.

        Items keep backend order: page order, then order within each page.
        The context is checked before every page fetch; a fetch in flight is
        not interrupted. On any failure no items are returned, including
        those from pages that already succeeded.

        Args:
            options: QueryOptions (or a dict with the same fields)
            ctx: Cancellation context; defaults to one that never cancels

        Returns:
            List of low-level items (`{"attr": {"S": "..."}}`)

        Raises:
            ValidationError, CompileError: before any backend call
            QueryCancelledError: ctx cancelled or past its deadline between pages
            QueryFailedError: a page fetch failed
        """
        ctx = ctx or Context.background()
        request = self.build_request(options)
        if self.logger.enabled_for(logging.DEBUG):
            self.logger.debug("DynamoDB query request: %s", _format_request(request))

        paginator = QueryPaginator(self._client, request)
        items: Items = []
        while paginator.has_more_pages():
            try:
                ctx.raise_if_done(
                    table=request["TableName"], index=request["IndexName"], pages_fetched=paginator.pages_fetched
                )
            except QueryCancelledError as e:
                self.logger.warning("Query stopped after %d pages: %s", paginator.pages_fetched, e)
                raise

            page = paginator.pages_fetched + 1
            try:
                response = paginator.next_page()
            except Exception as e:
                self.logger.error("Query failed on page %d: %s", page, e, exc_info=True)
                raise QueryFailedError(
                    table=request["TableName"], index=request["IndexName"], page=page, reason=str(e)
                ) from e

            page_items = response.get("Items", [])
            items.extend(page_items)
            self.logger.debug("Page %d returned %d items", page, len(page_items))

        self.logger.message(
            "Query on %s/%s returned %d items from %d pages",
            request["TableName"],
            request["IndexName"],
            len(items),
            paginator.pages_fetched,
        )
        return items


def query(client: QueryClient, options: Union[QueryOptions, Dict[str, Any]], ctx: Optional[Context] = None) -> Items:
    """Run one query with a throwaway executor bound to `client`."""
    return DynamoDB(client).query(options, ctx=ctx)
