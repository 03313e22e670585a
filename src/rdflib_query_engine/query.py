"""Query parsing, execution against a store, and adaptation of result rows."""

import asyncio
from collections.abc import Iterable
from dataclasses import dataclass
import logging
import re

from pyparsing import ParseException
from rdflib.plugins.sparql import prepareQuery
from rdflib.plugins.sparql.sparql import Query
from rdflib.term import Node

from .errors import QueryExecutionError, QuerySyntaxError, UnsupportedOperationError
from .store import QuadStore, RawRow

logger = logging.getLogger(__name__)

UPDATE_PATTERN = re.compile(r"^\s*(?:INSERT|DELETE)", re.IGNORECASE)

Binding = dict[str, Node]


@dataclass(frozen=True)
class ParsedQuery:
    """A prepared SELECT query and its projected variables as ``?name`` strings."""

    text: str
    query: Query
    variables: tuple[str, ...]


def is_update(sparql: str) -> bool:
    """Check whether a query string is a SPARQL UPDATE request."""
    return UPDATE_PATTERN.match(sparql) is not None


def parse_query(sparql: str, base: str | None = None) -> ParsedQuery:
    """
    Parse a SPARQL SELECT query.

    Args:
        sparql: Query text
        base: Base IRI for resolving relative IRIs in the query

    Returns:
        ParsedQuery: The prepared query

    Raises:
        QuerySyntaxError: If the text is not valid SPARQL
        UnsupportedOperationError: If the query is not a SELECT query
    """
    try:
        query = prepareQuery(sparql, base=base)
    except ParseException as e:
        raise QuerySyntaxError(f"Invalid SPARQL syntax: {e}") from e
    except Exception as e:
        # Algebra translation reports semantic errors (e.g. unknown prefixes)
        # as plain exceptions
        raise QuerySyntaxError(f"Invalid SPARQL query: {e}") from e

    if query.algebra.name != "SelectQuery":
        raise UnsupportedOperationError(
            f"Only SELECT queries are supported, received: {sparql}", sparql
        )

    variables = tuple(variable.n3() for variable in query.algebra.PV or ())
    return ParsedQuery(text=sparql, query=query, variables=variables)


async def run_query(store: QuadStore, query: ParsedQuery) -> list[RawRow]:
    """
    Execute a query against a store and collect every result row.

    The store reports rows through callbacks from a worker thread; they are
    handed back to the event loop in order, and the call completes once the
    store signals that it is done.

    Raises:
        QueryExecutionError: If the store reports an evaluation error
    """
    loop = asyncio.get_running_loop()
    done: asyncio.Future[BaseException | None] = loop.create_future()
    rows: list[RawRow] = []

    def settle(error: BaseException | None) -> None:
        if not done.done():
            done.set_result(error)

    def on_result(row: RawRow) -> None:
        loop.call_soon_threadsafe(rows.append, row)

    def on_done(error: BaseException | None) -> None:
        loop.call_soon_threadsafe(settle, error)

    await loop.run_in_executor(None, store.query, query.query, on_result, on_done)
    error = await done
    if error is not None:
        raise QueryExecutionError(str(error)) from error

    logger.debug(f"Query returned {len(rows)} rows")
    return rows


def project_row(row: RawRow, variables: Iterable[str]) -> Binding:
    """
    Keep only the requested variables of a result row.

    The row's own key order is preserved; variables the row does not bind
    are left out.
    """
    wanted = set(variables)
    return {key: value for key, value in row.items() if key in wanted}
