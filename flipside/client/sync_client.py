"""
Synchronous wrapper for the Flipside client.

Blocking interface over the async client for scripts, notebooks and other
synchronous contexts.
"""

import asyncio
import concurrent.futures
from typing import List, Optional

from flipside.models.query import Query
from flipside.models.rpc import (
  Filter,
  GetQueryRunResultsResult,
  Pagination,
  QueryRun,
  SortBy,
)
from .flipside import Flipside


class FlipsideSyncClient:
  """Synchronous wrapper around the async Flipside client."""

  def __init__(
    self,
    api_key: Optional[str] = None,
    base_url: Optional[str] = None,
    **kwargs,
  ):
    """Initialize sync client with async client underneath."""
    self._client = Flipside(api_key=api_key, base_url=base_url, **kwargs)
    # The httpx pool is bound to the loop it first runs on, so keep one loop
    self._loop = asyncio.new_event_loop()

  def __enter__(self):
    return self

  def __exit__(self, exc_type, exc_val, exc_tb):
    self.close()

  def _run_async(self, coro):
    """Run a coroutine on the private loop and return its result."""
    try:
      asyncio.get_running_loop()
    except RuntimeError:
      return self._loop.run_until_complete(coro)

    # Called from inside a running loop: drive the private loop on a worker thread
    with concurrent.futures.ThreadPoolExecutor(max_workers=1) as executor:
      return executor.submit(self._loop.run_until_complete, coro).result()

  def close(self):
    """Close the client and its event loop."""
    if self._loop.is_closed():
      return
    self._run_async(self._client.close())
    self._loop.close()

  def run(self, query: Query) -> QueryRun:
    """Run a query to completion."""
    return self._run_async(self._client.run(query))

  def create_query_run(self, query: Query) -> QueryRun:
    """Submit a query without waiting for it."""
    return self._run_async(self._client.create_query_run(query))

  def get_query_run(self, query_run_id: str) -> QueryRun:
    """Fetch a run's current status."""
    return self._run_async(self._client.get_query_run(query_run_id))

  def cancel_query_run(self, query_run_id: str) -> QueryRun:
    """Cancel a run."""
    return self._run_async(self._client.cancel_query_run(query_run_id))

  def get_query_results(
    self,
    query_run_id: str,
    page: Optional[Pagination] = None,
    filters: Optional[List[Filter]] = None,
    sort_by: Optional[List[SortBy]] = None,
  ) -> GetQueryRunResultsResult:
    """Fetch one page of results."""
    return self._run_async(
      self._client.get_query_results(query_run_id, page, filters, sort_by)
    )

  def query(
    self,
    query: Query,
    page: Optional[Pagination] = None,
    filters: Optional[List[Filter]] = None,
    sort_by: Optional[List[SortBy]] = None,
  ) -> GetQueryRunResultsResult:
    """Run a query and fetch a page of its results."""
    return self._run_async(self._client.query(query, page, filters, sort_by))
