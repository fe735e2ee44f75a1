"""
Query-run orchestration.

Submits queries, polls their runs to a terminal state with linear backoff and a
wall-clock timeout, follows run redirects, and fetches result pages.
"""

import asyncio
import logging
import time
from typing import List, Optional, Sequence

from flipside.config.constants import PAGE_NUMBER, PAGE_SIZE
from flipside.logger import log_query_run_event, logger
from flipside.models.query import Query
from flipside.models.rpc import (
  Filter,
  GetQueryRunResultsParams,
  GetQueryRunResultsResult,
  Pagination,
  QueryFormat,
  QueryRun,
  QueryRunIdParams,
  QueryState,
  SortBy,
)
from .client import RpcClient
from .config import RpcClientConfig
from .exceptions import (
  QueryRunExecutionError,
  QueryRunRpcError,
  QueryRunTimeoutError,
  RpcError,
)


class Flipside:
  """
  Client for running SQL against the Flipside query service.

  One instance can serve many concurrent calls; each ``run`` keeps its polling
  state locally.

  Example:
      async with Flipside(api_key="...") as flipside:
          query_run = await flipside.run(Query(sql="SELECT 1"))
          page = await flipside.get_query_results(query_run.id)
  """

  def __init__(
    self,
    api_key: Optional[str] = None,
    base_url: Optional[str] = None,
    config: Optional[RpcClientConfig] = None,
    **kwargs,
  ):
    self.rpc = RpcClient(api_key=api_key, base_url=base_url, config=config, **kwargs)

  async def __aenter__(self):
    return self

  async def __aexit__(self, exc_type, exc_val, exc_tb):
    await self.close()

  async def close(self):
    await self.rpc.close()

  async def run(self, query: Query) -> QueryRun:
    """
    Run a query to completion.

    Polls with linear backoff (interval, 2x interval, 3x interval, ...) until
    the run reaches a terminal state. When the service redirects the run to
    another one, the redirect target is observed from then on.

    Args:
        query: Query to run

    Returns:
        The run that finished successfully (the redirect target, if any)

    Every failure is a QueryRunError, so one ``except QueryRunError`` covers
    transport failures as well as failed or timed-out runs.

    Raises:
        QueryRunRpcError: If a remote call fails; the RpcError is its cause
        QueryRunExecutionError: If the run ends FAILED or CANCELLED
        QueryRunTimeoutError: If the timeout elapses first. The remote run is
            left running.
    """
    retry_interval = query.resolved_retry_interval_seconds
    timeout = query.resolved_timeout_seconds
    start_time = time.monotonic()

    try:
      query_run = await self.create_query_run(query)
    except RpcError as e:
      raise QueryRunRpcError(e) from e

    query_run_id = query_run.id
    retry_duration = retry_interval

    while True:
      try:
        res = await self.rpc.get_query_run(
          QueryRunIdParams(query_run_id=query_run_id)
        )
      except RpcError as e:
        raise QueryRunRpcError(e, query_run_id) from e
      query_run = res.current_query_run

      if query_run.id != query_run_id:
        log_query_run_event(
          logger,
          "redirected",
          query_run_id,
          metadata={"redirected_to": query_run.id},
        )
        query_run_id = query_run.id

      if query_run.state is QueryState.SUCCESS:
        break

      if query_run.state.is_error:
        log_query_run_event(
          logger,
          "finished",
          query_run_id,
          state=query_run.state.value,
          level=logging.WARNING,
          metadata={"error_name": query_run.error_name},
        )
        raise QueryRunExecutionError(
          name=query_run.error_name,
          message=query_run.error_message,
          data=query_run.error_data,
          query_run_id=query_run_id,
        )

      log_query_run_event(
        logger,
        "polled",
        query_run_id,
        state=query_run.state.value,
        level=logging.DEBUG,
        metadata={"next_poll_seconds": retry_duration},
      )

      await asyncio.sleep(retry_duration)
      retry_duration += retry_interval

      elapsed = time.monotonic() - start_time
      if elapsed > timeout:
        log_query_run_event(
          logger,
          "timed_out",
          query_run_id,
          state=query_run.state.value,
          level=logging.WARNING,
          metadata={"elapsed_seconds": elapsed},
        )
        raise QueryRunTimeoutError(elapsed, query_run_id)

    log_query_run_event(logger, "finished", query_run_id, state=query_run.state.value)
    return query_run

  async def create_query_run(self, query: Query) -> QueryRun:
    """Submit a query and return the new run without waiting for it."""
    res = await self.rpc.create_query_run(query.to_create_params())
    log_query_run_event(
      logger,
      "submitted",
      res.query_run.id,
      state=res.query_run.state.value,
      metadata={
        "max_age_minutes": query.resolved_max_age_minutes,
        "ttl_hours": query.resolved_ttl_hours,
      },
    )
    return res.query_run

  async def get_query_run(self, query_run_id: str) -> QueryRun:
    """Fetch a run's current status, following a redirect."""
    res = await self.rpc.get_query_run(QueryRunIdParams(query_run_id=query_run_id))
    return res.current_query_run

  async def cancel_query_run(self, query_run_id: str) -> QueryRun:
    """Cancel a run. Pollers of the same run see CANCELLED on their next poll."""
    res = await self.rpc.cancel_query_run(QueryRunIdParams(query_run_id=query_run_id))
    log_query_run_event(
      logger, "cancelled", query_run_id, state=res.canceled_query_run.state.value
    )
    return res.canceled_query_run

  async def get_query_results(
    self,
    query_run_id: str,
    page: Optional[Pagination] = None,
    filters: Optional[Sequence[Filter]] = None,
    sort_by: Optional[Sequence[SortBy]] = None,
  ) -> GetQueryRunResultsResult:
    """
    Fetch one page of results.

    The id is first resolved through getQueryRun, so results always come from
    the run the service currently points to.

    Args:
        query_run_id: Run to fetch results for
        page: Page to fetch (default: page 1, 100000 rows)
        filters: Filters, ANDed together
        sort_by: Sort order

    Returns:
        The requested results page
    """
    query_run = await self.get_query_run(query_run_id)

    params = GetQueryRunResultsParams(
      query_run_id=query_run.id,
      format=QueryFormat.CSV,
      sort_by=list(sort_by or []),
      filters=list(filters or []),
      page=page or Pagination(number=PAGE_NUMBER, size=PAGE_SIZE),
    )
    return await self.rpc.get_query_run_results(params)

  async def query(
    self,
    query: Query,
    page: Optional[Pagination] = None,
    filters: Optional[List[Filter]] = None,
    sort_by: Optional[List[SortBy]] = None,
  ) -> GetQueryRunResultsResult:
    """Run a query to completion and fetch a page of its results."""
    query_run = await self.run(query)
    return await self.get_query_results(
      query_run.id, page=page, filters=filters, sort_by=sort_by
    )
