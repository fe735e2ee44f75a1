"""Request/response models for the query-run service."""

from .query import Query
from .rpc import (
  CancelQueryRunResult,
  ColumnMetadata,
  ColumnType,
  CreateQueryRunParams,
  CreateQueryRunResult,
  Filter,
  FilterKey,
  GetQueryRunResult,
  GetQueryRunResultsParams,
  GetQueryRunResultsResult,
  Pagination,
  PaginationDetails,
  QueryFormat,
  QueryRequest,
  QueryRun,
  QueryRunIdParams,
  QueryState,
  SortBy,
  SqlStatement,
)

__all__ = [
  "CancelQueryRunResult",
  "ColumnMetadata",
  "ColumnType",
  "CreateQueryRunParams",
  "CreateQueryRunResult",
  "Filter",
  "FilterKey",
  "GetQueryRunResult",
  "GetQueryRunResultsParams",
  "GetQueryRunResultsResult",
  "Pagination",
  "PaginationDetails",
  "Query",
  "QueryFormat",
  "QueryRequest",
  "QueryRun",
  "QueryRunIdParams",
  "QueryState",
  "SortBy",
  "SqlStatement",
]
