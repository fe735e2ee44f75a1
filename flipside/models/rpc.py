"""
JSON-RPC wire schema for the query-run service.

Field names are snake_case in Python and camelCase on the wire. Enumerations
serialize as fixed string tags.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from flipside.config.constants import PAGE_NUMBER, PAGE_SIZE


class RpcModel(BaseModel):
  """Base model for records exchanged with the JSON-RPC service."""

  model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

  def to_wire(self) -> Dict[str, Any]:
    """Serialize with wire (camelCase) field names."""
    return self.model_dump(mode="json", by_alias=True)


class QueryState(str, Enum):
  """Query run state.

  READY, RUNNING and STREAMING_RESULTS are non-terminal. SUCCESS is the only
  successful terminal state; FAILED and CANCELLED end the run with an error.
  """

  READY = "QUERY_STATE_READY"
  RUNNING = "QUERY_STATE_RUNNING"
  SUCCESS = "QUERY_STATE_SUCCESS"
  FAILED = "QUERY_STATE_FAILED"
  STREAMING_RESULTS = "QUERY_STATE_STREAMING_RESULTS"
  CANCELLED = "QUERY_STATE_CANCELLED"

  @property
  def is_error(self) -> bool:
    return self in (QueryState.FAILED, QueryState.CANCELLED)

  @property
  def is_terminal(self) -> bool:
    return self is QueryState.SUCCESS or self.is_error


class QueryFormat(str, Enum):
  CSV = "csv"
  JSON = "json"


class ColumnType(str, Enum):
  STRING = "string"
  NUMBER = "number"
  DATE = "date"
  OBJECT = "object"
  ARRAY = "array"
  BOOLEAN = "boolean"
  UNKNOWN = "unknown"


class FilterKey(str, Enum):
  """Keys of a result filter. A filter names its column and one comparator."""

  COLUMN = "column"
  EQ = "eq"
  NEQ = "neq"
  GT = "gt"
  GTE = "gte"
  LT = "lt"
  LTE = "lte"
  LIKE = "like"
  IN = "in"
  NOT_IN = "notin"


# Filters are ANDed together; each one is e.g. {column: "block_number", gt: "100"}
Filter = Dict[FilterKey, str]


# =============================================================================
# ENTITIES
# =============================================================================


class QueryRun(RpcModel):
  """A remote query run as reported by the service."""

  id: str
  sql_statement_id: str
  state: QueryState
  path: str
  file_count: Optional[int] = None
  last_file_number: Optional[int] = None
  # The service sends either a single name or a list of names
  file_names: Optional[Union[str, List[str]]] = None
  error_name: Optional[str] = None
  error_message: Optional[str] = None
  error_data: Optional[Any] = None
  external_query_id: Optional[str] = None
  data_source_query_id: Optional[str] = None
  data_source_session_id: Optional[str] = None
  started_at: Optional[datetime] = None
  query_running_ended_at: Optional[datetime] = None
  query_streaming_ended_at: Optional[datetime] = None
  ended_at: Optional[datetime] = None
  row_count: Optional[int] = None
  total_size: Optional[str] = None
  tags: Dict[str, Optional[str]] = Field(default_factory=dict)
  data_source_id: str
  user_id: str
  created_at: datetime
  updated_at: datetime
  archived_at: Optional[datetime] = None
  rows_per_result_set: Optional[int] = None
  statement_timeout_seconds: Optional[int] = None
  abort_detached_query: Optional[bool] = None

  @field_validator("tags", mode="before")
  @classmethod
  def default_tags(cls, v: Any) -> Any:
    return {} if v is None else v

  @model_validator(mode="after")
  def check_error_fields(self) -> "QueryRun":
    """Error fields are present exactly when the run ended in error."""
    error_fields = (self.error_name, self.error_message, self.error_data)
    if self.state.is_error:
      if any(field is None for field in error_fields):
        raise ValueError(
          f"Query run {self.id} is {self.state.value} but its error fields are incomplete"
        )
    elif any(field is not None for field in error_fields):
      raise ValueError(
        f"Query run {self.id} is {self.state.value} but carries error fields"
      )
    return self

  @property
  def file_name_list(self) -> List[str]:
    if self.file_names is None:
      return []
    if isinstance(self.file_names, str):
      return [self.file_names]
    return list(self.file_names)


class QueryRequest(RpcModel):
  id: str
  sql_statement_id: str
  user_id: str
  tags: Dict[str, Optional[str]] = Field(default_factory=dict)
  max_age_minutes: int
  result_ttl_hours: int = Field(alias="resultTTLHours")
  user_skip_cache: bool
  triggered_query_run: bool
  query_run_id: str
  created_at: datetime
  updated_at: datetime


class ColumnMetadata(RpcModel):
  types: List[str] = Field(default_factory=list)
  columns: List[str] = Field(default_factory=list)
  col_type_map: Dict[str, str] = Field(default_factory=dict)


class SqlStatement(RpcModel):
  id: str
  statement_hash: str
  sql: str
  column_metadata: Optional[ColumnMetadata] = None
  user_id: str
  tags: Dict[str, Optional[str]] = Field(default_factory=dict)
  created_at: datetime
  updated_at: datetime


class SortBy(RpcModel):
  column: str
  direction: str = "asc"


class Pagination(RpcModel):
  number: int = Field(PAGE_NUMBER, ge=1, description="1-based page number")
  size: int = Field(PAGE_SIZE, ge=1, description="Rows per page")


class PaginationDetails(RpcModel):
  current_page_number: int
  current_page_size: int
  total_rows: int
  total_pages: int


# =============================================================================
# METHOD PARAMETERS
# =============================================================================


class CreateQueryRunParams(RpcModel):
  result_ttl_hours: int = Field(alias="resultTTLHours")
  max_age_minutes: int
  sql: str
  tags: Dict[str, Optional[str]] = Field(default_factory=dict)
  data_source: str
  data_provider: str


class QueryRunIdParams(RpcModel):
  query_run_id: str


class GetQueryRunResultsParams(RpcModel):
  query_run_id: str
  format: QueryFormat = QueryFormat.CSV
  sort_by: List[SortBy] = Field(default_factory=list)
  filters: List[Filter] = Field(default_factory=list)
  page: Optional[Pagination] = None


# =============================================================================
# METHOD RESULTS
# =============================================================================


class CreateQueryRunResult(RpcModel):
  query_request: Optional[QueryRequest] = None
  query_run: QueryRun
  sql_statement: Optional[SqlStatement] = None


class GetQueryRunResult(RpcModel):
  query_run: QueryRun
  redirected_to_query_run: Optional[QueryRun] = None

  @property
  def current_query_run(self) -> QueryRun:
    """The run to observe: the redirect target when the service sent one."""
    return self.redirected_to_query_run or self.query_run


class CancelQueryRunResult(RpcModel):
  canceled_query_run: QueryRun


class GetQueryRunResultsResult(RpcModel):
  """One page of results for a query run."""

  column_names: List[str] = Field(default_factory=list)
  column_types: List[ColumnType] = Field(default_factory=list)
  rows: List[Any] = Field(default_factory=list)
  page: PaginationDetails
  original_query_run: QueryRun
  redirected_to_query_run: Optional[QueryRun] = None

  @field_validator("column_names", "column_types", "rows", mode="before")
  @classmethod
  def default_empty(cls, v: Any) -> Any:
    return [] if v is None else v

  @model_validator(mode="after")
  def check_columns(self) -> "GetQueryRunResultsResult":
    if len(self.column_names) != len(self.column_types):
      raise ValueError(
        f"Got {len(self.column_names)} column names but {len(self.column_types)} column types"
      )
    return self

  @property
  def query_run(self) -> QueryRun:
    """The run that actually produced this page."""
    return self.redirected_to_query_run or self.original_query_run

  def records(self) -> List[Dict[str, Any]]:
    """Rows keyed by column name. Rows that are already mappings pass through."""
    records = []
    for row in self.rows:
      if isinstance(row, dict):
        records.append(row)
      else:
        records.append(dict(zip(self.column_names, row)))
    return records
