import os

# Must be set before flipside.config.env reads the environment
os.environ.setdefault("FLIPSIDE_ENVIRONMENT", "test")

from typing import Any, Dict, Optional  # noqa: E402

import pytest  # noqa: E402

TEST_API_KEY = "test-api-key-1234567890"
TEST_BASE_URL = "https://api.example.com/json-rpc"


def make_query_run(
  run_id: str = "run-1",
  state: str = "QUERY_STATE_RUNNING",
  **overrides: Any,
) -> Dict[str, Any]:
  """Build a getQueryRun-style queryRun payload in wire format."""
  payload: Dict[str, Any] = {
    "id": run_id,
    "sqlStatementId": "stmt-1",
    "state": state,
    "path": f"2024/01/01/{run_id}",
    "fileCount": None,
    "lastFileNumber": None,
    "fileNames": None,
    "errorName": None,
    "errorMessage": None,
    "errorData": None,
    "startedAt": "2024-01-01T00:00:00.000Z",
    "endedAt": None,
    "rowCount": None,
    "totalSize": None,
    "tags": {"sdk_package": "python"},
    "dataSourceId": "ds-1",
    "userId": "user-1",
    "createdAt": "2024-01-01T00:00:00.000Z",
    "updatedAt": "2024-01-01T00:00:01.000Z",
    "archivedAt": None,
    "rowsPerResultSet": 100000,
    "statementTimeoutSeconds": 1800,
    "abortDetachedQuery": False,
  }
  if state in ("QUERY_STATE_FAILED", "QUERY_STATE_CANCELLED"):
    payload["errorName"] = "QueryRunExecutionError"
    payload["errorMessage"] = "SQL compilation error"
    payload["errorData"] = "line 1 at position 7"
  payload.update(overrides)
  return payload


def make_results_page(
  run_id: str = "run-1",
  redirected_run_id: Optional[str] = None,
  number: int = 1,
  size: int = 100000,
) -> Dict[str, Any]:
  """Build a getQueryRunResults payload in wire format."""
  return {
    "columnNames": ["block_number", "tx_hash"],
    "columnTypes": ["number", "string"],
    "rows": [[1, "0xabc"], [2, "0xdef"]],
    "page": {
      "currentPageNumber": number,
      "currentPageSize": size,
      "totalRows": 2,
      "totalPages": 1,
    },
    "originalQueryRun": make_query_run(run_id, "QUERY_STATE_SUCCESS"),
    "redirectedToQueryRun": (
      make_query_run(redirected_run_id, "QUERY_STATE_SUCCESS")
      if redirected_run_id
      else None
    ),
  }


@pytest.fixture
def query_run_payload():
  return make_query_run


@pytest.fixture
def results_page_payload():
  return make_results_page


@pytest.fixture
def api_key():
  return TEST_API_KEY


@pytest.fixture
def base_url():
  return TEST_BASE_URL


@pytest.fixture
async def rpc_client():
  from flipside.client.client import RpcClient

  client = RpcClient(api_key=TEST_API_KEY, base_url=TEST_BASE_URL)
  yield client
  await client.close()


@pytest.fixture
async def flipside_client():
  from flipside.client.flipside import Flipside

  client = Flipside(api_key=TEST_API_KEY, base_url=TEST_BASE_URL)
  yield client
  await client.close()
