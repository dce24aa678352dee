"""
RPC Client

Thin requests-based client for the RPC surface, used by the UI.
Returns the same pydantic models the server uses, so the UI never handles
raw JSON.

Errors:
    RpcTransportError   - server unreachable, timeout, bad response body
    RpcValidationError  - the server rejected the input (422)
    RpcNotFoundError    - the expense does not exist (404)
    RpcError            - anything else non-2xx
"""

from typing import Any, Optional

import requests
from pydantic import ValidationError

from expense_tracker.config import get_settings
from expense_tracker.models.expense import (
    Expense,
    ExpenseCreate,
    ExpenseFilter,
    ExpenseUpdate,
    HealthStatus,
)


def _issue_fields(issues: list[dict]) -> list[str]:
    return [str(issue["loc"][-1]) for issue in issues if issue.get("loc")]


class RpcError(Exception):
    """Base exception for failed RPC calls."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RpcTransportError(RpcError):
    """The call never produced a usable response."""
    pass


class RpcValidationError(RpcError):
    """The server rejected the input."""

    def __init__(self, message: str, issues: list[dict]):
        super().__init__(message, status_code=422)
        self.issues = issues

    @property
    def fields(self) -> list[str]:
        """Names of the offending fields."""
        return _issue_fields(self.issues)


class RpcNotFoundError(RpcError):
    """The requested expense does not exist."""
    pass


class ExpenseApiClient:
    """
    Client for the expense RPC procedures.

    Each procedure is a POST of its input to /rpc/<name> (healthcheck is
    a GET).
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        settings = get_settings().client
        self._base_url = (base_url or settings.url).rstrip("/")
        self._timeout = timeout or settings.timeout
        self._session = session or requests.Session()

    def _url(self, procedure: str) -> str:
        return f"{self._base_url}/rpc/{procedure}"

    def _handle_response(self, response: requests.Response) -> Any:
        """Turn a response into decoded JSON or the matching RpcError."""
        if response.status_code == 422:
            issues = self._detail(response)
            if not isinstance(issues, list):
                issues = []
            fields = ", ".join(_issue_fields(issues))
            raise RpcValidationError(f"Invalid input: {fields or 'unknown field'}", issues)

        if response.status_code == 404:
            raise RpcNotFoundError(str(self._detail(response)), status_code=404)

        if not response.ok:
            raise RpcError(
                f"RPC call failed ({response.status_code}): {self._detail(response)}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise RpcTransportError(f"Invalid JSON in response: {e}") from e

    @staticmethod
    def _detail(response: requests.Response) -> Any:
        try:
            return response.json().get("detail", response.text)
        except (ValueError, AttributeError):
            return response.text

    def _call(self, method: str, procedure: str, payload: Any = None) -> Any:
        try:
            if method == "GET":
                response = self._session.get(self._url(procedure), timeout=self._timeout)
            else:
                response = self._session.post(
                    self._url(procedure),
                    json=payload,
                    timeout=self._timeout,
                )
        except requests.RequestException as e:
            raise RpcTransportError(f"Could not reach expense server: {e}") from e

        return self._handle_response(response)

    @staticmethod
    def _parse(model, data: Any):
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise RpcTransportError(f"Unexpected response shape: {e}") from e

    # -------------------------------------------------------------------------
    # Procedures
    # -------------------------------------------------------------------------

    def healthcheck(self) -> HealthStatus:
        return self._parse(HealthStatus, self._call("GET", "healthcheck"))

    def create_expense(self, data: ExpenseCreate) -> Expense:
        payload = data.model_dump(mode="json")
        return self._parse(Expense, self._call("POST", "createExpense", payload))

    def get_expenses(self, expense_filter: Optional[ExpenseFilter] = None) -> list[Expense]:
        payload = None
        if expense_filter is not None and not expense_filter.is_empty:
            payload = expense_filter.model_dump(mode="json", exclude_none=True)

        data = self._call("POST", "getExpenses", payload)
        if not isinstance(data, list):
            raise RpcTransportError("Unexpected response shape: expected a list")
        return [self._parse(Expense, item) for item in data]

    def get_expense_by_id(self, expense_id: int) -> Optional[Expense]:
        data = self._call("POST", "getExpenseById", expense_id)
        if data is None:
            return None
        return self._parse(Expense, data)

    def update_expense(self, data: ExpenseUpdate) -> Expense:
        payload = data.model_dump(mode="json", exclude_unset=True, exclude_none=True)
        return self._parse(Expense, self._call("POST", "updateExpense", payload))

    def delete_expense(self, expense_id: int) -> None:
        self._call("POST", "deleteExpense", expense_id)
