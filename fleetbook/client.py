"""Synchronous HTTP client for the Fleetbook API."""

from __future__ import annotations

import re
from typing import Any, Dict, Iterable, List, Optional, Tuple

import requests

DEFAULT_API_URL = "http://127.0.0.1:8000"
_FILENAME_RE = re.compile(r"filename=([^;]+)")


class FleetbookClient:
    """HTTP client for talking with the backend service.

    ``session`` may be any object with the ``requests.Session`` verb
    methods; the test-suite passes FastAPI's ``TestClient``.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        token: Optional[str] = None,
        session: Any = None,
        timeout: float = 10,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._session = session if session is not None else requests.Session()
        self._timeout = timeout
        self._token = token

    def set_token(self, token: Optional[str]) -> None:
        self._token = token

    def _headers(self) -> Dict[str, str]:
        if not self._token:
            return {}
        return {"Authorization": f"Bearer {self._token}"}

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        response = self._session.request(
            method,
            f"{self._base_url}/api{path}",
            headers=self._headers(),
            timeout=self._timeout,
            **kwargs,
        )
        response.raise_for_status()
        return response

    def _json(self, method: str, path: str, **kwargs: Any) -> Any:
        return self._request(method, path, **kwargs).json()

    # drivers

    def list_drivers(self) -> List[dict]:
        return self._json("GET", "/drivers")

    def get_driver(self, driver_id: str) -> dict:
        return self._json("GET", f"/drivers/{driver_id}")

    def create_driver(self, payload: dict) -> dict:
        return self._json("POST", "/drivers", json=payload)

    def update_driver(self, driver_id: str, payload: dict) -> dict:
        return self._json("PUT", f"/drivers/{driver_id}", json=payload)

    def delete_driver(self, driver_id: str) -> dict:
        return self._json("DELETE", f"/drivers/{driver_id}")

    def bulk_update_rates(
        self,
        driver_ids: Iterable[str],
        hourly_rate: Optional[str] = None,
        overtime_rate: Optional[str] = None,
    ) -> dict:
        payload: Dict[str, Any] = {"driver_ids": list(driver_ids)}
        if hourly_rate is not None:
            payload["hourly_rate"] = str(hourly_rate)
        if overtime_rate is not None:
            payload["overtime_rate"] = str(overtime_rate)
        return self._json("POST", "/drivers/bulk-update-rates", json=payload)

    # expenses

    def list_expenses(self, **filters: Any) -> dict:
        params = {key: value for key, value in filters.items() if value is not None}
        return self._json("GET", "/expenses", params=params)

    def get_expense(self, expense_id: str) -> dict:
        return self._json("GET", f"/expenses/{expense_id}")

    def create_expense(self, payload: dict) -> dict:
        return self._json("POST", "/expenses", json=payload)

    def update_expense(self, expense_id: str, payload: dict) -> dict:
        return self._json("PUT", f"/expenses/{expense_id}", json=payload)

    def soft_delete_expense(self, expense_id: str) -> dict:
        return self._json("POST", f"/expenses/{expense_id}/soft-delete")

    def restore_expense(self, expense_id: str) -> dict:
        return self._json("POST", f"/expenses/{expense_id}/restore")

    def delete_expense(self, expense_id: str) -> dict:
        return self._json("DELETE", f"/expenses/{expense_id}")

    def bulk_delete_expenses(self, ids: Iterable[str]) -> dict:
        return self._json("POST", "/expenses/bulk-delete", json={"ids": list(ids)})

    def bulk_restore_expenses(self, ids: Iterable[str]) -> dict:
        return self._json("POST", "/expenses/bulk-restore", json={"ids": list(ids)})

    def bulk_permanent_delete_expenses(self, ids: Iterable[str]) -> dict:
        return self._json("POST", "/expenses/bulk-permanent-delete", json={"ids": list(ids)})

    # employees

    def list_employees(self) -> List[dict]:
        return self._json("GET", "/employees")

    def create_employee(self, payload: dict) -> dict:
        return self._json("POST", "/employees", json=payload)

    def update_employee(self, employee_id: str, payload: dict) -> dict:
        return self._json("PUT", f"/employees/{employee_id}", json=payload)

    def delete_employee(self, employee_id: str) -> dict:
        return self._json("DELETE", f"/employees/{employee_id}")

    # expense types

    def list_expense_types(self) -> List[dict]:
        return self._json("GET", "/expense-types")

    def create_expense_type(self, payload: dict) -> dict:
        return self._json("POST", "/expense-types", json=payload)

    def delete_expense_type(self, type_id: str) -> dict:
        return self._json("DELETE", f"/expense-types/{type_id}")

    # settings

    def list_settings(self) -> List[dict]:
        return self._json("GET", "/settings")

    def get_setting(self, key: str) -> dict:
        return self._json("GET", f"/settings/{key}")

    def save_setting(self, payload: dict) -> dict:
        return self._json("POST", "/settings", json=payload)

    def delete_setting(self, key: str) -> dict:
        return self._json("DELETE", f"/settings/{key}")

    # print templates

    def list_templates(self) -> List[dict]:
        return self._json("GET", "/print-templates")

    def create_template(self, payload: dict) -> dict:
        return self._json("POST", "/print-templates", json=payload)

    def set_default_template(self, template_id: str) -> dict:
        return self._json("POST", f"/print-templates/{template_id}/set-default")

    def delete_template(self, template_id: str) -> dict:
        return self._json("DELETE", f"/print-templates/{template_id}")

    # backup

    def export_backup(self, fmt: str = "json", month: Optional[str] = None) -> Tuple[bytes, str]:
        """Download a backup and return ``(body, filename)``."""
        params = {"format": fmt}
        if month:
            params["month"] = month
        response = self._request("GET", "/backup/export", params=params)
        match = _FILENAME_RE.search(response.headers.get("content-disposition", ""))
        filename = match.group(1).strip() if match else f"backup.{fmt}"
        return response.content, filename

    def email_backup(self, email: str, fmt: str = "json", month: Optional[str] = None) -> dict:
        payload: Dict[str, Any] = {"email": email, "format": fmt}
        if month:
            payload["month"] = month
        return self._json("POST", "/backup/email", json=payload)
