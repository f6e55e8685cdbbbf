"""Async client for the mock server's admin API.

Keeps the session's endpoint mirror (``state.endpoints``) in step with the
backend: the mirror is only ever replaced by a fresh ``GET /list`` answer.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx

from mockdeck.core.config import BACKEND_URL, DELETE_ROUTE, LIST_ROUTE, REGISTER_ROUTE, REQUEST_TIMEOUT
from mockdeck.core.effects import ERROR, SUCCESS, UIEffects
from mockdeck.core.errors import ConfirmationDeclined, NetworkError
from mockdeck.core.logger import LOGGER
from mockdeck.core.models import endpoints_from_server
from mockdeck.core.state import AppState
from mockdeck.core.submission import RegistrationPayload


class RegistryClient:
    """
    List, register and delete mock endpoints.

    Every public operation brackets its request with the loader, reports the
    outcome through a notification and never raises for backend or transport
    failures.
    """

    def __init__(
        self,
        state: AppState,
        base_url: str = BACKEND_URL,
        timeout: float | None = REQUEST_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.state = state
        self.base_url = base_url.rstrip("/")
        self._http = httpx.AsyncClient(base_url=self.base_url, timeout=timeout, transport=transport)

    @property
    def effects(self) -> UIEffects:
        return self.state.effects

    # ── Connectivity ──────────────────────────────────────────────────────────

    async def is_alive(self) -> bool:
        """Return True if the backend answers the list route."""
        try:
            r = await self._http.get(LIST_ROUTE, timeout=3)
            return r.status_code < 500
        except httpx.HTTPError:
            return False

    # ── Operations ────────────────────────────────────────────────────────────

    async def load_endpoints(self) -> bool:
        """Replace the endpoint mirror with the backend's list."""
        self.effects.show_loader(True)
        try:
            r = await self._request("GET", LIST_ROUTE, failure="Failed to load endpoints")
            try:
                endpoints = endpoints_from_server(r.json())
            except (ValueError, TypeError) as exc:
                raise NetworkError("Failed to load endpoints") from exc
            self.state.replace_endpoints(endpoints)
            LOGGER.debug("Loaded %d endpoints", len(endpoints))
            return True
        except NetworkError as exc:
            self.effects.show_notification(str(exc), ERROR)
            return False
        finally:
            self.effects.show_loader(False)

    async def register_endpoint(self, payload: RegistrationPayload) -> bool:
        """Register ``payload``; on success reset the form and refresh the list."""
        self.effects.show_loader(True)
        try:
            data, files = payload.as_multipart()
            await self._request("POST", REGISTER_ROUTE, failure="Failed to register endpoint", data=data, files=files)
            self.effects.show_notification("Endpoint registered successfully!", SUCCESS)
            self.state.form.reset_form()
            await self.load_endpoints()
            return True
        except NetworkError as exc:
            self.effects.show_notification(str(exc), ERROR)
            return False
        finally:
            self.effects.show_loader(False)

    async def delete_endpoint(self, path: str) -> bool:
        """Delete ``path`` after the operator confirms; refresh the list on success."""
        try:
            await self._require_confirmation(f'Are you sure you want to delete the endpoint "{path}"?')
        except ConfirmationDeclined:
            LOGGER.debug("Delete of %s declined", path)
            return False

        self.effects.show_loader(True)
        try:
            await self._request("DELETE", f"{DELETE_ROUTE}/{quote(path, safe='')}", failure="Failed to delete endpoint")
            self.effects.show_notification("Endpoint deleted successfully!", SUCCESS)
            await self.load_endpoints()
            return True
        except NetworkError as exc:
            self.effects.show_notification(str(exc), ERROR)
            return False
        finally:
            self.effects.show_loader(False)

    # ── Internals ─────────────────────────────────────────────────────────────

    async def _require_confirmation(self, message: str) -> None:
        if not await self.effects.confirm(message):
            raise ConfirmationDeclined(message)

    async def _request(self, method: str, url: str, failure: str, **kwargs: Any) -> httpx.Response:
        LOGGER.debug("%s %s%s", method, self.base_url, url)
        try:
            r = await self._http.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            LOGGER.warning("%s %s failed: %s", method, url, exc)
            raise NetworkError(failure) from exc
        if not r.is_success:
            LOGGER.warning("%s %s returned %d: %s", method, url, r.status_code, r.text[:200])
            raise NetworkError(failure, status_code=r.status_code)
        return r

    async def close(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> RegistryClient:
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.close()
