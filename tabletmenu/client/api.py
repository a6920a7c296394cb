"""
Menu API Client

Async HTTP client for the TabletMenu REST API, used by the sync layer.
Payloads go out in client (camelCase) form and entities come back as
client types; the translation lives in ``tabletmenu.client.mapping``.

Every failure (transport, non-2xx, unparsable body) is raised as
``MenuApiError``. There is no automatic retry; the transport timeout comes
from ``API_TIMEOUT_SECONDS``.

Example:
    >>> async with MenuApiClient("http://localhost:3001") as api:
    ...     categories = await api.list_categories()
"""

import logging
from typing import Any, Mapping, Optional

import httpx

from tabletmenu.core.config import get_settings
from tabletmenu.client import mapping
from tabletmenu.client.errors import CategoryDeleteRejected, ErrorKind, MenuApiError
from tabletmenu.client.types import Branch, Branding, Category, Dish

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    """Best human-readable message from an error response."""
    try:
        body = response.json()
    except ValueError:
        return f"Server responded {response.status_code} {response.reason_phrase}"

    if isinstance(body, dict):
        detail = body.get("detail")
        if isinstance(detail, str):
            return detail
        if isinstance(detail, list) and detail:
            # FastAPI validation errors
            first = detail[0]
            if isinstance(first, dict) and "msg" in first:
                return str(first["msg"])
        if isinstance(body.get("error"), str):
            return body["error"]

    return f"Server responded {response.status_code} {response.reason_phrase}"


class MenuApiClient:
    """
    Thin async wrapper around the REST surface.

    Attributes:
        base_url: API root, e.g. "http://localhost:3001"
        timeout: Per-request transport timeout in seconds
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Args:
            base_url: Defaults to APP_BASE_URL
            timeout: Defaults to API_TIMEOUT_SECONDS
            client: Pre-built httpx client (tests, custom transports); the
                caller keeps ownership of it
        """
        settings = get_settings()
        self.base_url = (base_url or settings.app_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.api_timeout_seconds

        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "MenuApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # =========================================================================
    # TRANSPORT
    # =========================================================================

    async def _request(self, method: str, path: str, json: Any = None) -> Any:
        """
        Issue one request and return the decoded body (None for 204).

        Raises:
            MenuApiError: On any transport, status or parse failure
        """
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e!r}")
            raise MenuApiError(
                f"Could not reach the menu server ({e.__class__.__name__})",
                ErrorKind.TRANSPORT,
            ) from e

        if response.is_error:
            message = _error_message(response)
            logger.error(f"{method} {path} → {response.status_code}: {message}")
            raise MenuApiError(message, ErrorKind.HTTP, response.status_code)

        if response.status_code == 204 or not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"{method} {path} returned an unparsable body")
            raise MenuApiError(
                "Could not read the server response",
                ErrorKind.MALFORMED,
                response.status_code,
            ) from e

    @staticmethod
    def _convert(converter, body: Any, what: str, many: bool = False) -> Any:
        """Apply an inbound mapper, turning shape errors into MALFORMED."""
        try:
            if many:
                if not isinstance(body, list):
                    raise TypeError(f"expected a list, got {type(body).__name__}")
                return [converter(row) for row in body]
            return converter(body)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.error(f"Malformed {what} payload: {e!r}")
            raise MenuApiError(
                f"Unexpected {what} data from server",
                ErrorKind.MALFORMED,
            ) from e

    # =========================================================================
    # AUTH
    # =========================================================================

    async def login(self, username: str, password: str) -> bool:
        """
        Check back-office credentials.

        Returns:
            False when the credentials are rejected (401)

        Raises:
            MenuApiError: On any other failure
        """
        try:
            await self._request("POST", "/api/auth/login", {"username": username, "password": password})
        except MenuApiError as e:
            if e.status_code == 401:
                return False
            raise
        return True

    # =========================================================================
    # BRANCHES
    # =========================================================================

    async def list_branches(self) -> list[Branch]:
        body = await self._request("GET", "/api/branches")
        return self._convert(mapping.branch_from_store, body, "branch", many=True)

    async def create_branch(self, payload: Mapping[str, Any]) -> Branch:
        body = await self._request("POST", "/api/branches", mapping.branch_to_store(payload))
        return self._convert(mapping.branch_from_store, body, "branch")

    async def update_branch(self, branch_id: str, payload: Mapping[str, Any]) -> Branch:
        body = await self._request(
            "PUT", f"/api/branches/{branch_id}", mapping.branch_to_store(payload)
        )
        return self._convert(mapping.branch_from_store, body, "branch")

    async def delete_branch(self, branch_id: str) -> None:
        await self._request("DELETE", f"/api/branches/{branch_id}")

    # =========================================================================
    # CATEGORIES
    # =========================================================================

    async def list_categories(self) -> list[Category]:
        body = await self._request("GET", "/api/categories")
        return self._convert(mapping.category_from_store, body, "category", many=True)

    async def create_category(self, payload: Mapping[str, Any]) -> Category:
        body = await self._request("POST", "/api/categories", mapping.category_to_store(payload))
        return self._convert(mapping.category_from_store, body, "category")

    async def update_category(self, category_id: str, payload: Mapping[str, Any]) -> Category:
        body = await self._request(
            "PUT", f"/api/categories/{category_id}", mapping.category_to_store(payload)
        )
        return self._convert(mapping.category_from_store, body, "category")

    async def delete_category(self, category_id: str) -> None:
        """
        Raises:
            CategoryDeleteRejected: When the store refuses (400/409)
        """
        try:
            await self._request("DELETE", f"/api/categories/{category_id}")
        except MenuApiError as e:
            if e.status_code in (400, 409):
                raise CategoryDeleteRejected(category_id, e.message, e.status_code) from e
            raise

    async def reorder_categories(self, entries: list[tuple[str, int]]) -> None:
        await self._request(
            "PUT", "/api/categories/reorder",
            {"categories": mapping.sort_orders_to_store(entries)},
        )

    # =========================================================================
    # PRODUCTS (DISHES)
    # =========================================================================

    async def list_dishes(self) -> list[Dish]:
        body = await self._request("GET", "/api/products")
        return self._convert(mapping.dish_from_store, body, "dish", many=True)

    async def create_dish(self, payload: Mapping[str, Any]) -> Dish:
        body = await self._request("POST", "/api/products", mapping.dish_to_store(payload))
        return self._convert(mapping.dish_from_store, body, "dish")

    async def update_dish(self, dish_id: str, payload: Mapping[str, Any]) -> Dish:
        body = await self._request(
            "PUT", f"/api/products/{dish_id}", mapping.dish_to_store(payload)
        )
        return self._convert(mapping.dish_from_store, body, "dish")

    async def delete_dish(self, dish_id: str) -> None:
        await self._request("DELETE", f"/api/products/{dish_id}")

    async def reorder_dishes(self, entries: list[tuple[str, int]]) -> None:
        await self._request(
            "PUT", "/api/products/reorder",
            {"products": mapping.sort_orders_to_store(entries)},
        )

    # =========================================================================
    # BRANDING
    # =========================================================================

    async def get_branding(self) -> Branding:
        body = await self._request("GET", "/api/branding")
        return self._convert(mapping.branding_from_store, body or {}, "branding")

    async def update_branding(self, payload: Mapping[str, Any]) -> Branding:
        body = await self._request("PUT", "/api/branding", mapping.branding_to_store(payload))
        return self._convert(mapping.branding_from_store, body or {}, "branding")
