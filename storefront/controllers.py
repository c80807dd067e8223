"""HTTP controllers for the store and user resources.

Each controller owns a base path and dispatches requests by HTTP method to
``do_get``/``do_post``/``do_put``/``do_delete``. Request parameters may arrive
in the query string, a form body or a flat JSON object, and the resource
identifier is always the first path segment after the base path.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from fastapi import APIRouter, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from .authentication import AuthenticationService
from .dto import ErrorResponse, store_to_dto, stores_to_dto_list, user_to_dto, users_to_dto_list
from .models import User, UserRole, parse_role
from .stores import StoreError, StoreService

logger = logging.getLogger("storefront.controllers")

_FORM_CONTENT_TYPES = {"application/x-www-form-urlencoded", "multipart/form-data"}
_ROUTED_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"]


class InvalidRequestBody(ValueError):
    """Raised when a request body cannot be read as parameters."""


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


class BaseController:
    """Shared request parsing, response rendering and method dispatch."""

    base_path: str = ""

    async def read_request_body(self, request: Request) -> str:
        body = await request.body()
        try:
            return body.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidRequestBody("Request body must be UTF-8 encoded") from exc

    async def read_parameters(self, request: Request) -> Dict[str, str]:
        """Merge query parameters with form or JSON body fields; body values win."""

        params: Dict[str, str] = dict(request.query_params)
        content_type = request.headers.get("content-type", "").split(";", 1)[0].strip().lower()

        if content_type in _FORM_CONTENT_TYPES:
            form = await request.form()
            for key, value in form.items():
                if isinstance(value, str):
                    params[key] = value
        elif content_type == "application/json":
            raw = await self.read_request_body(request)
            if raw.strip():
                try:
                    payload = json.loads(raw)
                except ValueError as exc:
                    raise InvalidRequestBody("Request body is not valid JSON") from exc
                if not isinstance(payload, dict):
                    raise InvalidRequestBody("JSON request body must be an object")
                for key, value in payload.items():
                    if isinstance(value, bool) or value is None:
                        continue
                    if isinstance(value, (str, int, float)):
                        params[key] = str(value)
        return params

    def send_json_response(self, payload: Any, status_code: int) -> JSONResponse:
        return JSONResponse(status_code=status_code, content=jsonable_encoder(payload))

    def send_error_response(self, status_code: int, message: str) -> JSONResponse:
        error = ErrorResponse(status=status_code, message=message)
        return self.send_json_response(error, status_code)

    def send_no_content(self) -> Response:
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @staticmethod
    def extract_resource_id(path_info: Optional[str]) -> Optional[str]:
        """Return the first segment of ``path_info``; ``/DEAL-001`` yields ``DEAL-001``."""

        if not path_info or path_info == "/":
            return None
        trimmed = path_info[1:] if path_info.startswith("/") else path_info
        first = trimmed.split("/")[0]
        return first or None

    async def do_get(self, request: Request, path_info: Optional[str]) -> Response:
        return self._method_not_allowed(request)

    async def do_post(self, request: Request, path_info: Optional[str]) -> Response:
        return self._method_not_allowed(request)

    async def do_put(self, request: Request, path_info: Optional[str]) -> Response:
        return self._method_not_allowed(request)

    async def do_delete(self, request: Request, path_info: Optional[str]) -> Response:
        return self._method_not_allowed(request)

    async def dispatch(self, request: Request, path_info: Optional[str]) -> Response:
        handlers: Dict[str, Callable[[Request, Optional[str]], Awaitable[Response]]] = {
            "GET": self.do_get,
            "POST": self.do_post,
            "PUT": self.do_put,
            "DELETE": self.do_delete,
        }
        handler = handlers.get(request.method.upper())
        if handler is None:
            response = self._method_not_allowed(request)
        else:
            try:
                response = await handler(request, path_info)
            except InvalidRequestBody as exc:
                response = self.send_error_response(status.HTTP_400_BAD_REQUEST, str(exc))

        if response.status_code >= 400:
            logger.info("%s %s -> %s", request.method, request.url.path, response.status_code)
        return response

    def router(self) -> APIRouter:
        """Build a router sending collection and item requests through :meth:`dispatch`."""

        router = APIRouter()

        async def collection(request: Request) -> Response:
            return await self.dispatch(request, None)

        async def item(request: Request, path_info: str) -> Response:
            return await self.dispatch(request, "/" + path_info)

        router.add_api_route(self.base_path, collection, methods=_ROUTED_METHODS)
        router.add_api_route(f"{self.base_path}/{{path_info:path}}", item, methods=_ROUTED_METHODS)
        return router

    def _method_not_allowed(self, request: Request) -> JSONResponse:
        return self.send_error_response(
            status.HTTP_405_METHOD_NOT_ALLOWED,
            f"Method {request.method} is not supported on {self.base_path}",
        )


class StoreController(BaseController):
    """REST endpoints for stores: ``/stores`` and ``/stores/{storeId}``."""

    base_path = "/stores"

    def __init__(
        self,
        store_service: StoreService,
        authentication_service: Optional[AuthenticationService] = None,
    ) -> None:
        self._stores = store_service
        self._auth = authentication_service

    def _caller(self, request: Request) -> Optional[User]:
        if self._auth is None:
            return None
        return self._auth.authenticate_basic(request.headers.get("authorization"))

    async def do_get(self, request: Request, path_info: Optional[str]) -> Response:
        store_id = self.extract_resource_id(path_info)
        try:
            if store_id is None:
                stores = self._stores.get_all_stores()
                return self.send_json_response(stores_to_dto_list(stores), status.HTTP_200_OK)
            store = self._stores.show_store(store_id, self._caller(request))
            return self.send_json_response(store_to_dto(store), status.HTTP_200_OK)
        except StoreError as exc:
            return self.send_error_response(status.HTTP_400_BAD_REQUEST, exc.message)

    async def do_post(self, request: Request, path_info: Optional[str]) -> Response:
        params = await self.read_parameters(request)
        store_id = params.get("storeId")
        address = params.get("address")
        description = params.get("description")
        # "name" is the older spelling of "description"
        if _is_blank(description):
            description = params.get("name")

        if _is_blank(store_id):
            return self.send_error_response(status.HTTP_400_BAD_REQUEST, "storeId is required")

        try:
            store = self._stores.provision_store(store_id, description, address, self._caller(request))
        except StoreError as exc:
            return self.send_error_response(status.HTTP_400_BAD_REQUEST, exc.message)
        return self.send_json_response(store_to_dto(store), status.HTTP_201_CREATED)

    async def do_put(self, request: Request, path_info: Optional[str]) -> Response:
        store_id = self.extract_resource_id(path_info)
        if _is_blank(store_id):
            return self.send_error_response(
                status.HTTP_400_BAD_REQUEST, "storeId is required in the path"
            )

        params = await self.read_parameters(request)
        try:
            updated = self._stores.update_store(
                store_id, params.get("description"), params.get("address")
            )
        except StoreError as exc:
            return self.send_error_response(status.HTTP_400_BAD_REQUEST, exc.message)
        return self.send_json_response(store_to_dto(updated), status.HTTP_200_OK)

    async def do_delete(self, request: Request, path_info: Optional[str]) -> Response:
        store_id = self.extract_resource_id(path_info)
        if _is_blank(store_id):
            return self.send_error_response(
                status.HTTP_400_BAD_REQUEST, "storeId is required in the path"
            )

        try:
            self._stores.delete_store(store_id)
        except StoreError as exc:
            return self.send_error_response(status.HTTP_400_BAD_REQUEST, exc.message)
        return self.send_no_content()


class UserController(BaseController):
    """REST endpoints for users. Responses never include passwords."""

    base_path = "/users"

    def __init__(self, authentication_service: AuthenticationService) -> None:
        self._auth = authentication_service

    async def do_get(self, request: Request, path_info: Optional[str]) -> Response:
        email = self.extract_resource_id(path_info)
        if email is None:
            users = self._auth.get_all_users()
            return self.send_json_response(users_to_dto_list(users), status.HTTP_200_OK)

        user = self._auth.get_user_by_email(email)
        if user is None:
            return self.send_error_response(status.HTTP_404_NOT_FOUND, f"User not found: {email}")
        return self.send_json_response(user_to_dto(user), status.HTTP_200_OK)

    async def do_post(self, request: Request, path_info: Optional[str]) -> Response:
        params = await self.read_parameters(request)
        email = params.get("email")
        password = params.get("password")
        name = params.get("name")
        role_param = params.get("role")

        if _is_blank(email) or _is_blank(password):
            return self.send_error_response(
                status.HTTP_400_BAD_REQUEST, "email and password are required"
            )

        if self._auth.user_exists(email):
            return self.send_error_response(status.HTTP_409_CONFLICT, f"User already exists: {email}")

        role = UserRole.USER
        if not _is_blank(role_param):
            parsed = parse_role(role_param)
            if parsed is None:
                return self.send_error_response(
                    status.HTTP_400_BAD_REQUEST, f"Invalid role: {role_param}"
                )
            role = parsed

        try:
            user = self._auth.register_user(email, password, name, role)
        except ValueError as exc:
            return self.send_error_response(status.HTTP_400_BAD_REQUEST, str(exc))
        return self.send_json_response(user_to_dto(user), status.HTTP_201_CREATED)

    async def do_put(self, request: Request, path_info: Optional[str]) -> Response:
        email = self.extract_resource_id(path_info)
        if _is_blank(email):
            return self.send_error_response(
                status.HTTP_400_BAD_REQUEST, "email is required in the path"
            )

        params = await self.read_parameters(request)
        new_password = params.get("password")
        new_name = params.get("name")
        if _is_blank(new_password) and _is_blank(new_name):
            return self.send_error_response(status.HTTP_400_BAD_REQUEST, "Nothing to update")

        updated = self._auth.update_user(email, new_password, new_name)
        if updated is None:
            return self.send_error_response(status.HTTP_404_NOT_FOUND, f"User not found: {email}")
        return self.send_json_response(user_to_dto(updated), status.HTTP_200_OK)

    async def do_delete(self, request: Request, path_info: Optional[str]) -> Response:
        email = self.extract_resource_id(path_info)
        if _is_blank(email):
            return self.send_error_response(
                status.HTTP_400_BAD_REQUEST, "email is required in the path"
            )

        if not self._auth.delete_user(email):
            return self.send_error_response(status.HTTP_404_NOT_FOUND, f"User not found: {email}")
        return self.send_no_content()


__all__ = ["BaseController", "InvalidRequestBody", "StoreController", "UserController"]
