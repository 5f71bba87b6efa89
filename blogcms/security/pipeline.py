"""
Secure route pipeline.

Every API route is a plain async handler plus a ``RoutePolicy``. The
pipeline wraps the handler in a Starlette endpoint that runs, in order:

1. authenticate (identity collaborator, fail closed),
2. rate limit (rate-limit collaborator),
3. validate query, body and path params against the policy's schema,
4. invoke ``handler(context, meta)``,

and turns any failure along the way into the normalized error response.
Stages 1-3 never let a rejected request reach the handler.

Example:
    >>> pipeline = SecureRoutePipeline(default_registry(), TokenIdentityProvider(), SlowapiRateLimiter())
    >>> router = APIRouter(prefix="/api/admin/sections")
    >>> secure = SecureRouter(pipeline, router)
    >>> @secure.post("", preset="admin", validation={"body": {...}})
    ... async def create_section(context: RequestContext, meta: RouteMeta) -> ORJSONResponse: ...
"""

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from logging import getLogger
from typing import Any, TypeAlias

from fastapi import APIRouter
from fastapi.responses import ORJSONResponse
from orjson import JSONDecodeError
from orjson import loads as orjson_loads
from starlette.requests import Request
from starlette.responses import Response
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from blogcms.auth.identity import IdentityProvider
from blogcms.configs import file_logger
from blogcms.errors import (
    AuthenticationError,
    AuthorizationError,
    BaseAppError,
    InternalError,
    MalformedBodyError,
    RateLimitError,
    ValidationError,
    error_response,
    normalize_error,
)
from blogcms.managers.rate_limiter import RateLimiter, rate_limit_key
from blogcms.schemas.auth import Principal
from blogcms.security.presets import AuthRequirement, PolicyRegistry, RoutePolicy
from blogcms.security.schema import Schema, validate
from blogcms.utils.helpers import host

logger = file_logger(getLogger(__name__))

_REQUIRED_ROLE = {
    AuthRequirement.AUTHENTICATED: "user",
    AuthRequirement.ADMIN: "admin",
}


@dataclass(frozen=True, slots=True)
class RequestContext:
    """Validated view of a request handed to route handlers."""

    query: Mapping[str, Any]
    body: Mapping[str, Any]
    params: Mapping[str, Any]
    identity: Principal | None = None


@dataclass(frozen=True, slots=True)
class RouteMeta:
    """Route-level information for handlers that need more than the context."""

    name: str
    method: str
    path: str
    path_params: Mapping[str, str]
    policy: RoutePolicy
    request: Request


Handler: TypeAlias = Callable[[RequestContext, RouteMeta], Awaitable[Any]]
Endpoint: TypeAlias = Callable[[Request], Awaitable[Response]]


class SecureRoutePipeline:
    """Composes authentication, rate limiting and validation around handlers."""

    def __init__(
        self,
        registry: PolicyRegistry,
        identity: IdentityProvider,
        rate_limiter: RateLimiter,
    ) -> None:
        self.registry = registry
        self.identity = identity
        self.rate_limiter = rate_limiter

    def policy(
        self,
        preset: str,
        validation: Schema | Mapping[str, Any] | None = None,
    ) -> RoutePolicy:
        """Resolve a preset from the registry and extend its schema."""
        return self.registry.extend(preset, validation)

    def wrap(self, handler: Handler, policy: RoutePolicy, *, name: str | None = None) -> Endpoint:
        """
        Wrap ``handler`` so every call goes through the pipeline.

        Args:
            handler: ``async (context, meta) -> Response | JSON-able``.
            policy: The route's policy.
            name: Route name, defaults to the handler's name.

        Returns:
            A Starlette endpoint taking only the request.
        """
        route_name = name or handler.__name__

        async def endpoint(request: Request) -> Response:
            return await self.dispatch(handler, policy, request, route_name)

        endpoint.__name__ = route_name
        endpoint.__qualname__ = route_name
        endpoint.__doc__ = handler.__doc__
        return endpoint

    async def dispatch(
        self,
        handler: Handler,
        policy: RoutePolicy,
        request: Request,
        name: str,
    ) -> Response:
        """Run one request through every stage and return the response."""
        try:
            principal = await self._authenticate(request, policy)
            await self._rate_limit(request, policy, principal)
            context = await self._validate(request, policy, principal)
        except BaseAppError as exc:
            return self._reject(request, exc)
        except Exception:
            logger.exception(f"Pipeline stage failed for endpoint {request.url.path}")
            return error_response(normalize_error(InternalError()))

        meta = RouteMeta(
            name=name,
            method=request.method,
            path=request.url.path,
            path_params=dict(request.path_params),
            policy=policy,
            request=request,
        )

        try:
            result = await handler(context, meta)
        except BaseAppError as exc:
            return self._reject(request, exc)
        except Exception:
            logger.exception(f"Unhandled error in {name} for endpoint {request.url.path}")
            return error_response(normalize_error(InternalError()))

        if isinstance(result, Response):
            return result
        return ORJSONResponse(content=result)

    async def _authenticate(self, request: Request, policy: RoutePolicy) -> Principal | None:
        principal = await self.identity.authenticate(request)
        if policy.auth is AuthRequirement.NONE:
            return principal

        if principal is None:
            raise AuthenticationError

        required_role = _REQUIRED_ROLE[policy.auth]
        if not await self.identity.authorize(principal, required_role):
            mssg = f"Insufficient permissions. Required role: {required_role}"
            raise AuthorizationError(mssg)
        return principal

    async def _rate_limit(
        self,
        request: Request,
        policy: RoutePolicy,
        principal: Principal | None,
    ) -> None:
        key = rate_limit_key(request, principal)
        if not await self.rate_limiter.check_and_consume(policy.rate_limit_class, key):
            raise RateLimitError(policy.rate_limit_class)

    async def _validate(
        self,
        request: Request,
        policy: RoutePolicy,
        principal: Principal | None,
    ) -> RequestContext:
        body = await read_json_body(request)
        outcome = validate(
            policy.validation,
            query=dict(request.query_params),
            body=body,
            params=dict(request.path_params),
        )
        if not outcome.ok:
            raise ValidationError(outcome.failures)

        return RequestContext(
            query=outcome.query,
            body=outcome.body,
            params=outcome.params,
            identity=principal,
        )

    def _reject(self, request: Request, exc: BaseAppError) -> Response:
        if exc.status_code >= HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error(
                f"{exc.detail} for ip: {host(request)} for endpoint {request.url.path}",
                exc_info=exc,
            )
        else:
            logger.warning(f"{exc.detail} for ip: {host(request)} for endpoint {request.url.path}")
        return error_response(normalize_error(exc))


async def read_json_body(request: Request) -> Any:
    """
    Decode the request body as JSON.

    Returns:
        The decoded value, or None for an empty body.

    Raises:
        MalformedBodyError: If the body is not valid JSON.
    """
    raw = await request.body()
    if not raw.strip():
        return None
    try:
        return orjson_loads(raw)
    except JSONDecodeError as e:
        raise MalformedBodyError from e


class SecureRouter:
    """Registers pipeline-wrapped handlers on a FastAPI ``APIRouter``."""

    def __init__(self, pipeline: SecureRoutePipeline, router: APIRouter) -> None:
        self.pipeline = pipeline
        self.router = router

    def add(
        self,
        path: str,
        handler: Handler,
        *,
        methods: list[str],
        preset: str,
        validation: Schema | Mapping[str, Any] | None = None,
        summary: str | None = None,
    ) -> RoutePolicy:
        """Wrap ``handler`` with ``preset`` plus ``validation`` and register it."""
        policy = self.pipeline.policy(preset, validation)
        self.router.add_api_route(
            path,
            self.pipeline.wrap(handler, policy),
            methods=methods,
            name=handler.__name__,
            summary=summary,
            response_class=ORJSONResponse,
        )
        return policy

    def route(
        self,
        path: str,
        *,
        methods: list[str],
        preset: str,
        validation: Schema | Mapping[str, Any] | None = None,
        summary: str | None = None,
    ) -> Callable[[Handler], Handler]:
        def decorator(handler: Handler) -> Handler:
            self.add(
                path,
                handler,
                methods=methods,
                preset=preset,
                validation=validation,
                summary=summary,
            )
            return handler

        return decorator

    def get(self, path: str, **kwargs: Any) -> Callable[[Handler], Handler]:
        return self.route(path, methods=["GET"], **kwargs)

    def post(self, path: str, **kwargs: Any) -> Callable[[Handler], Handler]:
        return self.route(path, methods=["POST"], **kwargs)

    def put(self, path: str, **kwargs: Any) -> Callable[[Handler], Handler]:
        return self.route(path, methods=["PUT"], **kwargs)

    def delete(self, path: str, **kwargs: Any) -> Callable[[Handler], Handler]:
        return self.route(path, methods=["DELETE"], **kwargs)
