"""
Secret extension HTTP service — FastAPI app the CI server calls.

Endpoints:
  POST /          resolve a secret request (shared-secret bearer auth)
  GET  /healthz   liveness

Any resolution failure answers 404 with the error text as body; the CI
server treats a non-200 as "secret not available".

Start:
  opsecret serve
  # or
  uvicorn opsecret.api.server:create_app --factory --port 3000
"""

from __future__ import annotations

import hmac
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import PlainTextResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from opsecret import __version__
from opsecret.config import Config, get_config
from opsecret.errors import OpSecretError
from opsecret.resolver import SecretResolver
from opsecret.vault.client import ConnectClient
from opsecret.vault.models import Secret, SecretRequest

logger = logging.getLogger(__name__)

_bearer = HTTPBearer(auto_error=False)


def create_app(config: Config | None = None, resolver: SecretResolver | None = None) -> FastAPI:
    """Build the service app.

    When ``resolver`` is not given, a ConnectClient is opened on startup from
    ``config.connect`` and closed on shutdown.
    """
    config = config or get_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if app.state.resolver is not None:
            yield
            return
        async with ConnectClient(
            config.connect.host,
            config.connect.token,
            timeout=config.connect.timeout,
        ) as client:
            app.state.resolver = SecretResolver(client, logger=logging.getLogger("opsecret.resolver"))
            logger.info("1Password Connect client ready: %s", client.base_url)
            yield

    app = FastAPI(
        title="opsecret",
        description="Resolves CI secret requests from 1Password Connect.",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.resolver = resolver

    def require_shared_secret(
        credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    ) -> None:
        """Reject requests that do not present the configured shared secret."""
        presented = credentials.credentials if credentials else ""
        if not config.secret or not hmac.compare_digest(
            presented.encode(), config.secret.encode()
        ):
            logger.warning("rejected secret request: invalid or missing credentials")
            raise HTTPException(status_code=401, detail="invalid or missing credentials")

    @app.get("/healthz")
    async def healthz():
        return {"status": "ok", "version": __version__}

    @app.post("/", response_model=Secret, dependencies=[Depends(require_shared_secret)])
    async def find_secret(body: SecretRequest, request: Request):
        resolver: SecretResolver = request.app.state.resolver
        try:
            return await resolver.resolve(body)
        except OpSecretError as e:
            return PlainTextResponse(str(e), status_code=404)

    return app
