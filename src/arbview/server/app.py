"""
FastAPI demo backend.

Serves the endpoints the dashboard client talks to, backed by a
DemoDataSource, so the terminal dashboard can run against a real HTTP
server without the production backend. Every payload is wrapped as
``{"data": ...}``.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from arbview import __version__
from arbview.api.client import DashboardAPIError
from arbview.api.demo import DemoDataSource
from arbview.api.models import SETTINGS_MODELS, AddWalletRequest
from arbview.config.constants import (
    API_PREFIX,
    ENDPOINT_ALERT_ACKNOWLEDGE,
    ENDPOINT_ALERT_RESOLVE,
    ENDPOINT_ALERT_RULE_TOGGLE,
    ENDPOINT_ALERT_RULES,
    ENDPOINT_ALERT_STATS,
    ENDPOINT_ALERTS_ACTIVE,
    ENDPOINT_DASHBOARD_SUMMARY,
    ENDPOINT_NETWORKS,
    ENDPOINT_OPPORTUNITIES,
    ENDPOINT_SETTINGS,
    ENDPOINT_TRANSACTION_HISTORY,
    ENDPOINT_TRANSACTION_STATS,
    ENDPOINT_WALLETS_ADD,
    ENDPOINT_WALLETS_LIST,
)


logger = logging.getLogger(__name__)


class ToggleRequest(BaseModel):
    enabled: bool


def _dump(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True)
    if isinstance(value, list):
        return [_dump(item) for item in value]
    return value


def wrap(value: Any) -> dict[str, Any]:
    """Wrap a payload in the backend's ``data`` envelope."""
    return {"data": _dump(value)}


def _source(request: Request) -> DemoDataSource:
    return request.app.state.source  # type: ignore[no-any-return]


def _settings_model(section: str) -> type[BaseModel]:
    if section not in SETTINGS_MODELS:
        raise HTTPException(status_code=404, detail=f"Unknown settings section: {section}")
    return SETTINGS_MODELS[section]


router = APIRouter(prefix=API_PREFIX)


@router.get(ENDPOINT_DASHBOARD_SUMMARY)
async def get_dashboard_summary(request: Request) -> dict[str, Any]:
    return wrap(await _source(request).get_dashboard_summary())


@router.get(ENDPOINT_OPPORTUNITIES)
async def get_opportunities(request: Request) -> dict[str, Any]:
    return wrap(await _source(request).get_opportunities())


@router.get(ENDPOINT_NETWORKS)
async def get_networks(request: Request) -> dict[str, Any]:
    return wrap(await _source(request).get_networks())


@router.get(ENDPOINT_TRANSACTION_STATS)
async def get_transaction_stats(request: Request) -> dict[str, Any]:
    return wrap(await _source(request).get_transaction_stats())


@router.get(ENDPOINT_TRANSACTION_HISTORY)
async def get_transaction_history(request: Request) -> dict[str, Any]:
    return wrap(await _source(request).get_transaction_history())


@router.get(ENDPOINT_ALERT_STATS)
async def get_alert_stats(request: Request) -> dict[str, Any]:
    return wrap(await _source(request).get_alert_stats())


@router.get(ENDPOINT_ALERTS_ACTIVE)
async def get_active_alerts(request: Request) -> dict[str, Any]:
    return wrap(await _source(request).get_active_alerts())


@router.get(ENDPOINT_ALERT_RULES)
async def get_alert_rules(request: Request) -> dict[str, Any]:
    return wrap(await _source(request).get_alert_rules())


@router.post(ENDPOINT_ALERT_ACKNOWLEDGE)
async def acknowledge_alert(alert_id: str, request: Request) -> dict[str, Any]:
    await _source(request).acknowledge_alert(alert_id)
    return wrap({"id": alert_id, "status": "acknowledged"})


@router.post(ENDPOINT_ALERT_RESOLVE)
async def resolve_alert(alert_id: str, request: Request) -> dict[str, Any]:
    await _source(request).resolve_alert(alert_id)
    return wrap({"id": alert_id, "status": "resolved"})


@router.post(ENDPOINT_ALERT_RULE_TOGGLE)
async def toggle_alert_rule(rule_id: str, body: ToggleRequest, request: Request) -> dict[str, Any]:
    await _source(request).toggle_alert_rule(rule_id, body.enabled)
    return wrap({"id": rule_id, "enabled": body.enabled})


@router.get(ENDPOINT_WALLETS_LIST)
async def get_wallets(request: Request) -> dict[str, Any]:
    return wrap(await _source(request).get_wallets())


@router.post(ENDPOINT_WALLETS_ADD)
async def add_wallet(body: AddWalletRequest, request: Request) -> dict[str, Any]:
    return wrap(await _source(request).add_wallet(body))


@router.get(ENDPOINT_SETTINGS)
async def get_settings_section(section: str, request: Request) -> dict[str, Any]:
    _settings_model(section)
    return wrap(await _source(request).get_settings(section))


@router.post(ENDPOINT_SETTINGS)
async def save_settings_section(section: str, request: Request) -> dict[str, Any]:
    model = _settings_model(section)
    try:
        payload = model.model_validate(await request.json())
    except ValueError as e:
        raise HTTPException(status_code=422, detail=f"Invalid {section} settings") from e
    await _source(request).save_settings(section, payload)  # type: ignore[arg-type]
    return wrap(payload)


async def _api_error_handler(request: Request, exc: DashboardAPIError) -> JSONResponse:
    message = str(exc).split(": ", 1)[-1]
    return JSONResponse(status_code=exc.status or 500, content={"message": message})


async def _http_error_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)})


def create_app(source: DemoDataSource | None = None, seed: int | None = None) -> FastAPI:
    """
    Build the demo backend.

    Args:
        source: Data source to serve; a new DemoDataSource when None.
        seed: Seed for the new DemoDataSource.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):  # type: ignore[no-untyped-def]
        logger.info("Demo backend ready")
        yield
        await app.state.source.close()

    app = FastAPI(title="ArbView Demo Backend", version=__version__, lifespan=lifespan)
    app.state.source = source or DemoDataSource(seed=seed)
    app.include_router(router)
    app.add_exception_handler(DashboardAPIError, _api_error_handler)
    app.add_exception_handler(HTTPException, _http_error_handler)
    return app


def main() -> None:
    import uvicorn

    from arbview.config.settings import get_settings
    from arbview.telemetry.logger import setup_logging

    settings = get_settings()
    async_logger = setup_logging(settings.log_level, settings.log_file)

    print(
        f"""
╔═══════════════════════════════════════════════════════════════╗
║              ARBVIEW - DEMO BACKEND                           ║
╚═══════════════════════════════════════════════════════════════╝

API: http://{settings.server_host}:{settings.server_port}{API_PREFIX}
Press Ctrl+C to stop.
    """
    )
    try:
        uvicorn.run(
            create_app(seed=settings.demo_seed),
            host=settings.server_host,
            port=settings.server_port,
            log_level="warning",
        )
    finally:
        async_logger.stop()


if __name__ == "__main__":
    main()
