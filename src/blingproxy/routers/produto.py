"""Product lookup endpoint."""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from blingproxy.config import Settings, get_settings
from blingproxy.models import ErroResponse, ProdutoResponse
from blingproxy.services import lookup as lookup_service
from blingproxy.services.bling import BlingAPIError, BlingClient

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Produto não encontrado"
UPSTREAM_ERROR_MESSAGE = "Erro ao consultar Bling"

router = APIRouter()


def get_bling_client(request: Request) -> BlingClient:
    """Return the Bling client created at application startup."""
    return request.app.state.bling


@router.get(
    "/{codigo}",
    response_model=ProdutoResponse,
    response_model_exclude_unset=True,
    responses={404: {"model": ErroResponse}, 500: {"model": ErroResponse}},
)
async def get_produto(
    codigo: str,
    client: BlingClient = Depends(get_bling_client),
    settings: Settings = Depends(get_settings),
):
    """Look up a product by GTIN (falling back to SKU) with its stock balance.

    Returns 404 when no product matches and a generic 500 when Bling cannot
    be queried; upstream details are only logged.
    """
    try:
        produto = await lookup_service.lookup_product(
            client,
            codigo,
            deposit_id=settings.bling_id_deposito,
            sku_fallback=settings.bling_sku_fallback,
            limit=settings.bling_gtin_limit,
            fields=settings.response_fields,
        )
    except BlingAPIError as e:
        logger.error("Bling error for %s: HTTP %d %s", codigo, e.status_code, e.payload)
        return _erro(500, UPSTREAM_ERROR_MESSAGE)
    except Exception as e:  # noqa: BLE001
        logger.error("Bling error for %s: %s", codigo, e)
        return _erro(500, UPSTREAM_ERROR_MESSAGE)

    if produto is None:
        return _erro(404, NOT_FOUND_MESSAGE)
    return produto


def _erro(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErroResponse(erro=message).model_dump())
