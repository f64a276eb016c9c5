"""Product lookup: resolve a GTIN/SKU to a product and its stock balance."""

import logging
from typing import Any

from blingproxy.models import ProdutoResponse
from blingproxy.services.bling import BlingClient

logger = logging.getLogger(__name__)

#: Balance fields in order of preference; the first non-null one wins.
BALANCE_FIELDS = ("saldoVirtualTotal", "saldoVirtual", "saldo")
THUMBNAIL_MARKER = "miniatura"

COMPACT_FIELDS = {"nome", "gtin", "estoque", "imagem"}


def resolve_balance(record: dict | None) -> int | float:
    """Pick the stock quantity from a Bling balance record, defaulting to 0."""
    if not record:
        return 0
    return next((record[field] for field in BALANCE_FIELDS if record.get(field) is not None), 0)


def clean_image_url(url: str | None) -> str:
    """Turn a Bling thumbnail URL into the full-size image URL.

    The first ``miniatura`` marker is removed.  When it is a whole path
    segment the surrounding slashes collapse to one.
    """
    if not url:
        return ""
    start = url.find(THUMBNAIL_MARKER)
    if start == -1:
        return url
    end = start + len(THUMBNAIL_MARKER)
    if url[start - 1 : start] == "/" and url[end : end + 1] == "/":
        end += 1
    return url[:start] + url[end:]


async def find_product(
    client: BlingClient,
    codigo: str,
    *,
    sku_fallback: bool = True,
    limit: int = 1,
) -> dict | None:
    """Return the first product matching *codigo* by GTIN, then (optionally) by SKU."""
    products = await client.search_by_gtin(codigo, limit=limit)
    if not products and sku_fallback:
        logger.debug("No GTIN match for %s, trying SKU", codigo)
        products = await client.search_by_code(codigo, limit=limit)
    return products[0] if products else None


async def lookup_product(
    client: BlingClient,
    codigo: str,
    *,
    deposit_id: str | None = None,
    sku_fallback: bool = True,
    limit: int = 1,
    fields: str = "full",
) -> ProdutoResponse | None:
    """Resolve *codigo* to a normalized product with its stock.

    Returns ``None`` when neither search finds a product; the stock endpoint
    is not queried in that case.
    """
    produto = await find_product(client, codigo, sku_fallback=sku_fallback, limit=limit)
    if produto is None:
        return None

    balances = await client.get_stock_balances(produto.get("id"), deposit_id)
    values: dict[str, Any] = {
        "id": produto.get("id"),
        "nome": produto.get("nome"),
        "sku": produto.get("codigo"),
        "gtin": produto.get("gtin"),
        "estoque": resolve_balance(balances[0] if balances else None),
        "imagem": clean_image_url(produto.get("imagemURL")),
    }
    if fields == "compact":
        values = {key: value for key, value in values.items() if key in COMPACT_FIELDS}
    return ProdutoResponse(**values)
