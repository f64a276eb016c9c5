"""Pydantic models for blingproxy API responses."""

from pydantic import BaseModel


class ProdutoResponse(BaseModel):
    """Normalized product with its stock balance.

    Unset fields are left out of the JSON body, so the compact field set
    only carries ``nome``, ``gtin``, ``estoque`` and ``imagem``.
    """

    id: int | str | None = None
    nome: str | None = None
    sku: str | None = None
    gtin: str | None = None
    estoque: int | float = 0
    imagem: str = ""


class ErroResponse(BaseModel):
    """Error body returned for 404 and 500 answers."""

    erro: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str
