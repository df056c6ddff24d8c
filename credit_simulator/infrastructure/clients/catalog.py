"""Product catalog HTTP client (hosted backend REST interface)"""

import httpx
import math
import logging
from typing import Any, Dict, List, Optional
from credit_simulator.domain.models import CreditProduct, CreditType
from credit_simulator.domain.exceptions import CatalogAPIError
from credit_simulator.config import settings

CATALOG_TABLES = {
    CreditType.MORTGAGE: "creditos_hipotecarios",
    CreditType.PERSONAL: "creditos_personales",
    CreditType.COLLATERALIZED: "creditos_prendarios",
}

# Family-specific column names; terms are normalised to months below
FAMILY_COLUMNS = {
    CreditType.MORTGAGE: {
        "name": "nombre_corto_del_prestamo_hipotecario",
        "max_amount": "monto_maximo_otorgable_del_prestamo",
        "min_amount": None,
        "max_term": "plazo_maximo_otorgable",
        "max_age": "edad_maxima_solicitada_anos",
        "max_ltv": "relacion_monto_tasacion",
        "reference_payment": "cuota_inicial_a_plazo_maximo_cada_100_000",
    },
    CreditType.PERSONAL: {
        "name": "nombre_corto_del_prestamo_personal",
        "max_amount": "monto_maximo_otorgable",
        "min_amount": "monto_minimo_otorgable",
        "max_term": "plazo_maximo_otorgable_anos",
        "max_age": "edad_maxima_solicitada",
        "max_ltv": None,
        "reference_payment": "cuota_inicial_a_plazo_maximo_cada_10_000",
    },
    CreditType.COLLATERALIZED: {
        "name": "nombre_corto_del_prestamo_prendario",
        "max_amount": "monto_maximo_otorgable",
        "min_amount": "monto_minimo_otorgable",
        "max_term": "plazo_maximo_otorgable_meses",
        "max_age": "edad_maxima_solicitada_anos",
        "max_ltv": "relacion_monto_tasacion",
        "reference_payment": "cuota_inicial_a_plazo_maximo_cada_10_000",
    },
}


def _to_float(value: Any) -> Optional[float]:
    """Lenient numeric parse: missing, malformed or non-finite values become None"""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _column(row: Dict[str, Any], column: Optional[str]) -> Optional[float]:
    return _to_float(row.get(column)) if column else None


def parse_product_row(family: CreditType, row: Dict[str, Any]) -> CreditProduct:
    """Map a raw catalog row onto a CreditProduct without validating it"""
    columns = FAMILY_COLUMNS[family]

    max_term = _column(row, columns["max_term"])
    if max_term is not None and family == CreditType.PERSONAL:
        max_term *= 12  # personal loans quote the term in years

    institution_code = _to_float(row.get("codigo_de_entidad"))

    return CreditProduct(
        id=str(row.get("id", "")),
        family=family,
        institution_code=int(institution_code) if institution_code is not None else None,
        institution_name=row.get("descripcion_de_entidad") or "",
        name=row.get(columns["name"]) or "",
        denomination=row.get("denominacion"),
        min_income=_to_float(row.get("ingreso_minimo_mensual_solicitado")),
        min_tenure_months=_to_float(row.get("antiguedad_laboral_minima_meses")),
        max_payment_to_income=_to_float(row.get("relacion_cuota_ingreso")),
        max_annual_rate=_to_float(row.get("tasa_efectiva_anual_maxima")),
        max_total_financial_cost=_to_float(row.get("costo_financiero_efectivo_total_maximo")),
        max_amount=_column(row, columns["max_amount"]),
        min_amount=_column(row, columns["min_amount"]),
        max_term_months=int(max_term) if max_term is not None else None,
        max_age=_column(row, columns["max_age"]),
        max_ltv=_column(row, columns["max_ltv"]),
        reference_payment=_column(row, columns["reference_payment"]),
        reference_amount=100_000 if family == CreditType.MORTGAGE else 10_000,
        beneficiaries=row.get("beneficiarios"),
        fund_destination=row.get("destino_de_los_fondos"),
    )


def parse_product_rows(family: CreditType, rows: List[Any]) -> List[CreditProduct]:
    """Map every usable row; rows that are not objects are logged and dropped"""
    products = []
    for index, row in enumerate(rows):
        if not isinstance(row, dict):
            logging.warning(
                "Dropping malformed catalog row",
                extra={"family": family.value, "row_index": index},
            )
            continue
        products.append(parse_product_row(family, row))
    return products


class CatalogClient:
    """Client for the loan product catalog, one table per product family"""

    def __init__(self, base_url: str | None = None, api_key: str | None = None, timeout: float | None = None):
        self.base_url = base_url or settings.catalog_api_base
        self.api_key = api_key if api_key is not None else settings.catalog_api_key
        self.timeout = timeout or settings.http_timeout_seconds

    def _headers(self) -> Dict[str, str]:
        if not self.api_key:
            return {}
        return {"apikey": self.api_key, "Authorization": f"Bearer {self.api_key}"}

    async def get_products(self, family: CreditType) -> List[CreditProduct]:
        """
        Fetch every product of a family.

        Raises:
            CatalogAPIError: On timeout, HTTP errors, or a non-list response
        """
        table = CATALOG_TABLES[family]
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                response = await client.get(
                    f"{self.base_url}/rest/v1/{table}",
                    params={"select": "*"},
                    headers=self._headers(),
                )
                response.raise_for_status()
                rows = response.json()
                if not isinstance(rows, list):
                    raise ValueError(f"expected a list of rows, got {type(rows).__name__}")

                return parse_product_rows(family, rows)

            except httpx.TimeoutException as e:
                raise CatalogAPIError(f"Catalog timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise CatalogAPIError(f"Catalog error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise CatalogAPIError(f"Catalog unreachable: {e}") from e
            except (AttributeError, ValueError, TypeError) as e:
                raise CatalogAPIError(f"Invalid catalog data for {table}: {e}") from e
