"""
Profitability Annotator

Profitability is a balance-unit level value; it is stored on every row of
the unit so that each catalog row carries it.
"""
import logging
from typing import Any, Optional

from materials_exchange.core.exceptions import InvalidQueryError
from materials_exchange.services.catalog.values import parse_locale_number
from materials_exchange.services.store.base import RecordStore

logger = logging.getLogger(__name__)


class ProfitabilityAnnotator:
    """Propagates one profitability value across a tenant's slice"""

    def __init__(self, store: RecordStore):
        self.store = store

    def set_profitability(self, tenant_key: str, value: Any) -> int:
        """
        Write ``value`` to every record of ``tenant_key``.

        The value is read as a locale number ("12,5" is 12.5); anything that
        does not parse is stored as null. Returns the number of rows touched.
        """
        tenant_key = (tenant_key or "").strip()
        if not tenant_key:
            raise InvalidQueryError("Tenant key is required to set profitability")

        profitability: Optional[float] = parse_locale_number(value)
        if profitability is None and value not in (None, ""):
            logger.warning(f"Profitability {value!r} for {tenant_key} is not a number, clearing it")

        updated = self.store.update_where(tenant_key, {"profitability": profitability})
        logger.info(f"Set profitability of {tenant_key} to {profitability} on {updated} records")
        return updated
