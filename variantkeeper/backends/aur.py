"""
AUR RPC variant source.
"""

from __future__ import annotations

from typing import Any, Dict, List
from urllib.parse import quote

from variantkeeper.utils.http import HTTPClient
from variantkeeper.utils.logger import get_logger
from variantkeeper.exceptions import AURError, NetworkError
from variantkeeper.constants import AUR_RPC_SEARCH
from variantkeeper.models.source import AUR
from variantkeeper.models.variant import Variant
from variantkeeper.backends.naming import base_name, matches_identity

logger = get_logger("aur")


class AURClient:
    """Lists AUR packages for an identity using the RPC search endpoint.

    Args:
        http: Shared HTTP client; the caller owns its lifetime.
    """

    def __init__(self, http: HTTPClient) -> None:
        self.http = http

    async def list_variants(self, name: str) -> List[Variant]:
        query = base_name(name)
        url = AUR_RPC_SEARCH.format(query=quote(query, safe=""))

        try:
            data = await self.http.get_json(url)
        except NetworkError as exc:
            raise AURError(
                f"AUR search for {query} failed: {exc.message}",
                package_name=name,
                url=url,
                status_code=exc.status_code,
            ) from exc

        if data.get("type") == "error":
            raise AURError(
                f"AUR rejected search for {query}: {data.get('error', 'unknown error')}",
                package_name=name,
                url=url,
            )

        return self._parse_results(name, data)

    @staticmethod
    def _parse_results(name: str, data: Dict[str, Any]) -> List[Variant]:
        variants: List[Variant] = []
        for result in data.get("results") or []:
            if not isinstance(result, dict):
                continue
            package_name = result.get("Name")
            if not matches_identity(package_name, name):
                continue
            variants.append(
                Variant(AUR, result.get("Version"), package_name=package_name)
            )

        logger.debug("AUR lists %d variant(s) of %s", len(variants), name)
        return variants
