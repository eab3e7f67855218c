"""
Cliente da API de catálogo e logística da VTEX
"""
import time
import logging
import requests
from typing import Dict, List, Optional, Any

from app.config.settings import settings
from app.utils.sync_logger import get_sync_logger

logger = logging.getLogger(__name__)


class VtexApiError(Exception):
    """Resposta de erro da API VTEX"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class VtexService:
    """Serviço para integração com a API da VTEX"""

    def __init__(self, account: Optional[str] = None, app_key: Optional[str] = None,
                 app_token: Optional[str] = None, environment: Optional[str] = None):
        self.account = account or settings.vtex_account
        self.environment = environment or settings.vtex_environment
        self.app_key = app_key or settings.vtex_app_key
        self.app_token = app_token or settings.vtex_app_token
        self.timeout = settings.vtex_timeout
        self.base_url = f"https://{self.account}.{self.environment}.com.br" if self.account else None

    def is_configured(self) -> bool:
        return bool(self.account and self.app_key and self.app_token)

    def _headers(self) -> Dict[str, str]:
        return {
            "X-VTEX-API-AppKey": self.app_key,
            "X-VTEX-API-AppToken": self.app_token,
            "Accept": "application/json",
            "Content-Type": "application/json"
        }

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Optional[Any]:
        """GET autenticado; 404 retorna None, demais erros levantam VtexApiError"""
        if not self.is_configured():
            raise VtexApiError("Credenciais VTEX não configuradas (VTEX_ACCOUNT, VTEX_APP_KEY, VTEX_APP_TOKEN)")

        url = f"{self.base_url}{path}"
        start_time = time.time()
        try:
            response = requests.get(url, headers=self._headers(), params=params, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"❌ Erro de conexão com a VTEX ({path}): {e}")
            raise VtexApiError(f"Erro de conexão com a VTEX: {e}") from e

        elapsed_ms = int((time.time() - start_time) * 1000)
        get_sync_logger().log_api_call("vtex", "GET", path, response.status_code, elapsed_ms)

        if response.status_code == 404:
            logger.warning(f"⚠️ VTEX 404: {path}")
            return None

        if not response.ok:
            logger.error(f"❌ Erro VTEX {response.status_code} em {path}: {response.text[:300]}")
            raise VtexApiError(
                f"Erro na API VTEX: {response.status_code} - {response.text[:300]}",
                status_code=response.status_code
            )

        if not response.content:
            return None
        return response.json()

    # Catálogo

    def get_product_by_ref_id(self, ref_id: str) -> Optional[Dict[str, Any]]:
        """Busca produto pelo RefId (código de referência)"""
        return self._get(f"/api/catalog_system/pvt/products/productgetbyrefid/{ref_id}")

    def get_skus_by_product_id(self, product_id: int) -> List[Dict[str, Any]]:
        """Lista SKUs de um produto"""
        return self._get(f"/api/catalog_system/pvt/sku/stockkeepingunitByProductId/{product_id}") or []

    def get_sku_images(self, sku_id: int) -> List[Dict[str, Any]]:
        """Lista arquivos (imagens) de um SKU"""
        return self._get(f"/api/catalog/pvt/stockkeepingunit/{sku_id}/file") or []

    def get_product_specifications(self, product_id: int) -> List[Dict[str, Any]]:
        """Especificações (campos/valores) de um produto"""
        return self._get(f"/api/catalog_system/pvt/products/{product_id}/specification") or []

    def get_brand_list(self) -> List[Dict[str, Any]]:
        return self._get("/api/catalog_system/pvt/brand/list") or []

    def get_category(self, category_id: int) -> Optional[Dict[str, Any]]:
        return self._get(f"/api/catalog/pvt/category/{category_id}", params={"includeTreePath": "true"})

    def get_category_tree(self, levels: int = 0) -> List[Dict[str, Any]]:
        return self._get(f"/api/catalog_system/pvt/category/tree/{levels}") or []

    # Logística

    def get_sku_inventory(self, sku_id: int) -> Optional[Dict[str, Any]]:
        """Saldo de estoque do SKU em todos os warehouses"""
        return self._get(f"/api/logistics/pvt/inventory/skus/{sku_id}")
