"""
Controller do catálogo VTEX: importações, estoque e consultas
"""
import logging
from typing import Optional, List, Dict, Any
from fastapi import HTTPException
from sqlalchemy.orm import Session

from app.services.catalog_import_service import CatalogImportService
from app.services.catalog_service import CatalogService
from app.services.stock_import_service import StockImportService

logger = logging.getLogger(__name__)


class CatalogController:
    """Controller para importação e consulta do catálogo"""

    def _handle(self, action: str, fn) -> Dict[str, Any]:
        try:
            result = fn()
            if "error" in result:
                raise HTTPException(status_code=result.get("status_code", 400), detail=result["error"])
            return result
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Erro no controller ao {action}: {str(e)}")
            raise HTTPException(status_code=500, detail="Erro interno do servidor")

    # Importações

    def import_product(self, ref_id: str, db: Session) -> Dict[str, Any]:
        return self._handle("importar produto", lambda: CatalogImportService(db).import_product_by_ref_id(ref_id))

    def import_brand(self, brand_id: int, db: Session) -> Dict[str, Any]:
        return self._handle("importar marca", lambda: CatalogImportService(db).import_brand_by_id(brand_id))

    def import_category(self, category_id: int, db: Session) -> Dict[str, Any]:
        return self._handle("importar categoria", lambda: CatalogImportService(db).import_category_by_id(category_id))

    def import_category_tree(self, levels: int, db: Session) -> Dict[str, Any]:
        return self._handle("importar árvore de categorias", lambda: CatalogImportService(db).import_category_tree(levels))

    def import_skus(self, product_id: int, db: Session) -> Dict[str, Any]:
        return self._handle("importar SKUs", lambda: CatalogImportService(db).import_skus_by_product_id(product_id))

    def import_images(self, sku_id: int, db: Session) -> Dict[str, Any]:
        return self._handle("importar imagens", lambda: CatalogImportService(db).import_images_by_sku_id(sku_id))

    def import_specifications(self, product_id: int, db: Session) -> Dict[str, Any]:
        return self._handle(
            "importar especificações",
            lambda: CatalogImportService(db).import_product_specifications(product_id)
        )

    def batch_import(self, ref_ids: Optional[List[Any]], db: Session) -> Dict[str, Any]:
        if not ref_ids or not isinstance(ref_ids, list):
            raise HTTPException(status_code=400, detail="Lista de RefIds é obrigatória")
        ref_ids = [str(r).strip() for r in ref_ids if str(r).strip()]
        return self._handle("importar lote", lambda: CatalogImportService(db).batch_import_ref_ids(ref_ids))

    # Estoque

    def import_stock(self, sku_id: int, warehouse: Optional[str], db: Session) -> Dict[str, Any]:
        return self._handle("importar estoque", lambda: StockImportService(db).import_stock_by_sku_id(sku_id, warehouse))

    def import_stock_batch(self, sku_ids: Optional[List[Any]], warehouse: Optional[str], db: Session) -> Dict[str, Any]:
        if not sku_ids or not isinstance(sku_ids, list):
            raise HTTPException(status_code=400, detail="Lista de SKUs é obrigatória")
        return self._handle(
            "importar estoque em lote",
            lambda: StockImportService(db).import_stock_for_skus([int(s) for s in sku_ids], warehouse)
        )

    def import_stock_all(self, warehouse: Optional[str], db: Session) -> Dict[str, Any]:
        return self._handle("atualizar estoque", lambda: StockImportService(db).import_all_active_skus(warehouse))

    # Consultas

    def list_products(self, search: Optional[str], brand_id: Optional[int], category_id: Optional[int],
                      page: int, limit: int, db: Session) -> Dict[str, Any]:
        return self._handle(
            "listar produtos",
            lambda: CatalogService(db).list_products(search, brand_id, category_id, page, limit)
        )

    def get_product(self, product_id: int, db: Session) -> Dict[str, Any]:
        return self._handle("buscar produto", lambda: CatalogService(db).get_product_details(product_id))

    def list_brands(self, db: Session) -> Dict[str, Any]:
        return self._handle("listar marcas", lambda: CatalogService(db).list_brands())

    def list_categories(self, db: Session) -> Dict[str, Any]:
        return self._handle("listar categorias", lambda: CatalogService(db).list_categories())
