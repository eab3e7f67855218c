"""
Rotas do catálogo VTEX: importação, estoque e consultas
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.controllers.catalog_controller import CatalogController
from app.models.api_models import VtexImportRequest, StockImportRequest

logger = logging.getLogger(__name__)

catalog_router = APIRouter(tags=["VTEX Catalog"])

catalog_controller = CatalogController()


# Importação

@catalog_router.post("/import/product/{ref_id}")
def import_product(ref_id: str, db: Session = Depends(get_db)):
    """Importa um produto VTEX pelo RefId"""
    return catalog_controller.import_product(ref_id, db)


@catalog_router.post("/import/brand/{brand_id}")
def import_brand(brand_id: int, db: Session = Depends(get_db)):
    return catalog_controller.import_brand(brand_id, db)


@catalog_router.post("/import/category/{category_id}")
def import_category(category_id: int, db: Session = Depends(get_db)):
    return catalog_controller.import_category(category_id, db)


@catalog_router.post("/import/categories")
def import_category_tree(
    levels: int = Query(3, ge=0, le=10, description="Profundidade da árvore de categorias"),
    db: Session = Depends(get_db)
):
    """Importa a árvore de categorias da VTEX"""
    return catalog_controller.import_category_tree(levels, db)


@catalog_router.post("/import/skus/{product_id}")
def import_skus(product_id: int, db: Session = Depends(get_db)):
    return catalog_controller.import_skus(product_id, db)


@catalog_router.post("/import/images/{sku_id}")
def import_images(sku_id: int, db: Session = Depends(get_db)):
    return catalog_controller.import_images(sku_id, db)


@catalog_router.post("/import/specifications/{product_id}")
def import_specifications(product_id: int, db: Session = Depends(get_db)):
    return catalog_controller.import_specifications(product_id, db)


@catalog_router.post("/import/batch")
def batch_import(payload: VtexImportRequest, db: Session = Depends(get_db)):
    """Importação completa (produto, marca, categoria, SKUs, imagens e estoque) por RefId"""
    try:
        return catalog_controller.batch_import(payload.ref_ids, db)
    except HTTPException as e:
        raise e
    except Exception as e:
        logger.error(f"Erro na importação em lote: {str(e)}")
        raise HTTPException(status_code=500, detail="Erro interno do servidor")


# Estoque

@catalog_router.post("/import/stock/{sku_id}")
def import_stock(
    sku_id: int,
    warehouse: Optional[str] = Query(None, description="Nome ou ID do armazém"),
    db: Session = Depends(get_db)
):
    return catalog_controller.import_stock(sku_id, warehouse, db)


@catalog_router.post("/import/stock")
def import_stock_batch(payload: StockImportRequest, db: Session = Depends(get_db)):
    try:
        return catalog_controller.import_stock_batch(payload.sku_ids, payload.warehouse, db)
    except HTTPException as e:
        raise e
    except Exception as e:
        logger.error(f"Erro na importação de estoque: {str(e)}")
        raise HTTPException(status_code=500, detail="Erro interno do servidor")


@catalog_router.post("/import/stock-all")
def import_stock_all(
    warehouse: Optional[str] = Query(None, description="Nome ou ID do armazém"),
    db: Session = Depends(get_db)
):
    """Atualiza o estoque de todos os SKUs ativos"""
    return catalog_controller.import_stock_all(warehouse, db)


# Consultas

@catalog_router.get("/products")
def list_products(
    search: Optional[str] = Query(None, description="Busca por nome, RefId ou título"),
    brand_id: Optional[int] = Query(None, alias="brandId"),
    category_id: Optional[int] = Query(None, alias="categoryId"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=200),
    db: Session = Depends(get_db)
):
    return catalog_controller.list_products(search, brand_id, category_id, page, limit, db)


@catalog_router.get("/products/{product_id}")
def get_product(product_id: int, db: Session = Depends(get_db)):
    """Produto com SKUs, imagens e estoque"""
    return catalog_controller.get_product(product_id, db)


@catalog_router.get("/brands")
def list_brands(db: Session = Depends(get_db)):
    return catalog_controller.list_brands(db)


@catalog_router.get("/categories")
def list_categories(db: Session = Depends(get_db)):
    return catalog_controller.list_categories(db)
