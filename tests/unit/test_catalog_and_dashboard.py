"""
Unit tests for the local catalog queries and the dashboard totals.
"""

from unittest.mock import MagicMock

from app.models.anymarket_models import AnymarketProduct, AnymarketSyncLog
from app.models.catalog_models import ProductVtex, StockVtex
from app.models.content_models import ImageAnalysis
from app.services.catalog_service import CatalogService
from app.services.dashboard_service import DashboardService


# ─────────────────────────────────────────────────────────────────────
# CatalogService
# ─────────────────────────────────────────────────────────────────────

def test_list_products_with_search_and_names(db_session, sample_catalog):
    db_session.add(ProductVtex(id_produto_vtex=2, name="Moletom Canguru", id_category_vtex=20))
    db_session.commit()

    result = CatalogService(db_session).list_products(search="ref-001")

    assert result["pagination"] == {"page": 1, "limit": 20, "total": 1, "totalPages": 1}
    product = result["data"][0]
    assert product["id_produto_vtex"] == 1
    assert product["brand_name"] == "Wolf Wear"
    assert product["category_name"] == "Camisetas"


def test_list_products_filters_and_clamps_limit(db_session, sample_catalog):
    db_session.add(ProductVtex(id_produto_vtex=2, name="Moletom Canguru", id_category_vtex=20))
    db_session.commit()
    service = CatalogService(db_session)

    by_category = service.list_products(category_id=20)
    assert [p["id_produto_vtex"] for p in by_category["data"]] == [2]

    clamped = service.list_products(page=0, limit=1000)
    assert clamped["pagination"]["page"] == 1
    assert clamped["pagination"]["limit"] == 200
    assert clamped["pagination"]["total"] == 2


def test_get_product_details_nests_skus_images_and_stock(db_session, sample_catalog):
    db_session.add(StockVtex(id_sku_vtex=100, warehouse_id="13", total_quantity=5))
    db_session.commit()

    result = CatalogService(db_session).get_product_details(1)

    data = result["data"]
    assert data["brand_name"] == "Wolf Wear"
    sku = data["skus"][0]
    assert [img["id_photo_vtex"] for img in sku["images"]] == [1002, 1001, 1003]
    assert sku["stock"][0]["total_quantity"] == 5


def test_get_product_details_not_found(db_session):
    assert CatalogService(db_session).get_product_details(1) == {
        "error": "Produto não encontrado", "status_code": 404
    }


def test_list_brands_and_categories(db_session, sample_catalog):
    service = CatalogService(db_session)

    assert service.list_brands()["total"] == 1
    assert service.list_categories()["data"][0]["name"] == "Camisetas"


# ─────────────────────────────────────────────────────────────────────
# DashboardService
# ─────────────────────────────────────────────────────────────────────

def test_dashboard_stats(db_session, analyzed_product):
    db_session.add_all([
        ProductVtex(id_produto_vtex=2, name="Moletom Canguru"),
        StockVtex(id_sku_vtex=100, warehouse_id="13", total_quantity=5),
        StockVtex(id_sku_vtex=200, warehouse_id="13", total_quantity=7),
        AnymarketProduct(id_produto_any=555, ref_vtex="REF-001", id_produto_vtex=1),
        AnymarketSyncLog(id_produto_vtex=1, id_produto_any=555, action="update"),
        AnymarketSyncLog(id_produto_vtex=1, id_produto_any=555, action="update"),
        ImageAnalysis(id_produto_vtex=2, contextualizacao="Análise", status="generated"),
    ])
    db_session.commit()

    result = DashboardService(db_session).get_stats()

    assert result["data"] == {"total": 2, "totalStock": 12, "totalOptimized": 1}


def test_dashboard_stats_empty_database(db_session):
    assert DashboardService(db_session).get_stats()["data"] == {"total": 0, "totalStock": 0, "totalOptimized": 0}


def test_dashboard_stats_fall_back_to_zero():
    db = MagicMock()
    db.query.side_effect = Exception("relation does not exist")

    result = DashboardService(db).get_stats()

    assert result["data"] == {"total": 0, "totalStock": 0, "totalOptimized": 0}
    assert db.rollback.call_count == 3
