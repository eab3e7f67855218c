"""
Consultas ao catálogo local (produtos, SKUs, imagens, estoque, marcas e categorias)
"""
import logging
from typing import Dict, Optional, Any
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.models.catalog_models import ProductVtex, SkuVtex, ImageVtex, StockVtex, BrandVtex, CategoryVtex

logger = logging.getLogger(__name__)


class CatalogService:
    """Leitura do catálogo importado da VTEX"""

    def __init__(self, db: Session):
        self.db = db

    def list_products(self, search: Optional[str] = None, brand_id: Optional[int] = None,
                      category_id: Optional[int] = None, page: int = 1, limit: int = 20) -> Dict[str, Any]:
        try:
            query = self.db.query(ProductVtex, BrandVtex.name, CategoryVtex.name).outerjoin(
                BrandVtex, ProductVtex.id_brand_vtex == BrandVtex.id_brand_vtex
            ).outerjoin(
                CategoryVtex, ProductVtex.id_category_vtex == CategoryVtex.id_category_vtex
            )

            if search:
                like = f"%{search}%"
                query = query.filter(or_(
                    ProductVtex.name.ilike(like),
                    ProductVtex.ref_produto.ilike(like),
                    ProductVtex.title.ilike(like)
                ))
            if brand_id:
                query = query.filter(ProductVtex.id_brand_vtex == brand_id)
            if category_id:
                query = query.filter(ProductVtex.id_category_vtex == category_id)

            page = max(page, 1)
            limit = max(min(limit, 200), 1)
            total = query.count()
            rows = query.order_by(ProductVtex.updated_at.desc(), ProductVtex.id_produto_vtex.desc()).offset(
                (page - 1) * limit
            ).limit(limit).all()

            products = []
            for product, brand_name, category_name in rows:
                item = product.to_dict()
                item["brand_name"] = brand_name
                item["category_name"] = category_name
                products.append(item)

            return {
                "success": True,
                "data": products,
                "pagination": {
                    "page": page,
                    "limit": limit,
                    "total": total,
                    "totalPages": (total + limit - 1) // limit
                }
            }
        except Exception as e:
            logger.error(f"Erro ao listar produtos: {str(e)}")
            return {"error": f"Erro interno: {str(e)}", "status_code": 500}

    def get_product_details(self, product_id: int) -> Dict[str, Any]:
        """Produto com seus SKUs; cada SKU traz imagens e estoque"""
        product = self.db.query(ProductVtex).filter(ProductVtex.id_produto_vtex == product_id).first()
        if not product:
            return {"error": "Produto não encontrado", "status_code": 404}

        skus = self.db.query(SkuVtex).filter(SkuVtex.id_produto_vtex == product_id).order_by(SkuVtex.id_sku_vtex).all()
        sku_ids = [s.id_sku_vtex for s in skus]

        images_by_sku: Dict[int, list] = {}
        stock_by_sku: Dict[int, list] = {}
        if sku_ids:
            for image in self.db.query(ImageVtex).filter(ImageVtex.id_sku_vtex.in_(sku_ids)).order_by(
                ImageVtex.is_main.desc(), ImageVtex.id_photo_vtex
            ).all():
                images_by_sku.setdefault(image.id_sku_vtex, []).append(image.to_dict())
            for stock in self.db.query(StockVtex).filter(StockVtex.id_sku_vtex.in_(sku_ids)).all():
                stock_by_sku.setdefault(stock.id_sku_vtex, []).append(stock.to_dict())

        sku_list = []
        for sku in skus:
            item = sku.to_dict()
            item["images"] = images_by_sku.get(sku.id_sku_vtex, [])
            item["stock"] = stock_by_sku.get(sku.id_sku_vtex, [])
            sku_list.append(item)

        data = product.to_dict()
        brand = self.db.query(BrandVtex).filter(BrandVtex.id_brand_vtex == product.id_brand_vtex).first()
        category = self.db.query(CategoryVtex).filter(CategoryVtex.id_category_vtex == product.id_category_vtex).first()
        data["brand_name"] = brand.name if brand else None
        data["category_name"] = category.name if category else None
        data["skus"] = sku_list

        return {"success": True, "data": data}

    def list_brands(self) -> Dict[str, Any]:
        brands = self.db.query(BrandVtex).order_by(BrandVtex.name).all()
        return {"success": True, "data": [b.to_dict() for b in brands], "total": len(brands)}

    def list_categories(self) -> Dict[str, Any]:
        categories = self.db.query(CategoryVtex).order_by(CategoryVtex.name).all()
        return {"success": True, "data": [c.to_dict() for c in categories], "total": len(categories)}
