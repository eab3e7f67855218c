"""
Modelos do catálogo VTEX (espelho local de produtos, SKUs, imagens e estoque)
"""
from sqlalchemy import Column, Integer, BigInteger, String, Text, Boolean, DateTime, Index, UniqueConstraint
from sqlalchemy.sql import func
from app.config.database import Base


class ProductVtex(Base):
    """Produto importado da VTEX"""
    __tablename__ = "products_vtex"

    id_produto_vtex = Column(BigInteger, primary_key=True, autoincrement=False)
    name = Column(String(500), nullable=False)
    title = Column(String(500))
    description = Column(Text)
    description_short = Column(Text)
    id_brand_vtex = Column(BigInteger, index=True)
    id_category_vtex = Column(BigInteger, index=True)
    id_department_vtex = Column(BigInteger)
    ref_produto = Column(String(100), index=True)
    keywords = Column(Text)
    link_id = Column(String(500))
    is_active = Column(Boolean, default=True)
    is_visible = Column(Boolean, default=True)
    release_date = Column(String(50))
    tax_code = Column(String(50))
    meta_tag_description = Column(Text)
    show_without_stock = Column(Boolean, default=True)
    score = Column(Integer)

    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    def to_dict(self):
        return {
            "id_produto_vtex": self.id_produto_vtex,
            "name": self.name,
            "title": self.title,
            "description": self.description,
            "description_short": self.description_short,
            "id_brand_vtex": self.id_brand_vtex,
            "id_category_vtex": self.id_category_vtex,
            "id_department_vtex": self.id_department_vtex,
            "ref_produto": self.ref_produto,
            "keywords": self.keywords,
            "link_id": self.link_id,
            "is_active": self.is_active,
            "is_visible": self.is_visible,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class SkuVtex(Base):
    """SKU (variação vendável) de um produto VTEX"""
    __tablename__ = "skus_vtex"

    id_sku_vtex = Column(BigInteger, primary_key=True, autoincrement=False)
    id_produto_vtex = Column(BigInteger, nullable=False, index=True)
    name = Column(String(500))
    is_active = Column(Boolean, default=True)
    is_kit = Column(Boolean, default=False)
    manufacturer_code = Column(String(100))
    measurement_unit = Column(String(20))
    unit_multiplier = Column(String(20))
    commercial_condition_id = Column(Integer)
    reward_value = Column(String(20))
    estimated_date_arrival = Column(String(50))

    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    def to_dict(self):
        return {
            "id_sku_vtex": self.id_sku_vtex,
            "id_produto_vtex": self.id_produto_vtex,
            "name": self.name,
            "is_active": self.is_active,
            "is_kit": self.is_kit,
            "manufacturer_code": self.manufacturer_code,
            "measurement_unit": self.measurement_unit,
        }


class ImageVtex(Base):
    """Imagem associada a um SKU VTEX"""
    __tablename__ = "images_vtex"

    id_photo_vtex = Column(BigInteger, primary_key=True, autoincrement=False)
    id_sku_vtex = Column(BigInteger, nullable=False, index=True)
    name = Column(String(255))
    is_main = Column(Boolean, default=False)
    text = Column(String(255))
    label = Column(String(255))
    url = Column(String(1000))
    file_location = Column(String(1000))

    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    def to_dict(self):
        return {
            "id_photo_vtex": self.id_photo_vtex,
            "id_sku_vtex": self.id_sku_vtex,
            "name": self.name,
            "is_main": self.is_main,
            "text": self.text,
            "label": self.label,
            "url": self.url,
            "file_location": self.file_location,
        }


class StockVtex(Base):
    """Saldo de estoque por SKU e warehouse"""
    __tablename__ = "stock_vtex"

    id_stock_vtex = Column(Integer, primary_key=True, index=True)
    id_sku_vtex = Column(BigInteger, nullable=False, index=True)
    warehouse_id = Column(String(50), nullable=False)
    warehouse_name = Column(String(255))
    total_quantity = Column(Integer, default=0)
    reserved_quantity = Column(Integer, default=0)
    has_unlimited_quantity = Column(Boolean, default=False)

    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint('id_sku_vtex', 'warehouse_id', name='uq_stock_sku_warehouse'),
    )

    def to_dict(self):
        return {
            "id_stock_vtex": self.id_stock_vtex,
            "id_sku_vtex": self.id_sku_vtex,
            "warehouse_id": self.warehouse_id,
            "warehouse_name": self.warehouse_name,
            "total_quantity": self.total_quantity,
            "reserved_quantity": self.reserved_quantity,
            "has_unlimited_quantity": self.has_unlimited_quantity,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class BrandVtex(Base):
    """Marca VTEX"""
    __tablename__ = "brands_vtex"

    id_brand_vtex = Column(BigInteger, primary_key=True, autoincrement=False)
    name = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True)
    title = Column(String(255))
    meta_tag_description = Column(Text)
    image_url = Column(String(1000))

    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    def to_dict(self):
        return {
            "id_brand_vtex": self.id_brand_vtex,
            "name": self.name,
            "is_active": self.is_active,
            "title": self.title,
        }


class CategoryVtex(Base):
    """Categoria VTEX"""
    __tablename__ = "categories_vtex"

    id_category_vtex = Column(BigInteger, primary_key=True, autoincrement=False)
    name = Column(String(255), nullable=False)
    father_category_id = Column(BigInteger, index=True)
    title = Column(String(255))
    description = Column(Text)
    keywords = Column(Text)
    is_active = Column(Boolean, default=True)
    has_children = Column(Boolean, default=False)

    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    def to_dict(self):
        return {
            "id_category_vtex": self.id_category_vtex,
            "name": self.name,
            "father_category_id": self.father_category_id,
            "title": self.title,
            "is_active": self.is_active,
            "has_children": self.has_children,
        }


class ProductAttributeVtex(Base):
    """Especificação de produto (campo/valor) vinda da VTEX"""
    __tablename__ = "product_attributes_vtex"

    id = Column(Integer, primary_key=True, index=True)
    id_product_vtex = Column(BigInteger, nullable=False, index=True)
    attribute_id = Column(BigInteger)
    attribute_name = Column(String(255), nullable=False)
    attribute_value = Column(Text)

    created_at = Column(DateTime, default=func.now())

    __table_args__ = (
        Index('ix_product_attributes_product_name', 'id_product_vtex', 'attribute_name'),
    )
