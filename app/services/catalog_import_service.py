"""
Serviço de importação do catálogo VTEX para o banco local
"""
import time
import logging
from typing import Dict, List, Optional, Any
from sqlalchemy.orm import Session

from app.config.settings import settings
from app.models.catalog_models import (
    ProductVtex, SkuVtex, ImageVtex, BrandVtex, CategoryVtex, ProductAttributeVtex
)
from app.services.vtex_service import VtexService, VtexApiError
from app.services.stock_import_service import StockImportService
from app.utils.sync_logger import get_sync_logger

logger = logging.getLogger(__name__)

# Especificações que não são importadas
IGNORED_SPECIFICATIONS = ("Seller", "Categoria")


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    return str(value)


class CatalogImportService:
    """Importa produtos, marcas, categorias, SKUs, imagens e especificações da VTEX"""

    def __init__(self, db: Session, vtex: Optional[VtexService] = None):
        self.db = db
        self.vtex = vtex or VtexService()

    def _vtex_error(self, e: VtexApiError) -> Dict[str, Any]:
        self.db.rollback()
        return {"error": str(e), "status_code": e.status_code or 502}

    def _internal_error(self, action: str, e: Exception) -> Dict[str, Any]:
        self.db.rollback()
        logger.error(f"❌ Erro ao {action}: {str(e)}")
        return {"error": f"Erro interno: {str(e)}", "status_code": 500}

    # Produto

    def import_product_by_ref_id(self, ref_id: str) -> Dict[str, Any]:
        """Importa (upsert) um produto pelo RefId"""
        try:
            logger.info(f"📦 Importando produto por RefId: {ref_id}")
            vtex_product = self.vtex.get_product_by_ref_id(ref_id)
            if not vtex_product:
                return {"error": f"Produto com RefId \"{ref_id}\" não encontrado na VTEX", "status_code": 404}

            product_id = vtex_product["Id"]
            product = self.db.query(ProductVtex).filter(ProductVtex.id_produto_vtex == product_id).first()
            created = product is None
            if created:
                product = ProductVtex(id_produto_vtex=product_id)
                self.db.add(product)

            product.name = vtex_product.get("Name") or f"Produto {product_id}"
            product.title = vtex_product.get("Title")
            product.description = vtex_product.get("Description")
            product.description_short = vtex_product.get("DescriptionShort")
            product.id_brand_vtex = vtex_product.get("BrandId")
            product.id_category_vtex = vtex_product.get("CategoryId")
            product.id_department_vtex = vtex_product.get("DepartmentId")
            product.ref_produto = vtex_product.get("RefId") or ref_id
            product.keywords = vtex_product.get("KeyWords")
            product.link_id = vtex_product.get("LinkId")
            product.is_active = vtex_product.get("IsActive", True)
            product.is_visible = vtex_product.get("IsVisible", True)
            product.release_date = vtex_product.get("ReleaseDate")
            product.tax_code = vtex_product.get("TaxCode")
            product.meta_tag_description = vtex_product.get("MetaTagDescription")
            product.show_without_stock = vtex_product.get("ShowWithoutStock", True)
            product.score = vtex_product.get("Score")

            self.db.commit()
            logger.info(f"✅ Produto {'inserido' if created else 'atualizado'}: {product.name} ({product_id})")

            return {
                "success": True,
                "message": f"Produto {'importado' if created else 'atualizado'} com sucesso: {product.name}",
                "data": {
                    "product": vtex_product,
                    "importedCount": 1 if created else 0,
                    "updatedCount": 0 if created else 1
                }
            }
        except VtexApiError as e:
            return self._vtex_error(e)
        except Exception as e:
            return self._internal_error(f"importar produto {ref_id}", e)

    # Marca

    def import_brand_by_id(self, brand_id: int) -> Dict[str, Any]:
        """Importa (upsert) uma marca a partir da lista de marcas VTEX"""
        try:
            brands = self.vtex.get_brand_list()
            vtex_brand = next((b for b in brands if b.get("id") == brand_id), None)
            if not vtex_brand:
                return {"error": f"Marca com brand_id \"{brand_id}\" não encontrada na VTEX", "status_code": 404}

            brand = self.db.query(BrandVtex).filter(BrandVtex.id_brand_vtex == brand_id).first()
            created = brand is None
            if created:
                brand = BrandVtex(id_brand_vtex=brand_id)
                self.db.add(brand)

            brand.name = vtex_brand.get("name")
            brand.is_active = vtex_brand.get("isActive", True)
            brand.title = vtex_brand.get("title")
            brand.meta_tag_description = vtex_brand.get("metaTagDescription")
            brand.image_url = vtex_brand.get("imageUrl")
            self.db.commit()

            return {
                "success": True,
                "message": f"Marca {'importada' if created else 'atualizada'}: {brand.name}",
                "data": {"brand": vtex_brand, "importedCount": 1 if created else 0, "updatedCount": 0 if created else 1}
            }
        except VtexApiError as e:
            return self._vtex_error(e)
        except Exception as e:
            return self._internal_error(f"importar marca {brand_id}", e)

    # Categoria

    def import_category_by_id(self, category_id: int) -> Dict[str, Any]:
        """Importa (upsert) uma categoria"""
        try:
            vtex_category = self.vtex.get_category(category_id)
            if not vtex_category:
                return {"error": f"Categoria com category_id \"{category_id}\" não encontrada na VTEX", "status_code": 404}

            category = self.db.query(CategoryVtex).filter(CategoryVtex.id_category_vtex == category_id).first()
            created = category is None
            if created:
                category = CategoryVtex(id_category_vtex=category_id)
                self.db.add(category)

            category.name = vtex_category.get("Name")
            category.father_category_id = vtex_category.get("FatherCategoryId")
            category.title = vtex_category.get("Title")
            category.description = vtex_category.get("Description")
            category.keywords = vtex_category.get("Keywords")
            category.is_active = vtex_category.get("IsActive", True)
            category.has_children = bool(vtex_category.get("HasChildren"))
            self.db.commit()

            return {
                "success": True,
                "message": f"Categoria {'importada' if created else 'atualizada'}: {category.name}",
                "data": {"category": vtex_category, "importedCount": 1 if created else 0, "updatedCount": 0 if created else 1}
            }
        except VtexApiError as e:
            return self._vtex_error(e)
        except Exception as e:
            return self._internal_error(f"importar categoria {category_id}", e)

    def import_category_tree(self, levels: int = 3) -> Dict[str, Any]:
        """
        Importa (upsert) a árvore de categorias da VTEX até o nível informado.
        Cada nó guarda o id do pai em father_category_id.
        """
        try:
            tree = self.vtex.get_category_tree(levels)
            imported_count = 0
            updated_count = 0

            pending = [(node, None) for node in tree]
            while pending:
                node, father_id = pending.pop(0)
                category = self.db.query(CategoryVtex).filter(CategoryVtex.id_category_vtex == node["id"]).first()
                if category:
                    updated_count += 1
                else:
                    category = CategoryVtex(id_category_vtex=node["id"])
                    self.db.add(category)
                    imported_count += 1

                category.name = node.get("name")
                category.father_category_id = father_id
                category.title = node.get("Title")
                category.description = node.get("MetaTagDescription")
                category.has_children = bool(node.get("hasChildren"))
                pending.extend((child, node["id"]) for child in node.get("children") or [])

            self.db.commit()
            logger.info(f"✅ Árvore de categorias: {imported_count} inseridas, {updated_count} atualizadas")

            return {
                "success": True,
                "message": f"Árvore de categorias importada: {imported_count} inseridas, {updated_count} atualizadas",
                "data": {"importedCount": imported_count, "updatedCount": updated_count}
            }
        except VtexApiError as e:
            return self._vtex_error(e)
        except Exception as e:
            return self._internal_error("importar árvore de categorias", e)

    # SKUs

    def import_skus_by_product_id(self, product_id: int) -> Dict[str, Any]:
        """Importa (upsert) todos os SKUs de um produto"""
        try:
            vtex_skus = self.vtex.get_skus_by_product_id(product_id)
            imported_count = 0
            updated_count = 0

            for vtex_sku in vtex_skus:
                sku_id = vtex_sku["Id"]
                sku = self.db.query(SkuVtex).filter(SkuVtex.id_sku_vtex == sku_id).first()
                if sku:
                    updated_count += 1
                else:
                    sku = SkuVtex(id_sku_vtex=sku_id)
                    self.db.add(sku)
                    imported_count += 1

                sku.id_produto_vtex = vtex_sku.get("ProductId") or product_id
                sku.name = vtex_sku.get("Name")
                sku.is_active = vtex_sku.get("IsActive", True)
                sku.is_kit = bool(vtex_sku.get("IsKit"))
                sku.manufacturer_code = vtex_sku.get("ManufacturerCode")
                sku.measurement_unit = vtex_sku.get("MeasurementUnit")
                sku.unit_multiplier = _as_text(vtex_sku.get("UnitMultiplier"))
                sku.commercial_condition_id = vtex_sku.get("CommercialConditionId")
                sku.reward_value = _as_text(vtex_sku.get("RewardValue"))
                sku.estimated_date_arrival = vtex_sku.get("EstimatedDateArrival")

            self.db.commit()
            logger.info(f"✅ SKUs do produto {product_id}: {imported_count} inseridos, {updated_count} atualizados")

            return {
                "success": True,
                "message": f"{len(vtex_skus)} SKUs processados para o produto {product_id}",
                "data": {
                    "skus": vtex_skus,
                    "importedCount": imported_count,
                    "updatedCount": updated_count
                }
            }
        except VtexApiError as e:
            return self._vtex_error(e)
        except Exception as e:
            return self._internal_error(f"importar SKUs do produto {product_id}", e)

    # Imagens

    def import_images_by_sku_id(self, sku_id: int) -> Dict[str, Any]:
        """Importa (upsert) as imagens de um SKU"""
        try:
            vtex_images = self.vtex.get_sku_images(sku_id)
            imported_count = 0
            updated_count = 0

            for vtex_image in vtex_images:
                photo_id = vtex_image["Id"]
                image = self.db.query(ImageVtex).filter(ImageVtex.id_photo_vtex == photo_id).first()
                if image:
                    updated_count += 1
                else:
                    image = ImageVtex(id_photo_vtex=photo_id)
                    self.db.add(image)
                    imported_count += 1

                file_location = vtex_image.get("FileLocation")
                image.id_sku_vtex = vtex_image.get("SkuId") or sku_id
                image.name = vtex_image.get("Name")
                image.is_main = bool(vtex_image.get("IsMain"))
                image.text = vtex_image.get("Text")
                image.label = vtex_image.get("Label")
                image.url = vtex_image.get("Url")
                image.file_location = f"https://{self.vtex.account}.{file_location}" if file_location else file_location

            self.db.commit()

            return {
                "success": True,
                "message": f"{len(vtex_images)} imagens processadas para o SKU {sku_id}",
                "data": {"importedCount": imported_count, "updatedCount": updated_count}
            }
        except VtexApiError as e:
            return self._vtex_error(e)
        except Exception as e:
            return self._internal_error(f"importar imagens do SKU {sku_id}", e)

    # Especificações

    def import_product_specifications(self, product_id: int) -> Dict[str, Any]:
        """Importa (upsert) as especificações de um produto em product_attributes_vtex"""
        try:
            specifications = self.vtex.get_product_specifications(product_id)
            imported_count = 0
            updated_count = 0

            for spec in specifications:
                if spec.get("Name") in IGNORED_SPECIFICATIONS:
                    continue

                attribute = self.db.query(ProductAttributeVtex).filter(
                    ProductAttributeVtex.id_product_vtex == product_id,
                    ProductAttributeVtex.attribute_id == spec.get("Id")
                ).first()
                if attribute:
                    updated_count += 1
                else:
                    attribute = ProductAttributeVtex(id_product_vtex=product_id, attribute_id=spec.get("Id"))
                    self.db.add(attribute)
                    imported_count += 1

                attribute.attribute_name = spec.get("Name")
                attribute.attribute_value = _as_text(spec.get("Value"))

            self.db.commit()

            return {
                "success": True,
                "message": f"Especificações do produto {product_id}: {imported_count} inseridas, {updated_count} atualizadas",
                "data": {"importedCount": imported_count, "updatedCount": updated_count}
            }
        except VtexApiError as e:
            return self._vtex_error(e)
        except Exception as e:
            return self._internal_error(f"importar especificações do produto {product_id}", e)

    # Lote

    def batch_import_by_ref_id(self, ref_id: str, warehouse: Optional[str] = None) -> Dict[str, Any]:
        """
        Importação completa por RefId, em sequência:
        produto, marca, categoria, SKUs e, para cada SKU, imagens e estoque.
        A falha do produto interrompe a importação; falhas das etapas seguintes
        são registradas em "errors".
        """
        start_time = time.time()
        errors: List[str] = []
        data: Dict[str, Any] = {"refId": ref_id}

        logger.info(f"🚀 Iniciando importação em lote para RefId: {ref_id}")

        product_result = self.import_product_by_ref_id(ref_id)
        data["productResult"] = product_result
        if "error" in product_result:
            data["errors"] = [f"Produto: {product_result['error']}"]
            data["totalTime"] = int((time.time() - start_time) * 1000)
            get_sync_logger().log_event("vtex_import", {"description": f"Importação RefId {ref_id}"},
                                        success=False, error_message=product_result["error"])
            return {
                "success": False,
                "message": f"Falha na importação do produto: {product_result['error']}",
                "data": data
            }

        vtex_product = product_result["data"]["product"]
        product_id = vtex_product["Id"]

        if vtex_product.get("BrandId"):
            brand_result = self.import_brand_by_id(vtex_product["BrandId"])
            data["brandResult"] = brand_result
            if "error" in brand_result:
                errors.append(f"Marca: {brand_result['error']}")
        else:
            logger.warning(f"⚠️ Produto {product_id} não tem brand_id definido")

        if vtex_product.get("CategoryId"):
            category_result = self.import_category_by_id(vtex_product["CategoryId"])
            data["categoryResult"] = category_result
            if "error" in category_result:
                errors.append(f"Categoria: {category_result['error']}")
        else:
            logger.warning(f"⚠️ Produto {product_id} não tem category_id definido")

        skus_result = self.import_skus_by_product_id(product_id)
        data["skusResult"] = skus_result
        image_results = []
        stock_results = []

        if "error" in skus_result:
            errors.append(f"SKUs: {skus_result['error']}")
        else:
            stock_service = StockImportService(self.db, self.vtex)
            for vtex_sku in skus_result["data"]["skus"]:
                sku_id = vtex_sku["Id"]

                image_result = self.import_images_by_sku_id(sku_id)
                image_results.append({"skuId": sku_id, **image_result})
                if "error" in image_result:
                    errors.append(f"Imagens SKU {sku_id}: {image_result['error']}")

                stock_result = stock_service.import_stock_by_sku_id(
                    sku_id, warehouse if warehouse is not None else settings.vtex_default_warehouse
                )
                stock_results.append({"skuId": sku_id, **stock_result})
                if "error" in stock_result:
                    errors.append(f"Estoque SKU {sku_id}: {stock_result['error']}")

        data["imagesResults"] = image_results
        data["stockResults"] = stock_results
        data["errors"] = errors
        data["totalTime"] = int((time.time() - start_time) * 1000)

        get_sync_logger().log_event(
            "vtex_import",
            {"description": f"Importação RefId {ref_id}", "errors": errors, "totalTime": data["totalTime"]},
            product_id=product_id,
            success=not errors
        )

        message = f"Importação do RefId {ref_id} concluída"
        if errors:
            message += f" com {len(errors)} erro(s)"
        logger.info(f"✅ {message} em {data['totalTime']}ms")

        return {"success": True, "message": message, "data": data}

    def batch_import_ref_ids(self, ref_ids: List[str], warehouse: Optional[str] = None) -> Dict[str, Any]:
        """Importa vários RefIds, um por vez"""
        start_time = time.time()
        results = []
        success_count = 0

        for ref_id in ref_ids:
            result = self.batch_import_by_ref_id(str(ref_id).strip(), warehouse)
            if result.get("success"):
                success_count += 1
            results.append({"refId": ref_id, "success": result.get("success", False), "message": result.get("message")})

        return {
            "success": True,
            "message": f"Importação concluída: {success_count} sucessos, {len(ref_ids) - success_count} erros",
            "data": {
                "total": len(ref_ids),
                "success": success_count,
                "errors": len(ref_ids) - success_count,
                "results": results,
                "totalTime": int((time.time() - start_time) * 1000)
            }
        }
