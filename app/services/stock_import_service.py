"""
Serviço de importação de estoque VTEX (por SKU e warehouse)
"""
import logging
from typing import Dict, List, Optional, Any
from sqlalchemy.orm import Session

from app.config.settings import settings
from app.models.catalog_models import SkuVtex, StockVtex
from app.services.vtex_service import VtexService, VtexApiError

logger = logging.getLogger(__name__)


def filter_balances(balances: List[Dict[str, Any]], warehouse: Optional[str]) -> List[Dict[str, Any]]:
    """Mantém apenas os saldos cujo nome ou id do warehouse coincide com o filtro"""
    if not warehouse:
        return list(balances)
    return [
        b for b in balances
        if str(b.get("warehouseName")) == warehouse or str(b.get("warehouseId")) == warehouse
    ]


class StockImportService:
    """Importa saldos de estoque da VTEX para a tabela stock_vtex"""

    def __init__(self, db: Session, vtex: Optional[VtexService] = None):
        self.db = db
        self.vtex = vtex or VtexService()

    def import_stock_by_sku_id(self, sku_id: int, warehouse: Optional[str] = None) -> Dict[str, Any]:
        """Importa (upsert) o estoque de um SKU, filtrado por warehouse"""
        warehouse = warehouse if warehouse is not None else settings.vtex_default_warehouse
        try:
            logger.info(f"📦 Importando estoque do SKU {sku_id} (warehouse: {warehouse or 'todos'})")
            stock_data = self.vtex.get_sku_inventory(sku_id)

            if stock_data is None:
                return {
                    "error": f"Estoque para SKU com ID \"{sku_id}\" não encontrado na VTEX",
                    "status_code": 404
                }

            balances = stock_data.get("balance") or []
            if not balances:
                return {
                    "success": True,
                    "message": f"Nenhum estoque encontrado para o SKU {sku_id}",
                    "data": {"importedCount": 0, "updatedCount": 0, "filteredCount": 0, "errors": []}
                }

            filtered = filter_balances(balances, warehouse)
            if not filtered:
                return {
                    "success": True,
                    "message": f"Nenhum estoque encontrado para o SKU {sku_id} no warehouse \"{warehouse}\"",
                    "data": {"importedCount": 0, "updatedCount": 0, "filteredCount": len(balances), "errors": []}
                }

            imported_count = 0
            updated_count = 0
            errors = []

            for balance in filtered:
                warehouse_id = str(balance.get("warehouseId"))
                try:
                    stock = self.db.query(StockVtex).filter(
                        StockVtex.id_sku_vtex == sku_id,
                        StockVtex.warehouse_id == warehouse_id
                    ).first()

                    created = stock is None
                    if created:
                        stock = StockVtex(id_sku_vtex=sku_id, warehouse_id=warehouse_id)
                        self.db.add(stock)

                    stock.warehouse_name = balance.get("warehouseName")
                    stock.total_quantity = balance.get("totalQuantity") or 0
                    stock.reserved_quantity = balance.get("reservedQuantity") or 0
                    stock.has_unlimited_quantity = bool(balance.get("hasUnlimitedQuantity"))
                    self.db.commit()

                    if created:
                        imported_count += 1
                    else:
                        updated_count += 1
                except Exception as e:
                    # Descarta só este saldo; a sessão segue válida para os próximos
                    self.db.rollback()
                    logger.error(f"❌ Erro ao gravar estoque do SKU {sku_id} / warehouse {warehouse_id}: {e}")
                    errors.append(f"Warehouse {warehouse_id}: {str(e)}")

            logger.info(f"✅ Estoque do SKU {sku_id}: {imported_count} inseridos, {updated_count} atualizados")

            return {
                "success": True,
                "message": f"Estoque importado para o SKU {sku_id}: {imported_count} inseridos, {updated_count} atualizados",
                "data": {
                    "importedCount": imported_count,
                    "updatedCount": updated_count,
                    "filteredCount": len(balances) - len(filtered),
                    "errors": errors
                }
            }

        except VtexApiError as e:
            self.db.rollback()
            return {"error": str(e), "status_code": e.status_code or 502}
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Erro ao importar estoque do SKU {sku_id}: {str(e)}")
            return {"error": f"Erro interno: {str(e)}", "status_code": 500}

    def import_stock_for_skus(self, sku_ids: List[int], warehouse: Optional[str] = None) -> Dict[str, Any]:
        """Importa o estoque de vários SKUs, um por vez"""
        results = []
        total_imported = 0
        total_updated = 0
        failures = 0

        for sku_id in sku_ids:
            result = self.import_stock_by_sku_id(sku_id, warehouse)
            if "error" in result:
                failures += 1
                results.append({"skuId": sku_id, "success": False, "message": result["error"]})
                continue

            data = result.get("data", {})
            total_imported += data.get("importedCount", 0)
            total_updated += data.get("updatedCount", 0)
            results.append({"skuId": sku_id, "success": True, "message": result["message"], "data": data})

        return {
            "success": True,
            "message": f"Estoque processado para {len(sku_ids)} SKUs: {len(sku_ids) - failures} sucessos, {failures} erros",
            "data": {
                "total": len(sku_ids),
                "importedCount": total_imported,
                "updatedCount": total_updated,
                "errors": failures,
                "results": results
            }
        }

    def import_all_active_skus(self, warehouse: Optional[str] = None) -> Dict[str, Any]:
        """Atualiza o estoque de todos os SKUs ativos"""
        sku_ids = [row.id_sku_vtex for row in self.db.query(SkuVtex.id_sku_vtex).filter(SkuVtex.is_active == True).all()]
        logger.info(f"🔄 Atualizando estoque de {len(sku_ids)} SKUs ativos")
        return self.import_stock_for_skus(sku_ids, warehouse)
