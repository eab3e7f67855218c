"""
Estatísticas do painel
"""
import logging
from typing import Dict, Any
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.anymarket_models import AnymarketProduct, AnymarketSyncLog
from app.models.catalog_models import ProductVtex, StockVtex
from app.models.content_models import ImageAnalysis

logger = logging.getLogger(__name__)


class DashboardService:
    """Totais exibidos no dashboard; cada número cai para 0 em caso de erro"""

    def __init__(self, db: Session):
        self.db = db

    def _safe_count(self, label: str, query_fn) -> int:
        try:
            return int(query_fn() or 0)
        except Exception as e:
            self.db.rollback()
            logger.warning(f"⚠️ Erro ao calcular {label}: {str(e)}")
            return 0

    def get_stats(self) -> Dict[str, Any]:
        total = self._safe_count(
            "total de produtos",
            lambda: self.db.query(func.count(ProductVtex.id_produto_vtex)).scalar()
        )
        total_stock = self._safe_count(
            "estoque total",
            lambda: self.db.query(func.coalesce(func.sum(StockVtex.total_quantity), 0)).scalar()
        )
        # Otimizado = analisado + mapeado no Anymarket + sincronizado
        total_optimized = self._safe_count(
            "produtos otimizados",
            lambda: self.db.query(func.count(func.distinct(ProductVtex.id_produto_vtex))).select_from(ProductVtex).join(
                ImageAnalysis, ImageAnalysis.id_produto_vtex == ProductVtex.id_produto_vtex
            ).join(
                AnymarketProduct, AnymarketProduct.id_produto_vtex == ProductVtex.id_produto_vtex
            ).join(
                AnymarketSyncLog, AnymarketSyncLog.id_produto_vtex == ProductVtex.id_produto_vtex
            ).scalar()
        )

        return {
            "success": True,
            "data": {
                "total": total,
                "totalStock": total_stock,
                "totalOptimized": total_optimized
            }
        }
