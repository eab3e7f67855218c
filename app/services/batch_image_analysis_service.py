"""
Análise de imagens em lote

Processa uma lista de produtos em sequência, um por vez, chamando a análise
individual de cada produto. A falha de um item fica registrada no próprio
resultado e não interrompe o lote. Não há paralelismo, retry nem fila.
"""
import time
import logging
from typing import Dict, List, Optional, Any
from sqlalchemy.orm import Session

from app.config.settings import settings
from app.models.api_models import BatchAnalysisResult
from app.models.catalog_models import ProductVtex
from app.services.image_analysis_service import ImageAnalysisService

logger = logging.getLogger(__name__)


class BatchImageAnalysisService:
    """Orquestra a análise de imagens de vários produtos"""

    def __init__(self, db: Session, analysis_service: Optional[ImageAnalysisService] = None,
                 pause_seconds: Optional[float] = None):
        self.db = db
        self.analysis_service = analysis_service or ImageAnalysisService(db)
        self.pause_seconds = settings.batch_pause_seconds if pause_seconds is None else pause_seconds

    def analyze_batch(self, product_ids: Any, skip_existing: bool = False) -> Dict[str, Any]:
        if not product_ids or not isinstance(product_ids, list):
            return {"error": "Lista de IDs de produtos é obrigatória"}

        logger.info(f"🔄 Iniciando análise de imagens em lote para {len(product_ids)} produtos")
        start_time = time.time()
        results: List[BatchAnalysisResult] = []
        success_count = 0
        error_count = 0

        for index, product_id in enumerate(product_ids):
            result = BatchAnalysisResult(
                productId=product_id,
                productName=self._lookup_product_name(product_id)
            )
            item_start = time.time()

            try:
                if skip_existing and self.analysis_service.has_generated_analysis(product_id):
                    result.success = True
                    result.message = "Análise já existente (ignorada)"
                else:
                    result.message = "Executando análise de imagem..."
                    outcome = self._execute_image_analysis(product_id)

                    if outcome.get("success"):
                        result.success = True
                        result.message = "Análise de imagem concluída com sucesso"
                    else:
                        result.error = outcome.get("error") or "Erro desconhecido"
                        result.message = f"Erro na análise: {result.error}"

            except Exception as e:
                self.db.rollback()
                logger.error(f"❌ Erro crítico ao analisar produto {product_id}: {str(e)}")
                result.success = False
                result.error = str(e)
                result.message = f"Erro crítico: {str(e)}"

            result.duration = int((time.time() - item_start) * 1000)
            if result.success:
                success_count += 1
            else:
                error_count += 1
            results.append(result)

            logger.info(f"{'✅' if result.success else '❌'} [{index + 1}/{len(product_ids)}] "
                        f"{result.productName}: {result.message}")

            # Pausa fixa entre itens (não após o último)
            if index < len(product_ids) - 1:
                time.sleep(self.pause_seconds)

        total_time = int((time.time() - start_time) * 1000)
        logger.info(f"✅ Lote concluído: {success_count} sucessos, {error_count} erros em {total_time}ms")

        return {
            "success": True,
            "message": f"Análise de imagens em lote concluída: {success_count} sucessos, {error_count} erros",
            "data": {
                "total": len(product_ids),
                "success": success_count,
                "errors": error_count,
                "results": [r.to_response() for r in results],
                "totalTime": total_time
            }
        }

    def _lookup_product_name(self, product_id: Any) -> str:
        """Nome de exibição do produto; falha na busca apenas gera warning"""
        default_name = f"Produto {product_id}"
        try:
            row = self.db.query(ProductVtex.name).filter(ProductVtex.id_produto_vtex == product_id).first()
            if row and row.name:
                return row.name
        except Exception as e:
            self.db.rollback()
            logger.warning(f"⚠️ Erro ao buscar nome do produto {product_id}: {str(e)}")
        return default_name

    def _execute_image_analysis(self, product_id: Any) -> Dict[str, Any]:
        """Busca a categoria do produto e executa a análise forçando nova geração"""
        product = self.db.query(ProductVtex.id_category_vtex).filter(
            ProductVtex.id_produto_vtex == product_id
        ).first()

        if not product:
            return {"success": False, "error": "Produto não encontrado"}

        if not product.id_category_vtex:
            return {"success": False, "error": "Produto não possui categoria definida"}

        outcome = self.analysis_service.analyze_product(
            product_id, product.id_category_vtex, force_new_analysis=True
        )
        if "error" in outcome:
            return {"success": False, "error": outcome["error"]}
        return {"success": True, "data": outcome}
