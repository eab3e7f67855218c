"""
Controller para análise de imagens (individual e em lote)
"""
import logging
from typing import Optional, Dict, Any
from fastapi import HTTPException
from sqlalchemy.orm import Session

from app.services.image_analysis_service import ImageAnalysisService
from app.services.batch_image_analysis_service import BatchImageAnalysisService

logger = logging.getLogger(__name__)


class AnalysisController:
    """Controller para análise de imagens de produtos"""

    def get_analysis(self, product_id: Optional[int], db: Session) -> Dict[str, Any]:
        """Busca a última análise de um produto"""
        try:
            if not product_id:
                raise HTTPException(status_code=400, detail="productId é obrigatório")

            result = ImageAnalysisService(db).get_latest_analysis(product_id)
            if "error" in result:
                raise HTTPException(status_code=result.get("status_code", 400), detail=result["error"])
            return result

        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Erro no controller ao buscar análise: {str(e)}")
            raise HTTPException(status_code=500, detail="Erro interno do servidor")

    def analyze_product(self, product_id: Optional[int], category_vtex_id: Optional[int],
                        force_new_analysis: bool, db: Session) -> Dict[str, Any]:
        """Executa a análise de imagens de um produto"""
        try:
            if not product_id or not category_vtex_id:
                raise HTTPException(status_code=400, detail="productId e categoryVtexId são obrigatórios")

            result = ImageAnalysisService(db).analyze_product(
                product_id, category_vtex_id, force_new_analysis=force_new_analysis
            )
            if "error" in result:
                raise HTTPException(status_code=result.get("status_code", 400), detail=result["error"])
            return result

        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Erro no controller ao analisar imagens: {str(e)}")
            raise HTTPException(status_code=500, detail="Erro interno do servidor")

    def analyze_batch(self, product_ids: Any, skip_existing: bool, db: Session) -> Dict[str, Any]:
        """Análise de imagens em lote, sequencial"""
        try:
            result = BatchImageAnalysisService(db).analyze_batch(product_ids, skip_existing=skip_existing)
            if "error" in result:
                raise HTTPException(status_code=result.get("status_code", 400), detail=result["error"])
            return result

        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Erro no controller de análise em lote: {str(e)}")
            raise HTTPException(status_code=500, detail="Erro interno do servidor")
