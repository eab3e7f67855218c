"""
Rotas de análise de imagens
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.controllers.analysis_controller import AnalysisController
from app.models.api_models import ImageAnalysisRequest, BatchAnalysisRequest

logger = logging.getLogger(__name__)

analysis_router = APIRouter(tags=["Image Analysis"])

analysis_controller = AnalysisController()


@analysis_router.get("/analyze-images")
def get_image_analysis(
    product_id: Optional[int] = Query(None, alias="productId", description="ID do produto VTEX"),
    db: Session = Depends(get_db)
):
    """Última análise de imagens do produto"""
    try:
        return analysis_controller.get_analysis(product_id, db)
    except HTTPException as e:
        raise e
    except Exception as e:
        logger.error(f"Erro ao buscar análise: {str(e)}")
        raise HTTPException(status_code=500, detail="Erro interno do servidor")


@analysis_router.post("/analyze-images")
def analyze_images(payload: ImageAnalysisRequest, db: Session = Depends(get_db)):
    """Analisa as imagens de um produto com o agente de análise"""
    try:
        return analysis_controller.analyze_product(
            payload.product_id, payload.category_vtex_id, payload.force_new_analysis, db
        )
    except HTTPException as e:
        raise e
    except Exception as e:
        logger.error(f"Erro ao analisar imagens: {str(e)}")
        raise HTTPException(status_code=500, detail="Erro interno do servidor")


@analysis_router.post("/analyze-images-batch")
def analyze_images_batch(payload: BatchAnalysisRequest, db: Session = Depends(get_db)):
    """Análise de imagens em lote (sequencial, com pausa curta entre os produtos)"""
    try:
        return analysis_controller.analyze_batch(payload.product_ids, payload.skip_existing, db)
    except HTTPException as e:
        raise e
    except Exception as e:
        logger.error(f"Erro na análise em lote: {str(e)}")
        raise HTTPException(status_code=500, detail="Erro interno do servidor")
