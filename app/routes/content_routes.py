"""
Rotas de conteúdo gerado: títulos, descrições e características
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.controllers.content_controller import ContentController
from app.models.api_models import ProductGenerationRequest, CharacteristicPayload

logger = logging.getLogger(__name__)

content_router = APIRouter(tags=["Content"])

content_controller = ContentController()


# Títulos

@content_router.post("/generate-title")
def generate_title(payload: ProductGenerationRequest, db: Session = Depends(get_db)):
    """Gera um título SEO único para o produto"""
    try:
        return content_controller.generate_title(payload.product_id, payload.force_regenerate, db)
    except HTTPException as e:
        raise e
    except Exception as e:
        logger.error(f"Erro ao gerar título: {str(e)}")
        raise HTTPException(status_code=500, detail="Erro interno do servidor")


@content_router.get("/titles")
def list_titles(
    product_id: Optional[int] = Query(None, alias="productId"),
    db: Session = Depends(get_db)
):
    return content_controller.list_titles(product_id, db)


# Descrições

@content_router.post("/generate-description")
def generate_description(payload: ProductGenerationRequest, db: Session = Depends(get_db)):
    """Gera descrição e FAQ a partir do título validado"""
    try:
        return content_controller.generate_description(payload.product_id, payload.force_regenerate, db)
    except HTTPException as e:
        raise e
    except Exception as e:
        logger.error(f"Erro ao gerar descrição: {str(e)}")
        raise HTTPException(status_code=500, detail="Erro interno do servidor")


@content_router.get("/descriptions")
def list_descriptions(
    product_id: Optional[int] = Query(None, alias="productId"),
    db: Session = Depends(get_db)
):
    return content_controller.list_descriptions(product_id, db)


# Características

@content_router.get("/caracteristicas")
def list_characteristics(db: Session = Depends(get_db)):
    return content_controller.list_characteristics(db)


@content_router.get("/caracteristicas-by-category")
def list_characteristics_by_category(
    category_id: Optional[str] = Query(None, alias="categoryId"),
    db: Session = Depends(get_db)
):
    return content_controller.list_characteristics_by_category(category_id, db)


@content_router.post("/caracteristicas")
def create_characteristic(payload: CharacteristicPayload, db: Session = Depends(get_db)):
    try:
        return content_controller.save_characteristic(payload.model_dump(exclude_none=True), db)
    except HTTPException as e:
        raise e
    except Exception as e:
        logger.error(f"Erro ao criar característica: {str(e)}")
        raise HTTPException(status_code=500, detail="Erro interno do servidor")


@content_router.put("/caracteristicas/{characteristic_id}")
def update_characteristic(characteristic_id: int, payload: CharacteristicPayload, db: Session = Depends(get_db)):
    try:
        return content_controller.save_characteristic(
            payload.model_dump(exclude_none=True), db, characteristic_id=characteristic_id
        )
    except HTTPException as e:
        raise e
    except Exception as e:
        logger.error(f"Erro ao atualizar característica: {str(e)}")
        raise HTTPException(status_code=500, detail="Erro interno do servidor")


@content_router.delete("/caracteristicas/{characteristic_id}")
def delete_characteristic(characteristic_id: int, db: Session = Depends(get_db)):
    return content_controller.delete_characteristic(characteristic_id, db)


@content_router.post("/generate-characteristics")
def generate_characteristics(payload: ProductGenerationRequest, db: Session = Depends(get_db)):
    """Responde as características da categoria do produto com IA"""
    try:
        return content_controller.generate_characteristics(payload.product_id, db)
    except HTTPException as e:
        raise e
    except Exception as e:
        logger.error(f"Erro ao gerar características: {str(e)}")
        raise HTTPException(status_code=500, detail="Erro interno do servidor")


@content_router.get("/respostas-caracteristicas")
def list_characteristic_answers(
    product_id: Optional[int] = Query(None, alias="productId"),
    db: Session = Depends(get_db)
):
    return content_controller.list_answers(product_id, db)
