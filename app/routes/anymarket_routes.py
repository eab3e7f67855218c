"""
Rotas da integração Anymarket
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.controllers.anymarket_controller import AnymarketController
from app.models.api_models import AnymarketUpdateRequest, AnymarketImageRequest, AnymarketMappingPayload

logger = logging.getLogger(__name__)

anymarket_router = APIRouter(prefix="/anymarket", tags=["Anymarket"])

anymarket_controller = AnymarketController()


@anymarket_router.post("/update-product")
def update_product(payload: AnymarketUpdateRequest, db: Session = Depends(get_db)):
    """Envia título, descrição e características gerados para o Anymarket"""
    try:
        return anymarket_controller.update_product(payload.product_id, payload.anymarket_id, db)
    except HTTPException as e:
        raise e
    except Exception as e:
        logger.error(f"Erro ao atualizar produto no Anymarket: {str(e)}")
        raise HTTPException(status_code=500, detail="Erro interno do servidor")


@anymarket_router.post("/upload-image")
def upload_image(payload: AnymarketImageRequest, db: Session = Depends(get_db)):
    try:
        return anymarket_controller.upload_image(
            payload.anymarket_id, payload.image_url, payload.index, payload.main, db
        )
    except HTTPException as e:
        raise e
    except Exception as e:
        logger.error(f"Erro ao enviar imagem para o Anymarket: {str(e)}")
        raise HTTPException(status_code=500, detail="Erro interno do servidor")


@anymarket_router.delete("/delete-image")
def delete_image(
    anymarket_id: Optional[int] = Query(None, alias="anymarketId"),
    image_id: Optional[str] = Query(None, alias="imageId"),
    db: Session = Depends(get_db)
):
    return anymarket_controller.delete_image(anymarket_id, image_id, db)


@anymarket_router.get("/mappings")
def list_mappings(
    search: Optional[str] = Query(None, description="Busca por RefId VTEX ou título"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db)
):
    return anymarket_controller.list_mappings(search, page, limit, db)


@anymarket_router.post("/mappings", status_code=201)
def create_mapping(payload: AnymarketMappingPayload, db: Session = Depends(get_db)):
    return anymarket_controller.create_mapping(payload.model_dump(), db)


@anymarket_router.get("/sync-logs")
def list_sync_logs(
    product_id: Optional[int] = Query(None, alias="productId"),
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db)
):
    return anymarket_controller.list_sync_logs(product_id, limit, db)
