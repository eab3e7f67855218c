"""
Controller da integração Anymarket
"""
import logging
from typing import Optional, Dict, Any
from fastapi import HTTPException
from sqlalchemy.orm import Session

from app.services.anymarket_service import AnymarketService

logger = logging.getLogger(__name__)


class AnymarketController:
    """Controller para atualização de produtos, imagens e mapeamentos no Anymarket"""

    def _handle(self, action: str, result_fn) -> Dict[str, Any]:
        try:
            result = result_fn()
            if "error" in result:
                raise HTTPException(status_code=result.get("status_code", 400), detail=result["error"])
            return result
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Erro no controller Anymarket ao {action}: {str(e)}")
            raise HTTPException(status_code=500, detail="Erro interno do servidor")

    def update_product(self, product_id: Optional[int], anymarket_id: Optional[int], db: Session) -> Dict[str, Any]:
        return self._handle(
            "atualizar produto",
            lambda: AnymarketService(db).update_product(product_id, anymarket_id)
        )

    def upload_image(self, anymarket_id: Optional[int], image_url: Optional[str], index: Optional[int],
                     main: Optional[bool], db: Session) -> Dict[str, Any]:
        return self._handle(
            "enviar imagem",
            lambda: AnymarketService(db).upload_image(anymarket_id, image_url, index, main)
        )

    def delete_image(self, anymarket_id: Optional[int], image_id: Optional[str], db: Session) -> Dict[str, Any]:
        return self._handle("deletar imagem", lambda: AnymarketService(db).delete_image(anymarket_id, image_id))

    def list_mappings(self, search: Optional[str], page: int, limit: int, db: Session) -> Dict[str, Any]:
        return self._handle("listar mapeamentos", lambda: AnymarketService(db).list_mappings(search, page, limit))

    def create_mapping(self, data: Dict[str, Any], db: Session) -> Dict[str, Any]:
        return self._handle("criar mapeamento", lambda: AnymarketService(db).create_mapping(data))

    def list_sync_logs(self, product_id: Optional[int], limit: int, db: Session) -> Dict[str, Any]:
        return self._handle("listar logs", lambda: AnymarketService(db).list_sync_logs(product_id, limit))
