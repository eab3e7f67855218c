"""
Controller de processamento de imagens (Pixian)
"""
import logging
from typing import Optional, Dict, Any
from fastapi import HTTPException

from app.services.pixian_service import PixianService

logger = logging.getLogger(__name__)


class PixianController:

    def process_image(self, image_url: Optional[str], product_id: Optional[Any]) -> Dict[str, Any]:
        try:
            result = PixianService().process_image(image_url, product_id)
            if "error" in result:
                raise HTTPException(status_code=result.get("status_code", 400), detail=result["error"])
            return result
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Erro no controller Pixian: {str(e)}")
            raise HTTPException(status_code=500, detail="Erro interno do servidor")
