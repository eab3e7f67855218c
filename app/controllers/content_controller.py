"""
Controller para geração de conteúdo: títulos, descrições e características
"""
import logging
from typing import Optional, Dict, Any
from fastapi import HTTPException
from sqlalchemy.orm import Session

from app.services.title_generation_service import TitleGenerationService
from app.services.description_service import DescriptionService
from app.services.characteristic_service import CharacteristicService

logger = logging.getLogger(__name__)


def _raise_on_error(result: Dict[str, Any]) -> Dict[str, Any]:
    if "error" in result:
        raise HTTPException(status_code=result.get("status_code", 400), detail=result["error"])
    return result


class ContentController:
    """Controller de conteúdo gerado por IA"""

    # Títulos

    def generate_title(self, product_id: Optional[int], force_regenerate: bool, db: Session) -> Dict[str, Any]:
        try:
            if not product_id:
                raise HTTPException(status_code=400, detail="productId é obrigatório")
            return _raise_on_error(TitleGenerationService(db).generate_title(product_id, force_regenerate))
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Erro no controller ao gerar título: {str(e)}")
            raise HTTPException(status_code=500, detail="Erro interno do servidor")

    def list_titles(self, product_id: Optional[int], db: Session) -> Dict[str, Any]:
        try:
            return _raise_on_error(TitleGenerationService(db).list_titles(product_id))
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Erro no controller ao listar títulos: {str(e)}")
            raise HTTPException(status_code=500, detail="Erro interno do servidor")

    # Descrições

    def generate_description(self, product_id: Optional[int], force_regenerate: bool, db: Session) -> Dict[str, Any]:
        try:
            if not product_id:
                raise HTTPException(status_code=400, detail="productId é obrigatório")
            return _raise_on_error(DescriptionService(db).generate_description(product_id, force_regenerate))
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Erro no controller ao gerar descrição: {str(e)}")
            raise HTTPException(status_code=500, detail="Erro interno do servidor")

    def list_descriptions(self, product_id: Optional[int], db: Session) -> Dict[str, Any]:
        try:
            return _raise_on_error(DescriptionService(db).list_descriptions(product_id))
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Erro no controller ao listar descrições: {str(e)}")
            raise HTTPException(status_code=500, detail="Erro interno do servidor")

    # Características

    def list_characteristics(self, db: Session) -> Dict[str, Any]:
        try:
            return _raise_on_error(CharacteristicService(db).list_characteristics())
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Erro no controller ao listar características: {str(e)}")
            raise HTTPException(status_code=500, detail="Erro interno do servidor")

    def list_characteristics_by_category(self, category_id: Optional[str], db: Session) -> Dict[str, Any]:
        try:
            if not category_id:
                raise HTTPException(status_code=400, detail="categoryId é obrigatório")
            return _raise_on_error(CharacteristicService(db).list_by_category(category_id))
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Erro no controller ao listar características por categoria: {str(e)}")
            raise HTTPException(status_code=500, detail="Erro interno do servidor")

    def save_characteristic(self, data: Dict[str, Any], db: Session,
                            characteristic_id: Optional[int] = None) -> Dict[str, Any]:
        try:
            service = CharacteristicService(db)
            if characteristic_id is None:
                return _raise_on_error(service.create_characteristic(data))
            return _raise_on_error(service.update_characteristic(characteristic_id, data))
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Erro no controller ao salvar característica: {str(e)}")
            raise HTTPException(status_code=500, detail="Erro interno do servidor")

    def delete_characteristic(self, characteristic_id: int, db: Session) -> Dict[str, Any]:
        try:
            return _raise_on_error(CharacteristicService(db).delete_characteristic(characteristic_id))
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Erro no controller ao excluir característica: {str(e)}")
            raise HTTPException(status_code=500, detail="Erro interno do servidor")

    def generate_characteristics(self, product_id: Optional[int], db: Session) -> Dict[str, Any]:
        try:
            if not product_id:
                raise HTTPException(status_code=400, detail="productId é obrigatório")
            return _raise_on_error(CharacteristicService(db).generate_for_product(product_id))
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Erro no controller ao gerar características: {str(e)}")
            raise HTTPException(status_code=500, detail="Erro interno do servidor")

    def list_answers(self, product_id: Optional[int], db: Session) -> Dict[str, Any]:
        try:
            if not product_id:
                raise HTTPException(status_code=400, detail="productId é obrigatório")
            return _raise_on_error(CharacteristicService(db).list_answers(product_id))
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Erro no controller ao listar respostas: {str(e)}")
            raise HTTPException(status_code=500, detail="Erro interno do servidor")
