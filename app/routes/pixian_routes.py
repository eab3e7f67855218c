"""
Rotas de processamento de imagens (remoção de fundo)
"""
from fastapi import APIRouter

from app.controllers.pixian_controller import PixianController
from app.models.api_models import PixianRequest

pixian_router = APIRouter(tags=["Pixian"])

pixian_controller = PixianController()


@pixian_router.post("/process-pixian")
def process_pixian(payload: PixianRequest):
    """Remove o fundo da imagem e salva o JPEG em /processed-images"""
    return pixian_controller.process_image(payload.image_url, payload.product_id)
