"""
Remoção de fundo de imagens via Pixian.ai
"""
import os
import re
import time
import logging
import httpx
from typing import Dict, Optional, Any

from app.config.settings import settings
from app.utils.sync_logger import get_sync_logger

logger = logging.getLogger(__name__)

PIXIAN_TIMEOUT = 120.0

# Parâmetros fixos: fundo branco, 1500x1500, produto centralizado com margem lateral
PIXIAN_OPTIONS = {
    "background.color": "#FFFFFF",
    "result.crop_to_foreground": "true",
    "result.target_size": "1500 1500",
    "result.vertical_alignment": "middle",
    "result.margin": "0px 150px 0px 150px",
    "output.format": "jpeg",
    "output.jpeg_quality": "90",
}


class PixianService:
    """Processa imagens na Pixian e grava o JPEG resultante localmente"""

    def __init__(self, api_id: Optional[str] = None, api_secret: Optional[str] = None,
                 output_dir: Optional[str] = None):
        self.api_id = api_id if api_id is not None else settings.pixian_api_id
        self.api_secret = api_secret if api_secret is not None else settings.pixian_api_secret
        self.api_url = settings.pixian_api_url
        self.output_dir = output_dir or settings.processed_images_dir

    def process_image(self, image_url: Optional[str], product_id: Optional[Any] = None) -> Dict[str, Any]:
        if not image_url:
            return {"error": "URL da imagem é obrigatória"}
        if not self.api_id or not self.api_secret:
            return {"error": "Credenciais Pixian não configuradas (PIXIAN_API_ID, PIXIAN_API_SECRET)"}

        start_time = time.time()
        try:
            logger.info(f"🔄 Enviando imagem para Pixian: {image_url}")
            # multipart/form-data com campos de texto
            files = {key: (None, value) for key, value in {"image.url": image_url, **PIXIAN_OPTIONS}.items()}
            response = httpx.post(
                self.api_url,
                auth=(self.api_id, self.api_secret),
                files=files,
                timeout=PIXIAN_TIMEOUT
            )
            elapsed_ms = int((time.time() - start_time) * 1000)
            get_sync_logger().log_api_call("pixian", "POST", self.api_url, response.status_code, elapsed_ms)

            if response.status_code != 200:
                logger.error(f"❌ Erro Pixian {response.status_code}: {response.text[:300]}")
                return {
                    "error": f"Erro na API Pixian: {response.status_code} - {response.text[:300]}",
                    "status_code": response.status_code
                }

            os.makedirs(self.output_dir, exist_ok=True)
            safe_product = re.sub(r"[^A-Za-z0-9_-]", "_", str(product_id or "imagem"))
            filename = f"{safe_product}_{int(time.time() * 1000)}.jpg"
            file_path = os.path.join(self.output_dir, filename)

            with open(file_path, "wb") as f:
                f.write(response.content)

            get_sync_logger().log_event(
                "pixian",
                {"description": f"Imagem processada: {filename}", "size": len(response.content)},
                success=True
            )
            logger.info(f"✅ Imagem processada salva em {file_path} ({len(response.content)} bytes)")

            return {
                "success": True,
                "message": "Imagem processada com sucesso",
                "data": {
                    "fileName": filename,
                    "size": len(response.content),
                    "path": f"/processed-images/{filename}",
                    "processingTime": elapsed_ms
                }
            }

        except httpx.HTTPError as e:
            logger.error(f"❌ Erro de conexão com a Pixian: {str(e)}")
            return {"error": f"Erro de conexão com a Pixian: {str(e)}", "status_code": 502}
        except OSError as e:
            logger.error(f"❌ Erro ao salvar imagem processada: {str(e)}")
            return {"error": f"Erro ao salvar imagem processada: {str(e)}", "status_code": 500}
