"""
Serviço de análise de imagens de produto via OpenAI (visão)
"""
import time
import logging
from datetime import datetime
from typing import Dict, List, Optional, Any
from sqlalchemy.orm import Session

from app.config.default_agents import DEFAULT_AGENTS, IMAGE_ANALYSIS
from app.models.catalog_models import ProductVtex, SkuVtex, ImageVtex, BrandVtex, CategoryVtex, ProductAttributeVtex
from app.models.content_models import ImageAnalysis, Characteristic
from app.services.agent_service import AgentService
from app.services.characteristic_service import characteristics_for_category
from app.services.openai_service import OpenAIChatService
from app.utils.sync_logger import get_sync_logger

logger = logging.getLogger(__name__)

MAX_IMAGES_PER_ANALYSIS = 2
ANALYSIS_QUALITY = "média-alta"
PRODUCT_TYPES = ("camiseta", "calça", "vestido", "moletom", "jaqueta")

OPENAI_FAILURE_MESSAGE = (
    "Falha na análise com OpenAI. Configure a chave OPENAI_API_KEY no arquivo .env e tente novamente."
)


def detect_product_type(product_name: Optional[str]) -> str:
    """Tipo de produto pelo nome (primeira ocorrência na ordem conhecida)"""
    name = (product_name or "").lower()
    for product_type in PRODUCT_TYPES:
        if product_type in name:
            return product_type
    return "produto"


def build_characteristics_block(characteristics: List[Characteristic]) -> str:
    if not characteristics:
        return ""

    questions = []
    for index, c in enumerate(characteristics, start=1):
        question = f"\n**{index}. {c.caracteristica}:**\n   {c.pergunta_ia}\n"
        if c.valores_possiveis:
            question += f"   \n   **INSTRUÇÃO OBRIGATÓRIA:**\n   {c.valores_possiveis}\n"
        question += (
            "   \n   **RESPOSTA REQUERIDA:**\n"
            "   - Analise as imagens e responda DIRETAMENTE a pergunta\n"
            "   - Siga EXATAMENTE a instrução fornecida\n"
            "   - Seja OBJETIVO e DIRETO na resposta\n"
        )
        questions.append(question)

    return (
        "\n\n**CARACTERÍSTICAS ESPECÍFICAS PARA IDENTIFICAR:**\n"
        + "\n".join(questions)
        + "\n\n**INSTRUÇÕES FINAIS PARA CARACTERÍSTICAS:**\n"
        "- Após sua análise contextual principal, responda DIRETAMENTE cada característica acima\n"
        "- Use formato markdown para as características: \"### Características Específicas\"\n"
        "- Para cada característica, responda apenas: \"**Nome da Característica:** Resposta direta\"\n"
        "- Termine diretamente após responder todas as características"
    )


def build_attributes_block(attributes: List[Dict[str, Any]]) -> str:
    if not attributes:
        return ""
    lines = "\n".join(f"• {a['attribute_name']}: {a['attribute_value']}" for a in attributes)
    return (
        f"\n\n**ATRIBUTOS TÉCNICOS DO PRODUTO:**\n{lines}\n\n"
        "**INSTRUÇÕES PARA ATRIBUTOS TÉCNICOS:**\n"
        "- Use essas informações técnicas para validar e complementar sua análise visual\n"
        "- Se houver discrepância entre atributos e análise visual, priorize o que é visível nas imagens"
    )


class ImageAnalysisService:
    """Análise técnica das imagens de um produto e persistência em analise_imagens"""

    def __init__(self, db: Session, openai_service: Optional[OpenAIChatService] = None):
        self.db = db
        self.openai = openai_service

    def get_latest_analysis(self, product_id: int) -> Dict[str, Any]:
        """Última análise do produto com os dados básicos do produto"""
        row = self.db.query(ImageAnalysis, ProductVtex).join(
            ProductVtex, ImageAnalysis.id_produto_vtex == ProductVtex.id_produto_vtex
        ).filter(ImageAnalysis.id_produto_vtex == product_id).order_by(
            ImageAnalysis.generated_at.desc()
        ).first()

        if not row:
            return {"error": "Nenhuma análise encontrada para este produto", "status_code": 404}

        analysis, product = row
        data = analysis.to_dict()
        data["product_name"] = product.name
        data["product_title"] = product.title
        data["ref_produto"] = product.ref_produto
        return {"success": True, "analysis": data}

    def has_generated_analysis(self, product_id: Any) -> bool:
        return self.db.query(ImageAnalysis.id).filter(
            ImageAnalysis.id_produto_vtex == product_id,
            ImageAnalysis.status == "generated"
        ).first() is not None

    def _resolve_agent(self) -> Dict[str, Any]:
        agent = AgentService(self.db).get_active_agent(IMAGE_ANALYSIS)
        if agent:
            return {
                "id": agent.id,
                "name": agent.name,
                "model": agent.model,
                "max_tokens": agent.max_tokens or DEFAULT_AGENTS[IMAGE_ANALYSIS]["max_tokens"],
                "temperature": agent.temperature if agent.temperature is not None else DEFAULT_AGENTS[IMAGE_ANALYSIS]["temperature"],
                "system_prompt": agent.system_prompt,
                "guidelines_template": agent.guidelines_template or DEFAULT_AGENTS[IMAGE_ANALYSIS]["guidelines_template"],
            }
        return {"id": None, **DEFAULT_AGENTS[IMAGE_ANALYSIS]}

    def _product_images(self, product_id: int) -> List[ImageVtex]:
        return self.db.query(ImageVtex).join(
            SkuVtex, ImageVtex.id_sku_vtex == SkuVtex.id_sku_vtex
        ).filter(SkuVtex.id_produto_vtex == product_id).order_by(
            ImageVtex.is_main.desc(), ImageVtex.id_photo_vtex.asc()
        ).limit(MAX_IMAGES_PER_ANALYSIS).all()

    def _build_messages(self, agent: Dict[str, Any], product: Dict[str, Any], images: List[Dict[str, Any]],
                        characteristics: List[Characteristic], attributes: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        text = f"""{agent['guidelines_template']}

**DADOS COMPLETOS DO PRODUTO:**
Nome do Produto: {product['name']}
Marca: {product.get('brand_name') or 'N/A'}
Categoria: {product.get('category_name') or 'N/A'}
Descrição: {product.get('description') or 'N/A'}
Título: {product.get('title') or 'N/A'}
Palavras-chave: {product.get('keywords') or 'N/A'}
REF_ID: {product.get('ref_id') or 'N/A'}{build_attributes_block(attributes)}

**INSTRUÇÃO FINAL CRÍTICA:**
Você DEVE produzir uma análise técnica EXTREMAMENTE DETALHADA seguindo RIGOROSAMENTE a estrutura de 9 pontos especificada. Você receberá até {MAX_IMAGES_PER_ANALYSIS} imagens do produto para análise. Cada seção deve ser um parágrafo corrido e fluido. NÃO use bullets, listas ou formatação JSON.
{build_characteristics_block(characteristics)}"""

        content = [{"type": "text", "text": text}]
        content.extend(
            {"type": "image_url", "image_url": {"url": img["url"], "detail": "high"}}
            for img in images
        )

        messages = []
        if agent.get("system_prompt"):
            messages.append({"role": "system", "content": agent["system_prompt"]})
        messages.append({"role": "user", "content": content})
        return messages

    def analyze_product(self, product_id: int, category_vtex_id: Any, force_new_analysis: bool = False) -> Dict[str, Any]:
        """
        Analisa até duas imagens do produto com o agente de análise de imagem
        e grava (upsert) o resultado em analise_imagens.

        Toda chamada gera uma nova análise; forceNewAnalysis é aceito do
        cliente e apenas registrado no log.
        """
        start_time = time.time()

        if not product_id:
            return {"error": "ID do produto é obrigatório"}
        if not category_vtex_id:
            return {"error": "categoryVtexId é obrigatório"}

        try:
            logger.info(f"🔄 Analisando imagens do produto {product_id} (forceNewAnalysis={force_new_analysis})")
            agent = self._resolve_agent()

            image_rows = self._product_images(product_id)
            if not image_rows:
                return {"error": "Nenhuma imagem encontrada para este produto", "status_code": 404}

            images = [
                {
                    "id": img.id_photo_vtex,
                    "url": img.file_location or img.url,
                    "alt_text": img.text,
                    "is_primary": img.is_main,
                    "name": img.name,
                    "label": img.label,
                    "valid": True
                }
                for img in image_rows
            ]

            row = self.db.query(ProductVtex, BrandVtex.name, CategoryVtex.name).outerjoin(
                BrandVtex, ProductVtex.id_brand_vtex == BrandVtex.id_brand_vtex
            ).outerjoin(
                CategoryVtex, ProductVtex.id_category_vtex == CategoryVtex.id_category_vtex
            ).filter(ProductVtex.id_produto_vtex == product_id).first()

            if not row:
                return {"error": "Produto não encontrado", "status_code": 404}

            product_row, brand_name, category_name = row
            product = {
                "id": product_row.id_produto_vtex,
                "name": product_row.name,
                "title": product_row.title,
                "description": product_row.description,
                "keywords": product_row.keywords,
                "ref_id": product_row.ref_produto,
                "brand_name": brand_name,
                "category_name": category_name,
            }

            attributes = [
                {"attribute_name": a.attribute_name, "attribute_value": a.attribute_value}
                for a in self.db.query(ProductAttributeVtex).filter(
                    ProductAttributeVtex.id_product_vtex == product_id
                ).order_by(ProductAttributeVtex.attribute_name).all()
            ]

            characteristics = characteristics_for_category(self.db, category_vtex_id)
            if not characteristics:
                return {
                    "error": f"Nenhuma característica está configurada para a categoria \"ID: {category_vtex_id}\". "
                             f"Configure as características para esta categoria primeiro."
                }

            openai_result = self._call_openai(agent, product, images, characteristics, attributes)
            if not openai_result or not openai_result.get("content"):
                get_sync_logger().log_event("image_analysis", {"description": "Análise de imagem"},
                                            product_id=product_id, success=False,
                                            error_message="Falha na chamada OpenAI")
                return {"error": OPENAI_FAILURE_MESSAGE, "status_code": 500}

            product_type = detect_product_type(product["name"])
            duration_ms = int((time.time() - start_time) * 1000)

            analysis = self.db.query(ImageAnalysis).filter(ImageAnalysis.id_produto_vtex == product_id).first()
            if not analysis:
                analysis = ImageAnalysis(id_produto_vtex=product_id)
                self.db.add(analysis)

            analysis.contextualizacao = openai_result["content"]
            analysis.openai_model = openai_result["model"]
            analysis.openai_tokens_used = openai_result["tokens_used"]
            analysis.openai_tokens_prompt = openai_result["tokens_prompt"]
            analysis.openai_tokens_completion = openai_result["tokens_completion"]
            analysis.openai_cost = openai_result["cost"]
            analysis.openai_request_id = openai_result["request_id"]
            analysis.openai_max_tokens = agent["max_tokens"]
            analysis.openai_temperature = agent["temperature"]
            analysis.openai_response_time_ms = openai_result["response_time_ms"]
            analysis.analysis_duration_ms = duration_ms
            analysis.agent_id = agent["id"]
            analysis.agent_name = agent["name"]
            analysis.total_images = len(images)
            analysis.valid_images = len(images)
            analysis.invalid_images = 0
            analysis.product_type = product_type
            analysis.analysis_quality = ANALYSIS_QUALITY
            analysis.status = "generated"
            analysis.generated_at = datetime.now()

            self.db.commit()

            get_sync_logger().log_event(
                "image_analysis",
                {"description": "Análise de imagem", "tokens": openai_result["tokens_used"], "duration_ms": duration_ms},
                product_id=product_id
            )
            logger.info(f"✅ Análise de imagem salva para o produto {product_id} ({len(images)} imagens)")

            return {
                "success": True,
                "analysis": {
                    "product_type": product_type,
                    "image_count": len(images),
                    "invalid_image_count": 0,
                    "contextual_analysis": openai_result["content"],
                    "analysis_quality": {"level": ANALYSIS_QUALITY},
                    "agent_configuration": {
                        "model": agent["model"],
                        "max_tokens": agent["max_tokens"],
                        "temperature": agent["temperature"],
                    },
                    "openai_analysis": openai_result,
                },
                "product": {
                    "id": product["id"],
                    "name": product["name"],
                    "title": product["title"],
                    "description": product["description"],
                },
                "images": images,
                "invalid_images": [],
                "agent_used": agent["name"],
                "product_attributes": attributes,
                "analysis_log": {
                    "duration_ms": duration_ms,
                    "openai_response_time_ms": openai_result["response_time_ms"],
                    "tokens_used": openai_result["tokens_used"],
                    "analysis_type": "openai"
                }
            }

        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Erro ao analisar imagens do produto {product_id}: {str(e)}")
            return {"error": f"Erro interno: {str(e)}", "status_code": 500}

    def _call_openai(self, agent: Dict[str, Any], product: Dict[str, Any], images: List[Dict[str, Any]],
                     characteristics: List[Characteristic], attributes: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        """Chamada à OpenAI; qualquer falha retorna None"""
        openai = self.openai or OpenAIChatService()
        if not openai.is_configured():
            logger.warning("⚠️ Chave da OpenAI não configurada")
            return None

        try:
            return openai.chat(
                model=agent["model"],
                messages=self._build_messages(agent, product, images, characteristics, attributes),
                max_tokens=agent["max_tokens"],
                temperature=agent["temperature"],
                top_p=0.9,
                frequency_penalty=0.1,
                presence_penalty=0.1
            )
        except Exception as e:
            logger.error(f"❌ Erro ao analisar com OpenAI: {str(e)}")
            return None
