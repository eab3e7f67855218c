"""
Geração de descrições de produto com FAQ
"""
import json
import time
import logging
from typing import Dict, List, Optional, Any
from sqlalchemy.orm import Session

from app.config.default_agents import PRODUCT_DESCRIPTION, DESCRIPTION_SYSTEM_PROMPT, DESCRIPTION_GUIDELINES
from app.models.catalog_models import ProductVtex, BrandVtex, CategoryVtex
from app.models.content_models import Title, Description, ImageAnalysis
from app.services.agent_service import AgentService
from app.services.openai_service import OpenAIChatService

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 3


def parse_description_output(content: str) -> Dict[str, Any]:
    """
    Separa a saída do modelo em descrição e FAQ.

    O texto antes de "FAQ:" (sem o rótulo "DESCRIÇÃO:") é a descrição; depois
    dele, cada linha "P:" seguida de uma linha "R:" vira um item do FAQ.
    """
    parts = content.split("FAQ:", 1)
    description = parts[0].replace("DESCRIÇÃO:", "").strip()
    faq_text = parts[1].strip() if len(parts) > 1 else ""

    faq: List[Dict[str, str]] = []
    question = None
    for line in (l.strip() for l in faq_text.split("\n")):
        if not line:
            continue
        if line.startswith("P:"):
            question = line[2:].strip()
        elif line.startswith("R:") and question:
            answer = line[2:].strip()
            if answer:
                faq.append({"question": question, "answer": answer})
            question = None

    return {"description": description, "faq": faq}


def fill_guidelines(template: str, values: Dict[str, str]) -> str:
    filled = template
    for key, value in values.items():
        filled = filled.replace("{" + key + "}", value)
    return filled


class DescriptionService:
    """Gera e grava descrições a partir do título validado e da análise de imagem"""

    def __init__(self, db: Session, openai_service: Optional[OpenAIChatService] = None):
        self.db = db
        self.openai = openai_service

    def list_descriptions(self, product_id: Optional[int] = None) -> Dict[str, Any]:
        query = self.db.query(Description)
        if product_id:
            query = query.filter(Description.id_product_vtex == product_id)
        items = query.order_by(Description.created_at.desc(), Description.id.desc()).all()
        return {"success": True, "data": [d.to_dict() for d in items], "total": len(items)}

    def generate_description(self, product_id: int, force_regenerate: bool = False) -> Dict[str, Any]:
        if not product_id:
            return {"error": "ID do produto é obrigatório"}

        try:
            title = self.db.query(Title).filter(
                Title.id_product_vtex == product_id, Title.status == "validated"
            ).order_by(Title.created_at.desc(), Title.id.desc()).first()
            if not title:
                return {"error": "Produto não possui título gerado. Gere um título primeiro."}

            existing = self.db.query(Description).filter(
                Description.id_product_vtex == product_id, Description.status == "generated"
            ).order_by(Description.created_at.desc(), Description.id.desc()).first()
            if existing and not force_regenerate:
                return {
                    "success": True,
                    "message": "Descrição já existente",
                    "data": existing.to_dict(),
                    "existing": True
                }

            if force_regenerate:
                self.db.query(Description).filter(Description.id_product_vtex == product_id).delete()
                self.db.commit()

            agent = AgentService(self.db).ensure_default_agent(PRODUCT_DESCRIPTION)

            openai = self.openai or OpenAIChatService()
            if not openai.is_configured():
                return {"error": "OpenAI API Key não configurada", "status_code": 500}

            row = self.db.query(ProductVtex, BrandVtex.name, CategoryVtex.name).outerjoin(
                BrandVtex, ProductVtex.id_brand_vtex == BrandVtex.id_brand_vtex
            ).outerjoin(
                CategoryVtex, ProductVtex.id_category_vtex == CategoryVtex.id_category_vtex
            ).filter(ProductVtex.id_produto_vtex == product_id).first()
            product, brand_name, category_name = row if row else (None, None, None)

            analysis = self.db.query(ImageAnalysis).filter(ImageAnalysis.id_produto_vtex == product_id).first()

            user_prompt = fill_guidelines(agent.guidelines_template or DESCRIPTION_GUIDELINES, {
                "title": title.title,
                "imageAnalysis": analysis.contextualizacao if analysis and analysis.contextualizacao
                else "Nenhuma análise de imagem disponível",
                "productName": product.name if product else "N/A",
                "brandName": brand_name or "N/A",
                "categoryName": category_name or "N/A",
            })

            return self._generate_with_retries(product_id, agent, openai, user_prompt, title.title)

        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Erro ao gerar descrição do produto {product_id}: {str(e)}")
            return {"error": f"Erro interno: {str(e)}", "status_code": 500}

    def _generate_with_retries(self, product_id: int, agent, openai: OpenAIChatService,
                               user_prompt: str, title: str) -> Dict[str, Any]:
        last_error = "Máximo de tentativas excedido"
        temperature = agent.temperature if agent.temperature is not None else 0.7
        max_tokens = agent.max_tokens or 1000

        for attempt in range(1, MAX_ATTEMPTS + 1):
            logger.info(f"🔄 Tentativa {attempt}/{MAX_ATTEMPTS} de geração de descrição")
            start_time = time.time()

            try:
                result = openai.chat(
                    model=agent.model or "gpt-4o-mini",
                    messages=[
                        {"role": "system", "content": agent.system_prompt or DESCRIPTION_SYSTEM_PROMPT},
                        {"role": "user", "content": user_prompt}
                    ],
                    max_tokens=max_tokens,
                    temperature=temperature
                )
            except Exception as e:
                logger.warning(f"⚠️ Erro da OpenAI na tentativa {attempt}: {str(e)}")
                last_error = f"Erro da OpenAI: {str(e)}"
                continue

            if not result["content"]:
                logger.warning(f"⚠️ Resposta vazia da OpenAI (tentativa {attempt})")
                last_error = "Resposta vazia da OpenAI"
                continue

            parsed = parse_description_output(result["content"])
            if not parsed["description"]:
                last_error = "Descrição vazia na resposta da OpenAI"
                continue

            description = Description(
                id_product_vtex=product_id,
                description=parsed["description"],
                faq=json.dumps(parsed["faq"], ensure_ascii=False) if parsed["faq"] else None,
                openai_model=result["model"],
                openai_tokens_used=result["tokens_used"],
                openai_tokens_prompt=result["tokens_prompt"],
                openai_tokens_completion=result["tokens_completion"],
                openai_cost=result["cost"],
                openai_request_id=result["request_id"],
                openai_response_time_ms=result["response_time_ms"],
                openai_max_tokens=max_tokens,
                openai_temperature=temperature,
                agent_id=agent.id,
                agent_name=agent.name,
                generation_duration_ms=int((time.time() - start_time) * 1000),
                status="generated"
            )
            self.db.add(description)
            self.db.commit()
            self.db.refresh(description)

            logger.info(f"✅ Descrição gerada para o produto {product_id} ({len(parsed['faq'])} perguntas no FAQ)")
            return {
                "success": True,
                "message": "Descrição gerada com sucesso",
                "data": {
                    **description.to_dict(),
                    "optimizedTitle": title,
                    "tokensUsed": result["tokens_used"],
                    "cost": result["cost"],
                    "responseTime": result["response_time_ms"]
                }
            }

        return {"error": last_error, "status_code": 500}
