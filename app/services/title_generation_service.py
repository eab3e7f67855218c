"""
Geração de títulos SEO para marketplace
"""
import re
import time
import random
import logging
from typing import Dict, List, Optional, Any
from sqlalchemy.orm import Session

from app.config.default_agents import TITLE_GENERATION, TITLE_SYSTEM_PROMPT
from app.models.catalog_models import ProductVtex, SkuVtex, BrandVtex, CategoryVtex, ProductAttributeVtex
from app.models.content_models import Title, ImageAnalysis
from app.services.agent_service import AgentService
from app.services.openai_service import OpenAIChatService

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 60
MAX_ATTEMPTS = 10
TITLE_MAX_TOKENS = 100

FORBIDDEN_WORDS = ["Top", "Promoção", "Mais Barata", "Frete Grátis", "Oferta", "Liquidação"]
PRODUCT_TYPE_PATTERN = re.compile(r"(camiseta|boné|jaqueta|tênis|moletom|calça|short|blusa)", re.IGNORECASE)
AUDIENCE_PATTERN = re.compile(r"(masculin|feminin|unissex|juvenil|infantil)", re.IGNORECASE)
BASIC_PRODUCT_WORDS = ("camiseta", "moletom", "calça", "blusa")

CREATIVE_APPROACHES = [
    "Foque no CONFORTO e QUALIDADE",
    "Destaque o ESTILO e ELEGÂNCIA",
    "Enfatize a VERSATILIDADE",
    "Destaque a DURABILIDADE",
    "Foque na MODERNIDADE",
    "Enfatize a AUTENTICIDADE",
]


def validate_title(title: Optional[str]) -> Dict[str, Any]:
    """Valida o título contra as regras do marketplace"""
    errors: List[str] = []

    if not title or not title.strip():
        return {"isValid": False, "errors": ["Título vazio"]}

    if len(title) > MAX_TITLE_LENGTH:
        errors.append(f"Título muito longo: {len(title)} caracteres (máximo {MAX_TITLE_LENGTH})")

    if "-" in title:
        errors.append("Título contém hífens (-) que não são permitidos")

    lower_title = title.lower()
    found = [word for word in FORBIDDEN_WORDS if word.lower() in lower_title]
    if found:
        errors.append(f"Título contém palavras proibidas: {', '.join(found)}")

    words = title.strip().split()
    last_word = words[-1] if words else ""
    if (len(last_word) < 3 and len(words) > 1) or title.endswith("..") or title.endswith("..."):
        errors.append("Título parece ter palavras truncadas ou cortadas")

    if not PRODUCT_TYPE_PATTERN.search(title):
        errors.append("Título deve incluir o tipo de produto")

    if not AUDIENCE_PATTERN.search(title):
        errors.append("Título deve incluir o público (Masculino, Feminino, Unissex, etc.)")

    return {"isValid": not errors, "errors": errors}


def fix_title_issues(title: str) -> str:
    """Corrige problemas simples; retorna "" se o título continuar longo demais"""
    fixed = title.replace("-", " ")
    for word in FORBIDDEN_WORDS:
        fixed = re.sub(re.escape(word), "", fixed, flags=re.IGNORECASE)
    fixed = re.sub(r"\s+", " ", fixed).strip()

    if len(fixed) > MAX_TITLE_LENGTH:
        return ""
    return fixed


def strip_quotes(title: str) -> str:
    return re.sub(r'^["\'“”]+|["\'“”]+$', "", title.strip()).strip()


def has_basic_info(title: str, brand_name: Optional[str], category_name: Optional[str]) -> bool:
    """O título precisa citar a marca, a categoria ou um tipo básico de produto"""
    lower_title = title.lower()
    if brand_name and brand_name.lower() in lower_title:
        return True
    if category_name and category_name.lower() in lower_title:
        return True
    return any(word in lower_title for word in BASIC_PRODUCT_WORDS)


def make_unique_suffix(title: str) -> str:
    """Anexa os 4 últimos dígitos do timestamp, mantendo o limite de caracteres"""
    suffix = str(int(time.time() * 1000))[-4:]
    base = title[:MAX_TITLE_LENGTH - len(suffix) - 1].rstrip()
    return f"{base} {suffix}"


class TitleGenerationService:
    """Gera, valida e grava títulos únicos por produto"""

    def __init__(self, db: Session, openai_service: Optional[OpenAIChatService] = None):
        self.db = db
        self.openai = openai_service

    def list_titles(self, product_id: Optional[int] = None) -> Dict[str, Any]:
        query = self.db.query(Title)
        if product_id:
            query = query.filter(Title.id_product_vtex == product_id)
        titles = query.order_by(Title.created_at.desc(), Title.id.desc()).all()
        return {"success": True, "data": [t.to_dict() for t in titles], "total": len(titles)}

    def is_title_unique(self, title: str, product_id: int) -> bool:
        """Único se nenhum outro produto usa o mesmo título (titles ou products_vtex)"""
        in_titles = self.db.query(Title.id).filter(
            Title.title == title, Title.id_product_vtex != product_id
        ).first()
        if in_titles:
            return False
        in_products = self.db.query(ProductVtex.id_produto_vtex).filter(
            ProductVtex.title == title, ProductVtex.id_produto_vtex != product_id
        ).first()
        return in_products is None

    def _build_user_prompt(self, product: ProductVtex, brand_name: Optional[str], category_name: Optional[str],
                           analysis: ImageAnalysis, skus: List[SkuVtex],
                           attributes: List[ProductAttributeVtex], attempt: int) -> str:
        specs = "\n".join(
            f"{i}. {a.attribute_name}: {a.attribute_value or 'N/A'}" for i, a in enumerate(attributes, start=1)
        ) or "Nenhuma especificação encontrada"
        sku_lines = "\n".join(
            f"SKU {i}: {s.name or 'N/A'} - {s.manufacturer_code or 'N/A'}" for i, s in enumerate(skus, start=1)
        ) or "Nenhum SKU encontrado"

        return f"""Crie um título perfeito para marketplace seguindo a estrutura ideal:

=== ANÁLISE DA FOTOGRAFIA ===
{analysis.contextualizacao or 'Nenhuma análise de imagem disponível'}

=== DADOS DO PRODUTO ===
Nome Original: {product.name}
Marca: {brand_name or 'N/A'}
Categoria: {category_name or 'N/A'}
Ref ID: {product.ref_produto or 'N/A'}

=== ESPECIFICAÇÕES TÉCNICAS ===
{specs}

=== DADOS DOS SKUs ===
{sku_lines}

=== INSTRUÇÕES CRÍTICAS ===
- Abordagem desta tentativa: {random.choice(CREATIVE_APPROACHES)}
- Máximo {MAX_TITLE_LENGTH} caracteres
- Sem hífens (-)
- Evite palavras promocionais proibidas
- NUNCA cortar ou truncar palavras
- Tentativa {attempt} de {MAX_ATTEMPTS}

Responda APENAS com o título otimizado, sem explicações ou formatação adicional."""

    def generate_title(self, product_id: int, force_regenerate: bool = False) -> Dict[str, Any]:
        if not product_id:
            return {"error": "ID do produto é obrigatório"}

        try:
            agent = AgentService(self.db).get_active_agent(TITLE_GENERATION)
            if not agent:
                return {"error": "Agente de geração de títulos não encontrado", "status_code": 404}

            openai = self.openai or OpenAIChatService()
            if not openai.is_configured():
                return {"error": "OpenAI API Key não configurada", "status_code": 500}

            row = self.db.query(ProductVtex, BrandVtex.name, CategoryVtex.name).outerjoin(
                BrandVtex, ProductVtex.id_brand_vtex == BrandVtex.id_brand_vtex
            ).outerjoin(
                CategoryVtex, ProductVtex.id_category_vtex == CategoryVtex.id_category_vtex
            ).filter(ProductVtex.id_produto_vtex == product_id).first()
            if not row:
                return {"error": "Produto não encontrado", "status_code": 404}
            product, brand_name, category_name = row

            analysis = self.db.query(ImageAnalysis).filter(ImageAnalysis.id_produto_vtex == product_id).first()
            if not analysis:
                return {"error": "Execute a análise de imagem primeiro"}

            existing = self.db.query(Title).filter(
                Title.id_product_vtex == product_id, Title.status == "validated"
            ).order_by(Title.created_at.desc(), Title.id.desc()).first()

            if existing and not force_regenerate:
                return {
                    "success": True,
                    "message": "Título já existente",
                    "data": existing.to_dict(),
                    "existing": True
                }

            if force_regenerate:
                self.db.query(Title).filter(Title.id_product_vtex == product_id).delete()
                self.db.commit()

            skus = self.db.query(SkuVtex).filter(SkuVtex.id_produto_vtex == product_id).all()
            attributes = self.db.query(ProductAttributeVtex).filter(
                ProductAttributeVtex.id_product_vtex == product_id
            ).order_by(ProductAttributeVtex.attribute_name).all()

            generated = self._generate_with_retries(
                agent, openai, product, brand_name, category_name, analysis, skus, attributes
            )
            if "error" in generated:
                return generated

            metrics = generated["metrics"]
            title = Title(
                id_product_vtex=product_id,
                title=generated["title"],
                original_title=product.name,
                agent_id=agent.id,
                openai_model=metrics["model"],
                openai_tokens_used=metrics["tokens_used"],
                openai_tokens_prompt=metrics["tokens_prompt"],
                openai_tokens_completion=metrics["tokens_completion"],
                openai_cost=metrics["cost"],
                openai_request_id=metrics["request_id"],
                openai_response_time_ms=metrics["response_time_ms"],
                openai_max_tokens=TITLE_MAX_TOKENS,
                openai_temperature=metrics["temperature"],
                generation_attempts=generated["attempts"],
                is_unique=True,
                validation_passed=True,
                status="validated"
            )
            self.db.add(title)
            self.db.commit()
            self.db.refresh(title)

            logger.info(f"✅ Título gerado para o produto {product_id}: {title.title} ({generated['attempts']} tentativas)")
            return {"success": True, "message": "Título gerado com sucesso", "data": title.to_dict()}

        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Erro ao gerar título do produto {product_id}: {str(e)}")
            return {"error": f"Erro interno: {str(e)}", "status_code": 500}

    def _generate_with_retries(self, agent, openai: OpenAIChatService, product: ProductVtex,
                               brand_name: Optional[str], category_name: Optional[str],
                               analysis: ImageAnalysis, skus: List[SkuVtex],
                               attributes: List[ProductAttributeVtex]) -> Dict[str, Any]:
        system_prompt = agent.system_prompt or TITLE_SYSTEM_PROMPT
        base_temperature = agent.temperature if agent.temperature is not None else 0.7
        last_error = "Não foi possível gerar um título válido"

        for attempt in range(1, MAX_ATTEMPTS + 1):
            is_last = attempt == MAX_ATTEMPTS
            temperature = min(base_temperature + attempt * 0.15 + 0.2, 0.9)
            logger.info(f"🔄 Tentativa {attempt}/{MAX_ATTEMPTS} de geração de título (temperatura {temperature:.2f})")

            try:
                result = openai.chat(
                    model=agent.model,
                    messages=[
                        {"role": "system", "content": system_prompt},
                        {"role": "user", "content": self._build_user_prompt(
                            product, brand_name, category_name, analysis, skus, attributes, attempt
                        )}
                    ],
                    max_tokens=TITLE_MAX_TOKENS,
                    temperature=temperature
                )
            except Exception as e:
                logger.warning(f"⚠️ Erro da OpenAI na tentativa {attempt}: {str(e)}")
                last_error = f"Erro da OpenAI: {str(e)}"
                continue

            title = strip_quotes(result["content"])

            validation = validate_title(title)
            if not validation["isValid"]:
                if not is_last:
                    logger.warning(f"⚠️ Título inválido ({'; '.join(validation['errors'])}): {title}")
                    last_error = "; ".join(validation["errors"])
                    continue
                title = fix_title_issues(title)

            if not title:
                last_error = "Título vazio após correções"
                continue

            if not has_basic_info(title, brand_name, category_name):
                logger.warning(f"⚠️ Título sem informações básicas: {title}")
                last_error = "Título não contém marca, categoria ou tipo de produto"
                continue

            if not self.is_title_unique(title, product.id_produto_vtex):
                if not is_last:
                    logger.warning(f"⚠️ Título duplicado: {title}")
                    last_error = "Título duplicado"
                    continue
                title = make_unique_suffix(title)

            return {"title": title, "attempts": attempt, "metrics": result}

        return {"error": f"Falha ao gerar título após {MAX_ATTEMPTS} tentativas: {last_error}", "status_code": 500}
