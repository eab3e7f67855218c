"""
Serviço de características de produto (configuração e respostas geradas por IA)
"""
import json
import logging
from typing import Dict, List, Optional, Any
from sqlalchemy.orm import Session

from app.models.catalog_models import ProductVtex, BrandVtex, CategoryVtex, ProductAttributeVtex
from app.models.content_models import Characteristic, CharacteristicAnswer, ImageAnalysis, Description
from app.services.openai_service import OpenAIChatService

logger = logging.getLogger(__name__)

CHARACTERISTICS_MODEL = "gpt-4o-mini"
CHARACTERISTICS_MAX_TOKENS = 3000
CHARACTERISTICS_TEMPERATURE = 0.1

# Respostas descartadas (comparação em minúsculas)
INVALID_ANSWERS = {
    "n/a", "na", "não disponível", "não identificável", "não aplicável", "não se aplica",
    "não especificado", "não informado", "não definido", "não determinado",
    "não identificado", "não encontrado",
}

CHARACTERISTICS_SYSTEM_PROMPT = """Você é um especialista em análise de produtos para e-commerce com expertise em moda, design e características visuais. Sua tarefa é analisar produtos e responder perguntas sobre suas características.

REGRAS CRÍTICAS:
1. Se você NÃO conseguir identificar uma característica com confiança, use "N/A" como resposta
2. NUNCA invente ou assuma características que não estão claramente visíveis ou descritas
3. Seja específico e preciso, evite respostas genéricas como "pode variar"
4. Para cores, use nomes específicos (ex: "Azul marinho", "Branco off-white")
5. Para materiais, seja específico (ex: "Algodão 100%", "Poliéster com elastano")

Formato obrigatório da resposta (JSON válido):
{
  "respostas": [
    {"caracteristica": "Nome da Característica", "resposta": "Resposta específica ou N/A"}
  ]
}"""


def is_valid_answer(answer: Optional[str]) -> bool:
    """Resposta útil: não vazia, com 3+ caracteres e fora da lista de 'não disponível'"""
    if not answer or not isinstance(answer, str):
        return False
    cleaned = answer.strip().lower()
    return bool(cleaned) and cleaned not in INVALID_ANSWERS and len(cleaned) > 2


def characteristics_for_category(db: Session, category_id: Any) -> List[Characteristic]:
    """Características ativas cujo campo 'categorias' inclui o ID informado"""
    if category_id is None:
        return []
    target = str(category_id).strip()
    active = db.query(Characteristic).filter(Characteristic.is_active == True).order_by(
        Characteristic.caracteristica
    ).all()
    return [c for c in active if target in c.category_ids()]


class CharacteristicService:
    """Configuração de características e geração de respostas por IA"""

    def __init__(self, db: Session, openai_service: Optional[OpenAIChatService] = None):
        self.db = db
        self.openai = openai_service

    # CRUD

    def list_characteristics(self) -> Dict[str, Any]:
        items = self.db.query(Characteristic).order_by(Characteristic.caracteristica).all()
        return {"success": True, "data": [c.to_dict() for c in items], "total": len(items)}

    def list_by_category(self, category_id: Any) -> Dict[str, Any]:
        if category_id is None or str(category_id).strip() == "":
            return {"error": "ID da categoria é obrigatório"}
        items = characteristics_for_category(self.db, category_id)
        return {"success": True, "data": [c.to_dict() for c in items], "total": len(items)}

    def create_characteristic(self, data: Dict[str, Any]) -> Dict[str, Any]:
        if not data.get("caracteristica") or not data.get("pergunta_ia"):
            return {"error": "Característica e pergunta IA são obrigatórias"}

        try:
            item = Characteristic(
                caracteristica=data["caracteristica"].strip(),
                pergunta_ia=data["pergunta_ia"].strip(),
                valores_possiveis=data.get("valores_possiveis"),
                categorias=data.get("categorias"),
                is_active=data.get("is_active") if data.get("is_active") is not None else True
            )
            self.db.add(item)
            self.db.commit()
            self.db.refresh(item)
            return {"success": True, "message": "Característica criada com sucesso", "data": item.to_dict()}
        except Exception as e:
            self.db.rollback()
            logger.error(f"Erro ao criar característica: {str(e)}")
            return {"error": f"Erro interno: {str(e)}", "status_code": 500}

    def update_characteristic(self, characteristic_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            item = self.db.query(Characteristic).filter(Characteristic.id == characteristic_id).first()
            if not item:
                return {"error": "Característica não encontrada", "status_code": 404}

            for field in ("caracteristica", "pergunta_ia", "valores_possiveis", "categorias", "is_active"):
                if data.get(field) is not None:
                    setattr(item, field, data[field])

            self.db.commit()
            self.db.refresh(item)
            return {"success": True, "message": "Característica atualizada com sucesso", "data": item.to_dict()}
        except Exception as e:
            self.db.rollback()
            logger.error(f"Erro ao atualizar característica {characteristic_id}: {str(e)}")
            return {"error": f"Erro interno: {str(e)}", "status_code": 500}

    def delete_characteristic(self, characteristic_id: int) -> Dict[str, Any]:
        try:
            item = self.db.query(Characteristic).filter(Characteristic.id == characteristic_id).first()
            if not item:
                return {"error": "Característica não encontrada", "status_code": 404}

            self.db.delete(item)
            self.db.commit()
            return {"success": True, "message": "Característica excluída com sucesso"}
        except Exception as e:
            self.db.rollback()
            logger.error(f"Erro ao excluir característica {characteristic_id}: {str(e)}")
            return {"error": f"Erro interno: {str(e)}", "status_code": 500}

    # Respostas

    def list_answers(self, product_id: int) -> Dict[str, Any]:
        """Respostas do produto restritas às características ativas da sua categoria"""
        product = self.db.query(ProductVtex).filter(ProductVtex.id_produto_vtex == product_id).first()
        if not product:
            return {"error": "Produto não encontrado", "status_code": 404}

        configured = {c.caracteristica: c for c in characteristics_for_category(self.db, product.id_category_vtex)}
        answers = self.db.query(CharacteristicAnswer).filter(
            CharacteristicAnswer.produto_id == product_id
        ).order_by(CharacteristicAnswer.caracteristica).all()

        data = []
        for answer in answers:
            characteristic = configured.get(answer.caracteristica)
            if not characteristic:
                continue
            item = answer.to_dict()
            item["pergunta_ia"] = characteristic.pergunta_ia
            item["valores_possiveis"] = characteristic.valores_possiveis
            data.append(item)

        return {"success": True, "data": data, "total": len(data)}

    def _build_user_prompt(self, product: ProductVtex, brand_name: Optional[str], category_name: Optional[str],
                           attributes: List[ProductAttributeVtex], analysis: Optional[ImageAnalysis],
                           description: Optional[Description], characteristics: List[Characteristic]) -> str:
        attributes_info = ""
        if attributes:
            attributes_info = "\n\n=== ATRIBUTOS TÉCNICOS DO PRODUTO ===\n" + "\n".join(
                f"• {a.attribute_name}: {a.attribute_value}" for a in attributes
            )

        questions = "\n\n".join(
            f"{c.id}. {c.caracteristica}: {c.pergunta_ia}\n   Valores possíveis: {c.valores_possiveis or 'N/A'}"
            for c in characteristics
        )

        return f"""=== INFORMAÇÕES DO PRODUTO ===
Nome: {product.name}
Ref ID: {product.ref_produto or 'N/A'}
Marca: {brand_name or 'N/A'}
Categoria: {category_name or 'N/A'}
Descrição: {product.description or 'N/A'}{attributes_info}

=== ANÁLISE DE IMAGEM ===
{analysis.contextualizacao if analysis and analysis.contextualizacao else 'Não disponível'}

=== DESCRIÇÃO DO MARKETPLACE ===
{description.description if description else 'Não disponível'}

=== CARACTERÍSTICAS A SEREM RESPONDIDAS ===
{questions}

Responda TODAS as {len(characteristics)} características em JSON no formato {{"respostas": [{{"caracteristica": ..., "resposta": ...}}]}}.
Use exatamente os nomes das características e "N/A" quando não for possível identificar."""

    def generate_for_product(self, product_id: int) -> Dict[str, Any]:
        """Gera e grava as respostas das características da categoria do produto"""
        try:
            row = self.db.query(ProductVtex, BrandVtex.name, CategoryVtex.name).outerjoin(
                BrandVtex, ProductVtex.id_brand_vtex == BrandVtex.id_brand_vtex
            ).outerjoin(
                CategoryVtex, ProductVtex.id_category_vtex == CategoryVtex.id_category_vtex
            ).filter(ProductVtex.id_produto_vtex == product_id).first()

            if not row:
                return {"error": "Produto não encontrado", "status_code": 404}
            product, brand_name, category_name = row

            if not product.id_category_vtex:
                return {"error": "Produto não possui categoria definida. Não é possível gerar características."}

            characteristics = characteristics_for_category(self.db, product.id_category_vtex)
            if not characteristics:
                return {
                    "error": f"Nenhuma característica está configurada para a categoria "
                             f"\"{category_name or 'ID: ' + str(product.id_category_vtex)}\". "
                             f"Configure as características para esta categoria primeiro."
                }

            openai = self.openai or OpenAIChatService()
            if not openai.is_configured():
                return {"error": "OpenAI API Key não configurada", "status_code": 500}

            attributes = self.db.query(ProductAttributeVtex).filter(
                ProductAttributeVtex.id_product_vtex == product_id
            ).order_by(ProductAttributeVtex.attribute_name).all()
            analysis = self.db.query(ImageAnalysis).filter(ImageAnalysis.id_produto_vtex == product_id).first()
            description = self.db.query(Description).filter(
                Description.id_product_vtex == product_id
            ).order_by(Description.created_at.desc(), Description.id.desc()).first()

            result = openai.chat(
                model=CHARACTERISTICS_MODEL,
                messages=[
                    {"role": "system", "content": CHARACTERISTICS_SYSTEM_PROMPT},
                    {"role": "user", "content": self._build_user_prompt(
                        product, brand_name, category_name, attributes, analysis, description, characteristics
                    )}
                ],
                max_tokens=CHARACTERISTICS_MAX_TOKENS,
                temperature=CHARACTERISTICS_TEMPERATURE,
                response_format={"type": "json_object"},
                top_p=0.9,
                frequency_penalty=0.1,
                presence_penalty=0.1
            )

            if not result["content"]:
                return {"error": "Resposta vazia da OpenAI", "status_code": 500}

            try:
                answers = json.loads(result["content"]).get("respostas") or []
            except ValueError:
                logger.error(f"❌ JSON inválido retornado pela OpenAI para o produto {product_id}")
                return {"error": "Resposta da OpenAI não é um JSON válido", "status_code": 500}

            valid_answers = [
                a for a in answers
                if isinstance(a, dict) and a.get("caracteristica") and is_valid_answer(a.get("resposta"))
            ]

            # Regeneração: remove as respostas anteriores do produto
            self.db.query(CharacteristicAnswer).filter(CharacteristicAnswer.produto_id == product_id).delete()

            saved = {}
            for answer in valid_answers:
                name = answer["caracteristica"].strip()
                saved[name] = CharacteristicAnswer(
                    produto_id=product_id,
                    caracteristica=name,
                    resposta=answer["resposta"].strip(),
                    tokens_usados=result["tokens_used"]
                )
            self.db.add_all(saved.values())
            self.db.commit()

            logger.info(f"✅ {len(saved)} características gravadas para o produto {product_id}")

            return {
                "success": True,
                "message": f"{len(saved)} características geradas com sucesso",
                "data": {
                    "productId": product_id,
                    "savedCount": len(saved),
                    "totalCharacteristics": len(characteristics),
                    "totalAnswers": len(answers),
                    "discardedCount": len(answers) - len(valid_answers),
                    "tokensUsed": result["tokens_used"],
                    "cost": result["cost"],
                    "respostas": [a.to_dict() for a in saved.values()]
                }
            }

        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Erro ao gerar características do produto {product_id}: {str(e)}")
            return {"error": f"Erro interno: {str(e)}", "status_code": 500}
