"""
Modelos de conteúdo gerado por IA: agentes, análises de imagem, títulos,
descrições e características
"""
import json

from sqlalchemy import Column, Integer, BigInteger, String, Text, Boolean, DateTime, Numeric, Float, UniqueConstraint
from sqlalchemy.sql import func
from app.config.database import Base


class Agent(Base):
    """Configuração de um agente LLM (modelo, prompt e parâmetros)"""
    __tablename__ = "agents"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    function_type = Column(String(50), nullable=False, index=True)  # image_analysis, title_generation, product_description
    model = Column(String(100), nullable=False)
    max_tokens = Column(Integer, default=1500)
    temperature = Column(Float, default=0.7)
    system_prompt = Column(Text)
    guidelines_template = Column(Text)
    is_active = Column(Boolean, default=True, index=True)

    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "function_type": self.function_type,
            "model": self.model,
            "max_tokens": self.max_tokens,
            "temperature": float(self.temperature) if self.temperature is not None else None,
            "system_prompt": self.system_prompt,
            "guidelines_template": self.guidelines_template,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class ImageAnalysis(Base):
    """Resultado da análise de imagens de um produto (uma linha por produto)"""
    __tablename__ = "analise_imagens"

    id = Column(Integer, primary_key=True, index=True)
    id_produto_vtex = Column(BigInteger, nullable=False, unique=True, index=True)
    contextualizacao = Column(Text)

    # Métricas OpenAI
    openai_model = Column(String(100))
    openai_tokens_used = Column(Integer, default=0)
    openai_tokens_prompt = Column(Integer, default=0)
    openai_tokens_completion = Column(Integer, default=0)
    openai_cost = Column(Numeric(12, 6), default=0)
    openai_request_id = Column(String(255))
    openai_max_tokens = Column(Integer)
    openai_temperature = Column(Float)
    openai_response_time_ms = Column(Integer)
    analysis_duration_ms = Column(Integer)

    agent_id = Column(Integer)
    agent_name = Column(String(255))
    total_images = Column(Integer, default=0)
    valid_images = Column(Integer, default=0)
    invalid_images = Column(Integer, default=0)
    product_type = Column(String(100))
    analysis_quality = Column(String(50))
    status = Column(String(20), default="generated", index=True)
    generated_at = Column(DateTime)

    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    def to_dict(self):
        return {
            "id": self.id,
            "id_produto_vtex": self.id_produto_vtex,
            "contextualizacao": self.contextualizacao,
            "openai_model": self.openai_model,
            "openai_tokens_used": self.openai_tokens_used,
            "openai_tokens_prompt": self.openai_tokens_prompt,
            "openai_tokens_completion": self.openai_tokens_completion,
            "openai_cost": float(self.openai_cost) if self.openai_cost is not None else 0.0,
            "openai_request_id": self.openai_request_id,
            "openai_max_tokens": self.openai_max_tokens,
            "openai_temperature": self.openai_temperature,
            "openai_response_time_ms": self.openai_response_time_ms,
            "analysis_duration_ms": self.analysis_duration_ms,
            "agent_id": self.agent_id,
            "agent_name": self.agent_name,
            "total_images": self.total_images,
            "valid_images": self.valid_images,
            "invalid_images": self.invalid_images,
            "product_type": self.product_type,
            "analysis_quality": self.analysis_quality,
            "status": self.status,
            "generated_at": self.generated_at.isoformat() if self.generated_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class Title(Base):
    """Título SEO gerado para um produto"""
    __tablename__ = "titles"

    id = Column(Integer, primary_key=True, index=True)
    id_product_vtex = Column(BigInteger, nullable=False, index=True)
    title = Column(String(255), nullable=False)
    original_title = Column(String(500))
    agent_id = Column(Integer)

    openai_model = Column(String(100))
    openai_tokens_used = Column(Integer, default=0)
    openai_tokens_prompt = Column(Integer, default=0)
    openai_tokens_completion = Column(Integer, default=0)
    openai_cost = Column(Numeric(12, 6), default=0)
    openai_request_id = Column(String(255))
    openai_response_time_ms = Column(Integer)
    openai_max_tokens = Column(Integer)
    openai_temperature = Column(Float)

    generation_attempts = Column(Integer, default=1)
    is_unique = Column(Boolean, default=True)
    validation_passed = Column(Boolean, default=True)
    status = Column(String(20), default="validated", index=True)

    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    def to_dict(self):
        return {
            "id": self.id,
            "id_product_vtex": self.id_product_vtex,
            "title": self.title,
            "original_title": self.original_title,
            "agent_id": self.agent_id,
            "openai_model": self.openai_model,
            "openai_tokens_used": self.openai_tokens_used,
            "openai_cost": float(self.openai_cost) if self.openai_cost is not None else 0.0,
            "openai_request_id": self.openai_request_id,
            "openai_response_time_ms": self.openai_response_time_ms,
            "generation_attempts": self.generation_attempts,
            "is_unique": self.is_unique,
            "validation_passed": self.validation_passed,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class Description(Base):
    """Descrição (com FAQ) gerada para um produto"""
    __tablename__ = "descriptions"

    id = Column(Integer, primary_key=True, index=True)
    id_product_vtex = Column(BigInteger, nullable=False, index=True)
    description = Column(Text, nullable=False)
    faq = Column(Text)  # JSON: [{"question": ..., "answer": ...}]

    openai_model = Column(String(100))
    openai_tokens_used = Column(Integer, default=0)
    openai_tokens_prompt = Column(Integer, default=0)
    openai_tokens_completion = Column(Integer, default=0)
    openai_cost = Column(Numeric(12, 6), default=0)
    openai_request_id = Column(String(255))
    openai_response_time_ms = Column(Integer)
    openai_max_tokens = Column(Integer)
    openai_temperature = Column(Float)

    agent_id = Column(Integer)
    agent_name = Column(String(255))
    generation_duration_ms = Column(Integer)
    status = Column(String(20), default="generated", index=True)
    error_message = Column(Text)

    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    def faq_items(self):
        if not self.faq:
            return []
        try:
            return json.loads(self.faq)
        except (TypeError, ValueError):
            return []

    def to_dict(self):
        return {
            "id": self.id,
            "id_product_vtex": self.id_product_vtex,
            "description": self.description,
            "faq": self.faq_items(),
            "openai_model": self.openai_model,
            "openai_tokens_used": self.openai_tokens_used,
            "openai_cost": float(self.openai_cost) if self.openai_cost is not None else 0.0,
            "agent_id": self.agent_id,
            "agent_name": self.agent_name,
            "generation_duration_ms": self.generation_duration_ms,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class Characteristic(Base):
    """Característica configurável respondida pela IA"""
    __tablename__ = "caracteristicas"

    id = Column(Integer, primary_key=True, index=True)
    caracteristica = Column(String(255), nullable=False)
    pergunta_ia = Column(Text, nullable=False)
    valores_possiveis = Column(Text)
    categorias = Column(Text)  # IDs de categorias VTEX separados por vírgula
    is_active = Column(Boolean, default=True, index=True)

    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    def category_ids(self):
        """IDs de categoria configurados (como strings, sem espaços)"""
        if not self.categorias:
            return []
        return [c.strip() for c in self.categorias.split(",") if c.strip()]

    def to_dict(self):
        return {
            "id": self.id,
            "caracteristica": self.caracteristica,
            "pergunta_ia": self.pergunta_ia,
            "valores_possiveis": self.valores_possiveis,
            "categorias": self.categorias,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class CharacteristicAnswer(Base):
    """Resposta da IA para uma característica de um produto"""
    __tablename__ = "respostas_caracteristicas"

    id = Column(Integer, primary_key=True, index=True)
    produto_id = Column(BigInteger, nullable=False, index=True)
    caracteristica = Column(String(255), nullable=False)
    resposta = Column(Text)
    tokens_usados = Column(Integer, default=0)

    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint('produto_id', 'caracteristica', name='uq_resposta_produto_caracteristica'),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "produto_id": self.produto_id,
            "caracteristica": self.caracteristica,
            "resposta": self.resposta,
            "tokens_usados": self.tokens_usados,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
