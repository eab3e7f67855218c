#!/usr/bin/env python3
"""
Script para inicializar o banco de dados

Cria todas as tabelas, o usuário administrador (ADMIN_EMAIL / ADMIN_PASSWORD)
e os agentes padrão de análise de imagem, título e descrição.
"""
import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.config.database import engine, Base, SessionLocal
from app.config.default_agents import FUNCTION_TYPES
from app.controllers.auth_controller import hash_password
from app.models import catalog_models, content_models, anymarket_models  # noqa: F401 (registra as tabelas)
from app.models.user_models import User, UserRole
from app.services.agent_service import AgentService
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def seed_admin_user(db) -> None:
    email = os.getenv("ADMIN_EMAIL")
    password = os.getenv("ADMIN_PASSWORD")
    if not email or not password:
        logger.warning("⚠️ ADMIN_EMAIL/ADMIN_PASSWORD não definidos, usuário admin não criado")
        return

    if db.query(User).filter(User.email == email).first():
        logger.info(f"ℹ️ Usuário {email} já existe")
        return

    db.add(User(
        nome=os.getenv("ADMIN_NAME", "Administrador"),
        email=email,
        senha=hash_password(password),
        role=UserRole.ADMIN.value,
        is_active=True
    ))
    db.commit()
    logger.info(f"✅ Usuário admin criado: {email}")


def init_database():
    """Inicializa o banco de dados criando todas as tabelas"""
    try:
        logger.info("Criando tabelas do banco de dados...")
        Base.metadata.create_all(bind=engine)
        logger.info("✅ Banco de dados inicializado com sucesso!")

        # Verificar tabelas criadas
        from sqlalchemy import inspect
        inspector = inspect(engine)
        tables = inspector.get_table_names()
        logger.info(f"📊 Tabelas criadas: {', '.join(tables)}")

        db = SessionLocal()
        try:
            seed_admin_user(db)
            agents = AgentService(db)
            for function_type in FUNCTION_TYPES:
                agents.ensure_default_agent(function_type)
        finally:
            db.close()

    except Exception as e:
        logger.error(f"❌ Erro ao inicializar banco de dados: {e}")
        raise


if __name__ == "__main__":
    init_database()
