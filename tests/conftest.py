"""
Fixtures compartilhadas dos testes.

O banco é um SQLite em memória (StaticPool) criado e destruído a cada teste;
APIs externas (VTEX, Anymarket, Pixian, OpenAI) são substituídas por mocks.
"""
import os
import tempfile

# Configuração antes de importar a aplicação
_TMP_DIR = tempfile.mkdtemp(prefix="b2b_seo_tests_")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_DIR"] = os.path.join(_TMP_DIR, "logs")
os.environ["PROCESSED_IMAGES_DIR"] = os.path.join(_TMP_DIR, "processed-images")
os.environ["OPENAI_API_KEY"] = ""
os.environ["ANYMARKET"] = "test-gumga-token"
os.environ["VTEX_ACCOUNT"] = "minhaloja"
os.environ["VTEX_APP_KEY"] = "vtexappkey-test"
os.environ["VTEX_APP_TOKEN"] = "vtex-token-test"
os.environ["PIXIAN_API_ID"] = "pixian-id"
os.environ["PIXIAN_API_SECRET"] = "pixian-secret"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["STOCK_SYNC_ENABLED"] = "false"

import pytest
from types import SimpleNamespace
from unittest.mock import MagicMock
from fastapi.testclient import TestClient

from app.config.database import Base, engine, SessionLocal, get_db
from app.main import app
from app.models.catalog_models import ProductVtex, SkuVtex, ImageVtex, BrandVtex, CategoryVtex
from app.models.content_models import Characteristic, ImageAnalysis
from app.services.openai_service import OpenAIChatService


# ─────────────────────────────────────────────────────────────────────
# Database Fixtures
# ─────────────────────────────────────────────────────────────────────

@pytest.fixture
def db_session():
    """Sessão em um banco SQLite em memória recém-criado."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    """TestClient com get_db apontando para a sessão do teste (sem eventos de startup)."""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


# ─────────────────────────────────────────────────────────────────────
# Catalog Fixtures
# ─────────────────────────────────────────────────────────────────────

@pytest.fixture
def sample_catalog(db_session):
    """Produto com marca, categoria, um SKU, três imagens e uma característica da categoria."""
    db_session.add_all([
        BrandVtex(id_brand_vtex=2000001, name="Wolf Wear"),
        CategoryVtex(id_category_vtex=10, name="Camisetas"),
        ProductVtex(
            id_produto_vtex=1,
            name="Camiseta Básica Masculina Algodão",
            title="Camiseta Básica",
            id_brand_vtex=2000001,
            id_category_vtex=10,
            ref_produto="REF-001"
        ),
        SkuVtex(id_sku_vtex=100, id_produto_vtex=1, name="Camiseta Básica P", is_active=True),
        ImageVtex(id_photo_vtex=1001, id_sku_vtex=100, name="costas", is_main=False,
                  file_location="https://minhaloja.vteximg.com.br/1001.jpg"),
        ImageVtex(id_photo_vtex=1002, id_sku_vtex=100, name="frente", is_main=True,
                  file_location="https://minhaloja.vteximg.com.br/1002.jpg"),
        ImageVtex(id_photo_vtex=1003, id_sku_vtex=100, name="detalhe", is_main=False,
                  file_location="https://minhaloja.vteximg.com.br/1003.jpg"),
        Characteristic(
            caracteristica="Cor",
            pergunta_ia="Qual a cor predominante do produto?",
            categorias="10, 20",
            is_active=True
        ),
    ])
    db_session.commit()
    return {"product_id": 1, "category_id": 10, "sku_id": 100}


@pytest.fixture
def analyzed_product(db_session, sample_catalog):
    """Produto do catálogo de exemplo com análise de imagem já gerada."""
    db_session.add(ImageAnalysis(
        id_produto_vtex=sample_catalog["product_id"],
        contextualizacao="Camiseta de algodão na cor preta, gola careca.",
        status="generated"
    ))
    db_session.commit()
    return sample_catalog


# ─────────────────────────────────────────────────────────────────────
# OpenAI Fixtures
# ─────────────────────────────────────────────────────────────────────

def make_completion(content, total_tokens=1000, prompt_tokens=800, completion_tokens=200, request_id="req-123"):
    """Resposta no formato de client.chat.completions.create."""
    return SimpleNamespace(
        id=request_id,
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        usage=SimpleNamespace(
            total_tokens=total_tokens,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens
        )
    )


@pytest.fixture
def openai_client():
    """Cliente OpenAI falso; configure chat.completions.create nos testes."""
    return MagicMock()


@pytest.fixture
def openai_service(openai_client):
    return OpenAIChatService(api_key="sk-test", client=openai_client)


@pytest.fixture
def completion():
    """Fábrica de respostas de chat completion."""
    return make_completion
