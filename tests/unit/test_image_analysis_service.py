"""
Unit tests for ImageAnalysisService (single-product analysis).
"""

import pytest
from unittest.mock import MagicMock

from app.models.content_models import Agent, ImageAnalysis
from app.services.image_analysis_service import (
    ImageAnalysisService,
    detect_product_type,
    build_characteristics_block,
    OPENAI_FAILURE_MESSAGE,
)
from app.services.openai_service import OpenAIChatService


# ─────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("name,expected", [
    ("Camiseta Básica Masculina", "camiseta"),
    ("CALÇA JEANS SLIM", "calça"),
    ("Vestido Longo Floral", "vestido"),
    ("Jaqueta Corta Vento", "jaqueta"),
    ("Boné Aba Reta", "produto"),
    (None, "produto"),
])
def test_detect_product_type(name, expected):
    assert detect_product_type(name) == expected


def test_build_characteristics_block_numbers_questions():
    characteristics = [
        MagicMock(caracteristica="Cor", pergunta_ia="Qual a cor?", valores_possiveis=None),
        MagicMock(caracteristica="Gola", pergunta_ia="Qual o tipo de gola?", valores_possiveis="Careca, V ou Polo"),
    ]

    block = build_characteristics_block(characteristics)

    assert "**1. Cor:**" in block
    assert "**2. Gola:**" in block
    assert "Careca, V ou Polo" in block
    assert build_characteristics_block([]) == ""


# ─────────────────────────────────────────────────────────────────────
# analyze_product
# ─────────────────────────────────────────────────────────────────────

def test_analyze_product_success(db_session, sample_catalog, openai_service, openai_client, completion):
    openai_client.chat.completions.create.return_value = completion("  Análise técnica detalhada.  ")
    service = ImageAnalysisService(db_session, openai_service=openai_service)

    result = service.analyze_product(1, 10)

    assert result["success"] is True
    assert [img["id"] for img in result["images"]] == [1002, 1001]
    assert result["images"][0]["is_primary"] is True
    assert result["analysis"]["product_type"] == "camiseta"
    assert result["analysis"]["contextual_analysis"] == "Análise técnica detalhada."
    assert result["analysis"]["analysis_quality"] == {"level": "média-alta"}
    assert result["agent_used"] == "Image Analysis Agent"
    assert result["product"]["name"] == "Camiseta Básica Masculina Algodão"
    assert result["analysis_log"]["tokens_used"] == 1000

    kwargs = openai_client.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "gpt-4o"
    assert kwargs["max_tokens"] == 8000
    assert kwargs["temperature"] == 0.3
    assert kwargs["top_p"] == 0.9
    assert kwargs["frequency_penalty"] == 0.1
    assert kwargs["presence_penalty"] == 0.1

    user_content = kwargs["messages"][-1]["content"]
    assert user_content[0]["type"] == "text"
    assert "Qual a cor predominante do produto?" in user_content[0]["text"]
    assert user_content[1] == {
        "type": "image_url",
        "image_url": {"url": "https://minhaloja.vteximg.com.br/1002.jpg", "detail": "high"}
    }

    saved = db_session.query(ImageAnalysis).filter(ImageAnalysis.id_produto_vtex == 1).one()
    assert saved.contextualizacao == "Análise técnica detalhada."
    assert saved.status == "generated"
    assert saved.total_images == 2
    assert saved.openai_tokens_prompt == 800
    assert saved.openai_tokens_completion == 200
    assert float(saved.openai_cost) == pytest.approx(0.8 * 0.005 + 0.2 * 0.015)


def test_analyze_product_uses_active_agent(db_session, sample_catalog, openai_service, openai_client, completion):
    db_session.add(Agent(
        name="Visão Custom",
        function_type="image_analysis",
        model="gpt-4o-mini",
        max_tokens=2000,
        temperature=0.2,
        is_active=True
    ))
    db_session.commit()
    openai_client.chat.completions.create.return_value = completion("Análise.")

    result = ImageAnalysisService(db_session, openai_service=openai_service).analyze_product(1, 10)

    assert result["agent_used"] == "Visão Custom"
    kwargs = openai_client.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "gpt-4o-mini"
    assert kwargs["max_tokens"] == 2000


def test_analyze_product_always_runs_a_new_analysis(db_session, sample_catalog, openai_service,
                                                    openai_client, completion):
    openai_client.chat.completions.create.return_value = completion("Primeira análise.")
    service = ImageAnalysisService(db_session, openai_service=openai_service)
    service.analyze_product(1, 10)

    openai_client.chat.completions.create.return_value = completion("Segunda análise.")
    second = service.analyze_product(1, 10)

    assert second["success"] is True
    assert second["analysis"]["contextual_analysis"] == "Segunda análise."
    assert second["agent_used"] == "Image Analysis Agent"
    assert [img["id"] for img in second["images"]] == [1002, 1001]
    assert "cached" not in second
    assert openai_client.chat.completions.create.call_count == 2
    rows = db_session.query(ImageAnalysis).filter(ImageAnalysis.id_produto_vtex == 1).all()
    assert len(rows) == 1
    assert rows[0].contextualizacao == "Segunda análise."


def test_analyze_product_without_images(db_session, sample_catalog, openai_service):
    result = ImageAnalysisService(db_session, openai_service=openai_service).analyze_product(999, 10)

    assert result == {"error": "Nenhuma imagem encontrada para este produto", "status_code": 404}


def test_analyze_product_without_characteristics(db_session, sample_catalog, openai_service, openai_client):
    result = ImageAnalysisService(db_session, openai_service=openai_service).analyze_product(1, 77)

    assert "error" in result
    assert result["error"].startswith('Nenhuma característica está configurada para a categoria "ID: 77"')
    openai_client.chat.completions.create.assert_not_called()


def test_analyze_product_openai_failure(db_session, sample_catalog, openai_service, openai_client):
    openai_client.chat.completions.create.side_effect = Exception("timeout")

    result = ImageAnalysisService(db_session, openai_service=openai_service).analyze_product(1, 10)

    assert result == {"error": OPENAI_FAILURE_MESSAGE, "status_code": 500}
    assert db_session.query(ImageAnalysis).count() == 0


def test_analyze_product_without_api_key(db_session, sample_catalog):
    service = ImageAnalysisService(db_session, openai_service=OpenAIChatService(api_key=""))

    result = service.analyze_product(1, 10)

    assert result["status_code"] == 500
    assert "OPENAI_API_KEY" in result["error"]


# ─────────────────────────────────────────────────────────────────────
# get_latest_analysis
# ─────────────────────────────────────────────────────────────────────

def test_get_latest_analysis(db_session, analyzed_product):
    result = ImageAnalysisService(db_session).get_latest_analysis(1)

    assert result["success"] is True
    assert result["analysis"]["product_name"] == "Camiseta Básica Masculina Algodão"
    assert result["analysis"]["ref_produto"] == "REF-001"


def test_get_latest_analysis_not_found(db_session):
    result = ImageAnalysisService(db_session).get_latest_analysis(1)

    assert result == {"error": "Nenhuma análise encontrada para este produto", "status_code": 404}


def test_get_latest_analysis_ignores_removed_products(db_session):
    db_session.add(ImageAnalysis(id_produto_vtex=77, contextualizacao="Sem produto.", status="generated"))
    db_session.commit()

    result = ImageAnalysisService(db_session).get_latest_analysis(77)

    assert result["status_code"] == 404
