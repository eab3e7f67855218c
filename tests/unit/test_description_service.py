"""
Unit tests for DescriptionService and its output parser.
"""

import pytest

from app.models.content_models import Agent, Description, Title
from app.services.description_service import (
    DescriptionService,
    parse_description_output,
    fill_guidelines,
)


MODEL_OUTPUT = """DESCRIÇÃO:
Camiseta de algodão macio com gola careca.

FAQ:
P: Qual o tecido?
R: Algodão 100%.
P: Pergunta sem resposta
P: Pode lavar na máquina?
R: Sim, em ciclo delicado.
R: Resposta órfã"""


# ─────────────────────────────────────────────────────────────────────
# Parsing
# ─────────────────────────────────────────────────────────────────────

def test_parse_description_output_pairs_questions_and_answers():
    parsed = parse_description_output(MODEL_OUTPUT)

    assert parsed["description"] == "Camiseta de algodão macio com gola careca."
    assert parsed["faq"] == [
        {"question": "Qual o tecido?", "answer": "Algodão 100%."},
        {"question": "Pode lavar na máquina?", "answer": "Sim, em ciclo delicado."},
    ]


def test_parse_description_output_without_faq():
    parsed = parse_description_output("Apenas uma descrição.")

    assert parsed == {"description": "Apenas uma descrição.", "faq": []}


def test_fill_guidelines_replaces_placeholders():
    filled = fill_guidelines("Título: {title} | Marca: {brandName} | {unknown}", {
        "title": "Camiseta Masculina",
        "brandName": "Wolf Wear"
    })

    assert filled == "Título: Camiseta Masculina | Marca: Wolf Wear | {unknown}"


# ─────────────────────────────────────────────────────────────────────
# generate_description
# ─────────────────────────────────────────────────────────────────────

@pytest.fixture
def titled_product(db_session, analyzed_product):
    db_session.add(Title(id_product_vtex=1, title="Camiseta Algodão Masculina Preta", status="validated"))
    db_session.commit()
    return analyzed_product


def test_generate_description_requires_title(db_session, analyzed_product, openai_service):
    result = DescriptionService(db_session, openai_service=openai_service).generate_description(1)

    assert result == {"error": "Produto não possui título gerado. Gere um título primeiro."}


def test_generate_description_success(db_session, titled_product, openai_service, openai_client, completion):
    openai_client.chat.completions.create.return_value = completion(MODEL_OUTPUT)

    result = DescriptionService(db_session, openai_service=openai_service).generate_description(1)

    assert result["success"] is True
    data = result["data"]
    assert data["optimizedTitle"] == "Camiseta Algodão Masculina Preta"
    assert data["tokensUsed"] == 1000
    assert len(data["faq"]) == 2
    assert data["agent_name"] == "Gerador de Descrições"

    # Agente padrão criado na primeira geração
    assert db_session.query(Agent).filter(Agent.function_type == "product_description").count() == 1

    user_prompt = openai_client.chat.completions.create.call_args.kwargs["messages"][-1]["content"]
    assert "Camiseta Algodão Masculina Preta" in user_prompt
    assert "Camiseta de algodão na cor preta, gola careca." in user_prompt


def test_generate_description_returns_existing(db_session, titled_product, openai_service, openai_client):
    db_session.add(Description(id_product_vtex=1, description="Descrição anterior.", status="generated"))
    db_session.commit()

    result = DescriptionService(db_session, openai_service=openai_service).generate_description(1)

    assert result["existing"] is True
    assert result["data"]["description"] == "Descrição anterior."
    openai_client.chat.completions.create.assert_not_called()


def test_generate_description_retries_empty_responses(db_session, titled_product, openai_service,
                                                      openai_client, completion):
    openai_client.chat.completions.create.side_effect = [
        completion(""),
        completion("FAQ:\nP: Só FAQ?\nR: Sim."),
        completion("Descrição final."),
    ]

    result = DescriptionService(db_session, openai_service=openai_service).generate_description(1)

    assert result["success"] is True
    assert result["data"]["description"] == "Descrição final."
    assert result["data"]["faq"] == []
    assert openai_client.chat.completions.create.call_count == 3


def test_generate_description_gives_up_after_three_attempts(db_session, titled_product, openai_service,
                                                            openai_client, completion):
    openai_client.chat.completions.create.return_value = completion("")

    result = DescriptionService(db_session, openai_service=openai_service).generate_description(1)

    assert result == {"error": "Resposta vazia da OpenAI", "status_code": 500}
    assert db_session.query(Description).count() == 0
