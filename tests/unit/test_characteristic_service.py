"""
Unit tests for CharacteristicService: configuration CRUD, category matching
and AI-generated answers.
"""

import json
import pytest

from app.models.content_models import Characteristic, CharacteristicAnswer
from app.services.characteristic_service import (
    CharacteristicService,
    characteristics_for_category,
    is_valid_answer,
)


# ─────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("answer,expected", [
    ("Preto", True),
    ("Algodão 100%", True),
    ("N/A", False),
    ("não aplicável", False),
    ("  Não Identificado ", False),
    ("ok", False),
    ("", False),
    (None, False),
    (42, False),
])
def test_is_valid_answer(answer, expected):
    assert is_valid_answer(answer) is expected


def test_characteristics_for_category_matches_exact_ids(db_session):
    db_session.add_all([
        Characteristic(caracteristica="Cor", pergunta_ia="Cor?", categorias="10, 20"),
        Characteristic(caracteristica="Gola", pergunta_ia="Gola?", categorias="100"),
        Characteristic(caracteristica="Manga", pergunta_ia="Manga?", categorias="10", is_active=False),
    ])
    db_session.commit()

    assert [c.caracteristica for c in characteristics_for_category(db_session, 10)] == ["Cor"]
    assert [c.caracteristica for c in characteristics_for_category(db_session, "100")] == ["Gola"]
    assert characteristics_for_category(db_session, None) == []


# ─────────────────────────────────────────────────────────────────────
# CRUD
# ─────────────────────────────────────────────────────────────────────

def test_create_characteristic_requires_fields(db_session):
    result = CharacteristicService(db_session).create_characteristic({"caracteristica": "Cor"})

    assert result == {"error": "Característica e pergunta IA são obrigatórias"}


def test_create_update_delete_characteristic(db_session):
    service = CharacteristicService(db_session)

    created = service.create_characteristic({
        "caracteristica": " Tecido ",
        "pergunta_ia": "Qual o tecido?",
        "categorias": "10"
    })
    assert created["success"] is True
    assert created["data"]["caracteristica"] == "Tecido"
    characteristic_id = created["data"]["id"]

    updated = service.update_characteristic(characteristic_id, {"valores_possiveis": "Algodão, Malha"})
    assert updated["data"]["valores_possiveis"] == "Algodão, Malha"
    assert updated["data"]["pergunta_ia"] == "Qual o tecido?"

    assert service.delete_characteristic(characteristic_id)["success"] is True
    assert service.delete_characteristic(characteristic_id)["status_code"] == 404


def test_list_by_category_requires_id(db_session):
    assert CharacteristicService(db_session).list_by_category("") == {"error": "ID da categoria é obrigatório"}


# ─────────────────────────────────────────────────────────────────────
# generate_for_product
# ─────────────────────────────────────────────────────────────────────

def test_generate_for_product_saves_only_valid_answers(db_session, analyzed_product, openai_service,
                                                       openai_client, completion):
    db_session.add(Characteristic(caracteristica="Gola", pergunta_ia="Qual a gola?", categorias="10"))
    db_session.commit()
    openai_client.chat.completions.create.return_value = completion(json.dumps({
        "respostas": [
            {"caracteristica": "Cor", "resposta": "Preto"},
            {"caracteristica": "Gola", "resposta": "N/A"},
        ]
    }))

    result = CharacteristicService(db_session, openai_service=openai_service).generate_for_product(1)

    assert result["success"] is True
    assert result["data"]["savedCount"] == 1
    assert result["data"]["discardedCount"] == 1
    assert result["data"]["totalCharacteristics"] == 2

    kwargs = openai_client.chat.completions.create.call_args.kwargs
    assert kwargs["response_format"] == {"type": "json_object"}
    assert kwargs["temperature"] == 0.1

    answers = db_session.query(CharacteristicAnswer).filter(CharacteristicAnswer.produto_id == 1).all()
    assert [(a.caracteristica, a.resposta) for a in answers] == [("Cor", "Preto")]


def test_generate_for_product_replaces_previous_answers(db_session, analyzed_product, openai_service,
                                                        openai_client, completion):
    db_session.add(CharacteristicAnswer(produto_id=1, caracteristica="Cor", resposta="Branco"))
    db_session.commit()
    openai_client.chat.completions.create.return_value = completion(
        '{"respostas": [{"caracteristica": "Cor", "resposta": "Preto"}]}'
    )

    CharacteristicService(db_session, openai_service=openai_service).generate_for_product(1)

    answers = CharacteristicService(db_session).list_answers(1)
    assert answers["total"] == 1
    assert answers["data"][0]["resposta"] == "Preto"
    assert answers["data"][0]["pergunta_ia"] == "Qual a cor predominante do produto?"


def test_generate_for_product_invalid_json(db_session, analyzed_product, openai_service, openai_client, completion):
    openai_client.chat.completions.create.return_value = completion("isto não é json")

    result = CharacteristicService(db_session, openai_service=openai_service).generate_for_product(1)

    assert result == {"error": "Resposta da OpenAI não é um JSON válido", "status_code": 500}


def test_generate_for_product_unknown_product(db_session, openai_service):
    result = CharacteristicService(db_session, openai_service=openai_service).generate_for_product(999)

    assert result["status_code"] == 404


def test_list_answers_hides_characteristics_outside_category(db_session, sample_catalog):
    db_session.add_all([
        CharacteristicAnswer(produto_id=1, caracteristica="Cor", resposta="Preto"),
        CharacteristicAnswer(produto_id=1, caracteristica="Salto", resposta="Baixo"),
    ])
    db_session.commit()

    result = CharacteristicService(db_session).list_answers(1)

    assert [a["caracteristica"] for a in result["data"]] == ["Cor"]
