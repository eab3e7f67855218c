"""
Unit tests for AnymarketService.

HTTP calls are patched at requests.request; the local content (title,
description, characteristic answers) lives in the SQLite test database.
"""

import pytest
from unittest.mock import MagicMock, patch

from app.models.anymarket_models import AnymarketSyncLog, AnymarketProduct
from app.models.content_models import Title, Description, CharacteristicAnswer
from app.services.anymarket_service import AnymarketService


def _response(status_code=200, json_data=None, text=""):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    response.json.return_value = json_data
    response.text = text
    return response


@pytest.fixture
def content(db_session):
    db_session.add_all([
        Title(id_product_vtex=1, title="Camiseta Algodão Masculina Preta", status="validated"),
        Description(id_product_vtex=1, description="SOBRE\nCamiseta macia.", status="generated"),
        CharacteristicAnswer(produto_id=1, caracteristica="Modelo", resposta="Slim"),
        CharacteristicAnswer(produto_id=1, caracteristica="Cor", resposta="Preto"),
    ])
    db_session.commit()


@pytest.fixture
def service(db_session):
    return AnymarketService(db_session, token="gumga-123", base_url="https://api.anymarket.test/v2/")


# ─────────────────────────────────────────────────────────────────────
# update_product
# ─────────────────────────────────────────────────────────────────────

def test_update_product_requires_ids(service):
    assert service.update_product(None, 555) == {"error": "productId e anymarketId são obrigatórios"}


def test_update_product_requires_generated_title(service):
    result = service.update_product(1, 555)

    assert result["status_code"] == 404


@patch("app.services.anymarket_service.requests.request")
def test_update_product_sends_merge_patch(mock_request, service, content, db_session):
    mock_request.side_effect = [
        _response(json_data={"id": 555, "title": "Antigo", "description": "Antiga", "model": "Regular"}),
        _response(json_data={"id": 555}),
    ]

    result = service.update_product(1, 555)

    assert result["success"] is True
    assert result["data"]["action"] == "product_updated_patch"
    assert result["data"]["characteristics_count"] == 2

    get_call, patch_call = mock_request.call_args_list
    assert get_call.args == ("GET", "https://api.anymarket.test/v2/products/555")
    assert get_call.kwargs["headers"]["gumgaToken"] == "gumga-123"

    assert patch_call.args == ("PATCH", "https://api.anymarket.test/v2/products/555")
    assert patch_call.kwargs["headers"]["Content-Type"] == "application/merge-patch+json"
    payload = patch_call.kwargs["json"]
    assert payload["title"] == "Camiseta Algodão Masculina Preta"
    assert payload["description"] == "<b>SOBRE</b><br>Camiseta macia."
    assert payload["characteristics"] == [
        {"index": 1, "name": "Cor", "value": "Preto"},
        {"index": 2, "name": "Modelo", "value": "Slim"},
    ]
    assert payload["model"] == "Slim"

    log = db_session.query(AnymarketSyncLog).one()
    assert log.action == "update"
    assert log.id_produto_any == 555


@patch("app.services.anymarket_service.requests.request")
def test_update_product_nothing_to_change(mock_request, service, db_session):
    db_session.add(Title(id_product_vtex=1, title="Camiseta Masculina Preta", status="validated"))
    db_session.commit()
    mock_request.return_value = _response(json_data={"id": 555, "title": "Camiseta Masculina Preta"})

    result = service.update_product(1, 555)

    assert result["data"]["action"] == "no_updates_needed"
    assert mock_request.call_count == 1


@patch("app.services.anymarket_service.requests.request")
def test_update_product_patch_failure_is_logged(mock_request, service, content, db_session):
    mock_request.side_effect = [
        _response(json_data={"id": 555, "title": "Antigo"}),
        _response(422, json_data={"message": "Modelo inválido"}, text='{"message": "Modelo inválido"}'),
    ]

    result = service.update_product(1, 555)

    assert result["status_code"] == 500
    assert result["error"] == "Erro ao atualizar produto no Anymarket: 422 - Modelo inválido"
    assert db_session.query(AnymarketSyncLog).one().action == "update_failed"


@patch("app.services.anymarket_service.requests.request")
def test_update_product_get_failure(mock_request, service, content):
    mock_request.return_value = _response(404, json_data={"message": "Produto não encontrado"})

    result = service.update_product(1, 555)

    assert result == {
        "error": "Erro ao buscar dados atuais do produto: Produto não encontrado",
        "status_code": 404
    }


# ─────────────────────────────────────────────────────────────────────
# Images
# ─────────────────────────────────────────────────────────────────────

@patch("app.services.anymarket_service.requests.request")
def test_upload_image(mock_request, service):
    mock_request.return_value = _response(json_data={"id": 9})

    result = service.upload_image(555, "https://cdn.test/img.jpg", index=2, main=True)

    assert result["data"] == {"id": 9}
    assert mock_request.call_args.kwargs["json"] == {"index": 2, "main": True, "url": "https://cdn.test/img.jpg"}


def test_upload_image_requires_token(db_session):
    service = AnymarketService(db_session, token="")

    assert service.upload_image(555, "https://cdn.test/img.jpg") == {"error": "Token do Anymarket não configurado"}


@patch("app.services.anymarket_service.requests.request")
def test_delete_image(mock_request, service):
    mock_request.return_value = _response(204)

    result = service.delete_image(555, 9)

    assert result == {"success": True, "message": "Imagem 9 deletada com sucesso"}
    assert mock_request.call_args.args == ("DELETE", "https://api.anymarket.test/v2/products/555/images/9")


# ─────────────────────────────────────────────────────────────────────
# Mappings
# ─────────────────────────────────────────────────────────────────────

def test_create_and_list_mappings(service, db_session):
    created = service.create_mapping({"id_produto_any": 555, "ref_vtex": "REF-001", "title": "Camiseta"})
    assert created["success"] is True

    duplicated = service.create_mapping({"id_produto_any": 555, "ref_vtex": "REF-001"})
    assert duplicated == {"error": "Produto Anymarket já cadastrado"}

    listed = service.list_mappings(search="ref-0")
    assert listed["pagination"]["total"] == 1
    assert listed["data"][0]["ref_vtex"] == "REF-001"
    assert db_session.query(AnymarketProduct).count() == 1
