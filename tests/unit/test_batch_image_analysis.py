"""
Unit tests for BatchImageAnalysisService.

Tests validate:
1. Input validation
2. Sequential processing with a fixed pause between items
3. Per-item failure isolation (handled errors and raised exceptions)
4. skipExisting behaviour
5. Aggregate report shape
"""

import pytest
from unittest.mock import MagicMock, patch, call

from app.models.catalog_models import ProductVtex
from app.services.batch_image_analysis_service import BatchImageAnalysisService


# ─────────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────────

@pytest.fixture
def products(db_session):
    db_session.add_all([
        ProductVtex(id_produto_vtex=1, name="Camiseta Preta", id_category_vtex=10),
        ProductVtex(id_produto_vtex=2, name="Moletom Cinza", id_category_vtex=None),
        ProductVtex(id_produto_vtex=4, name="Calça Jeans", id_category_vtex=20),
    ])
    db_session.commit()


@pytest.fixture
def analysis_service():
    service = MagicMock()
    service.has_generated_analysis.return_value = False
    service.analyze_product.return_value = {"success": True, "analysis": {}}
    return service


@pytest.fixture
def batch(db_session, analysis_service):
    return BatchImageAnalysisService(db_session, analysis_service=analysis_service, pause_seconds=0.1)


# ─────────────────────────────────────────────────────────────────────
# Input Validation
# ─────────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("product_ids", [None, [], "1,2,3", {"id": 1}])
def test_analyze_batch_rejects_invalid_input(batch, product_ids):
    result = batch.analyze_batch(product_ids)

    assert result == {"error": "Lista de IDs de produtos é obrigatória"}


# ─────────────────────────────────────────────────────────────────────
# Sequential Processing
# ─────────────────────────────────────────────────────────────────────

@patch("app.services.batch_image_analysis_service.time.sleep")
def test_analyze_batch_mixed_outcomes(mock_sleep, batch, analysis_service, products):
    """Success, missing category and missing product are each recorded in their own entry."""
    result = batch.analyze_batch([1, 2, 3])

    assert result["success"] is True
    assert result["message"] == "Análise de imagens em lote concluída: 1 sucessos, 2 erros"

    data = result["data"]
    assert data["total"] == 3
    assert data["success"] == 1
    assert data["errors"] == 2
    assert isinstance(data["totalTime"], int)

    first, second, third = data["results"]
    assert first["productId"] == 1
    assert first["productName"] == "Camiseta Preta"
    assert first["success"] is True
    assert first["message"] == "Análise de imagem concluída com sucesso"
    assert "error" not in first

    assert second["productName"] == "Moletom Cinza"
    assert second["success"] is False
    assert second["error"] == "Produto não possui categoria definida"
    assert second["message"] == "Erro na análise: Produto não possui categoria definida"

    assert third["productName"] == "Produto 3"
    assert third["error"] == "Produto não encontrado"

    for item in data["results"]:
        assert isinstance(item["duration"], int)
        assert item["duration"] >= 0

    analysis_service.analyze_product.assert_called_once_with(1, 10, force_new_analysis=True)


@patch("app.services.batch_image_analysis_service.time.sleep")
def test_analyze_batch_pauses_between_items_only(mock_sleep, batch, products):
    batch.analyze_batch([1, 4, 1])

    assert mock_sleep.call_args_list == [call(0.1), call(0.1)]


@patch("app.services.batch_image_analysis_service.time.sleep")
def test_analyze_batch_single_item_has_no_pause(mock_sleep, batch, products):
    batch.analyze_batch([1])

    mock_sleep.assert_not_called()


@patch("app.services.batch_image_analysis_service.time.sleep")
def test_analyze_batch_preserves_input_order(mock_sleep, batch, analysis_service, products):
    result = batch.analyze_batch([4, 1])

    assert [r["productId"] for r in result["data"]["results"]] == [4, 1]
    assert analysis_service.analyze_product.call_args_list == [
        call(4, 20, force_new_analysis=True),
        call(1, 10, force_new_analysis=True),
    ]


# ─────────────────────────────────────────────────────────────────────
# Failure Isolation
# ─────────────────────────────────────────────────────────────────────

@patch("app.services.batch_image_analysis_service.time.sleep")
def test_analyze_batch_records_handled_error(mock_sleep, batch, analysis_service, products):
    analysis_service.analyze_product.return_value = {
        "error": "Nenhuma imagem encontrada para este produto",
        "status_code": 404
    }

    result = batch.analyze_batch([1])
    item = result["data"]["results"][0]

    assert item["success"] is False
    assert item["error"] == "Nenhuma imagem encontrada para este produto"
    assert item["message"] == "Erro na análise: Nenhuma imagem encontrada para este produto"


@patch("app.services.batch_image_analysis_service.time.sleep")
def test_analyze_batch_exception_does_not_abort(mock_sleep, batch, analysis_service, products):
    """An exception is recorded as 'Erro crítico' and the next item still runs."""
    analysis_service.analyze_product.side_effect = [
        RuntimeError("conexão perdida"),
        {"success": True},
    ]

    result = batch.analyze_batch([1, 4])
    first, second = result["data"]["results"]

    assert first["success"] is False
    assert first["error"] == "conexão perdida"
    assert first["message"] == "Erro crítico: conexão perdida"
    assert second["success"] is True
    assert result["data"]["success"] == 1
    assert result["data"]["errors"] == 1


# ─────────────────────────────────────────────────────────────────────
# skipExisting
# ─────────────────────────────────────────────────────────────────────

@patch("app.services.batch_image_analysis_service.time.sleep")
def test_analyze_batch_skip_existing(mock_sleep, batch, analysis_service, products):
    analysis_service.has_generated_analysis.side_effect = lambda product_id: product_id == 1

    result = batch.analyze_batch([1, 4], skip_existing=True)
    skipped, analysed = result["data"]["results"]

    assert skipped["success"] is True
    assert skipped["message"] == "Análise já existente (ignorada)"
    assert analysed["message"] == "Análise de imagem concluída com sucesso"
    analysis_service.analyze_product.assert_called_once_with(4, 20, force_new_analysis=True)


@patch("app.services.batch_image_analysis_service.time.sleep")
def test_analyze_batch_reanalyses_by_default(mock_sleep, batch, analysis_service, products):
    analysis_service.has_generated_analysis.return_value = True

    batch.analyze_batch([1])

    analysis_service.has_generated_analysis.assert_not_called()
    analysis_service.analyze_product.assert_called_once()


# ─────────────────────────────────────────────────────────────────────
# Display Name Lookup
# ─────────────────────────────────────────────────────────────────────

def test_lookup_product_name_falls_back_on_error(analysis_service):
    db = MagicMock()
    db.query.side_effect = Exception("tabela indisponível")
    service = BatchImageAnalysisService(db, analysis_service=analysis_service, pause_seconds=0)

    assert service._lookup_product_name(42) == "Produto 42"
    db.rollback.assert_called_once()
