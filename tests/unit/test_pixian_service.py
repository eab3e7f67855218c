"""
Unit tests for PixianService (HTTP patched at httpx.post).
"""

import os
import httpx
from unittest.mock import MagicMock, patch

from app.services.pixian_service import PixianService


def _service(tmp_path):
    return PixianService(api_id="id", api_secret="secret", output_dir=str(tmp_path))


@patch("app.services.pixian_service.httpx.post")
def test_process_image_saves_jpeg(mock_post, tmp_path):
    mock_post.return_value = MagicMock(status_code=200, content=b"\xff\xd8jpeg")

    result = _service(tmp_path).process_image("https://cdn.test/img.jpg", product_id="REF/001")

    assert result["success"] is True
    data = result["data"]
    assert data["fileName"].startswith("REF_001_")
    assert data["fileName"].endswith(".jpg")
    assert data["path"] == f"/processed-images/{data['fileName']}"
    assert data["size"] == 6
    with open(os.path.join(tmp_path, data["fileName"]), "rb") as f:
        assert f.read() == b"\xff\xd8jpeg"

    kwargs = mock_post.call_args.kwargs
    assert kwargs["auth"] == ("id", "secret")
    assert kwargs["files"]["image.url"] == (None, "https://cdn.test/img.jpg")
    assert kwargs["files"]["result.target_size"] == (None, "1500 1500")


def test_process_image_requires_url(tmp_path):
    assert _service(tmp_path).process_image("") == {"error": "URL da imagem é obrigatória"}


def test_process_image_requires_credentials(tmp_path):
    service = PixianService(api_id="", api_secret="", output_dir=str(tmp_path))

    assert "PIXIAN_API_ID" in service.process_image("https://cdn.test/img.jpg")["error"]


@patch("app.services.pixian_service.httpx.post")
def test_process_image_api_error(mock_post, tmp_path):
    mock_post.return_value = MagicMock(status_code=402, text="Payment Required")

    result = _service(tmp_path).process_image("https://cdn.test/img.jpg")

    assert result == {"error": "Erro na API Pixian: 402 - Payment Required", "status_code": 402}
    assert os.listdir(tmp_path) == []


@patch("app.services.pixian_service.httpx.post")
def test_process_image_connection_error(mock_post, tmp_path):
    mock_post.side_effect = httpx.ConnectError("sem rede")

    result = _service(tmp_path).process_image("https://cdn.test/img.jpg")

    assert result["status_code"] == 502
