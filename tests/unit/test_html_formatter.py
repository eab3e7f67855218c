"""
Unit tests for the plain text to Anymarket HTML conversion.
"""

import pytest

from app.utils.html_formatter import convert_text_to_html


@pytest.mark.parametrize("text", [None, ""])
def test_empty_text_is_returned_as_is(text):
    assert convert_text_to_html(text) == text


def test_existing_html_is_not_converted():
    html = "<p>Camiseta <b>premium</b></p>"

    assert convert_text_to_html(html) == html


def test_section_titles_become_bold():
    text = "BENEFICIOS\nConforto total.\nUso diario."

    assert convert_text_to_html(text) == "<b>BENEFICIOS</b><br>Conforto total.<br>Uso diario."


def test_paragraphs_and_multiple_sections():
    text = "Camiseta leve.\n\nToque macio.\nCUIDADOS\nLavar a mao."

    html = convert_text_to_html(text)

    assert html == "Camiseta leve.<br><br>Toque macio.<br><br><b>CUIDADOS</b><br>Lavar a mao."


def test_trailing_breaks_are_removed():
    html = convert_text_to_html("Texto simples.\n")

    assert html == "Texto simples."
    assert not html.endswith("<br>")
