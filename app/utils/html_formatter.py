"""
Conversão de descrições em texto puro para o HTML aceito pelo Anymarket
"""
import re

SECTION_SPLIT = re.compile(r"([A-Z][A-Z ]+[A-Z])")
SECTION_TITLE = re.compile(r"[A-Z][A-Z ]+[A-Z]")


def convert_text_to_html(text):
    """
    Converte texto puro em HTML simples:
    títulos de seção em maiúsculas viram <b>TÍTULO</b><br>, quebras de linha
    viram <br> e linhas "PERGUNTA:" / "Resposta:" ficam em negrito.
    Textos que já contêm HTML são devolvidos sem alteração.
    """
    if not text:
        return text

    if "<" in text:
        return text

    html = ""
    for raw_section in SECTION_SPLIT.split(text):
        section = raw_section.strip()
        if not section:
            continue

        if SECTION_TITLE.fullmatch(section):
            html += f"<b>{section}</b><br>"
            continue

        content = section.replace("\n\n", "<br><br>")
        content = content.replace("\n", "<br>")
        content = re.sub(r"(PERGUNTA:\s*[^<]+)", r"<b>\1</b>", content)
        content = re.sub(r"(Resposta:\s*[^<]+)", r"<b>\1</b>", content)
        html += content + "<br><br>"

    return re.sub(r"(<br>)+$", "", html)
