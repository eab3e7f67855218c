from fastapi.templating import Jinja2Templates
from fastapi.responses import HTMLResponse
from fastapi import Request
from pathlib import Path

# Configurar templates com Jinja2 nativo
templates = Jinja2Templates(directory=Path(__file__).parent / "templates")


def render_template(template_name: str, request: Request = None, status_code: int = 200, **context) -> HTMLResponse:
    """Função de conveniência para renderizar templates usando Jinja2 nativo"""
    if request is None:
        # Criar um request dummy se não fornecido
        from starlette.requests import Request as StarletteRequest
        request = StarletteRequest({"type": "http", "method": "GET", "url": "/", "headers": []})

    return templates.TemplateResponse(request, template_name, context, status_code=status_code)


def render_error(error_message: str, error_type: str = "error", request: Request = None) -> HTMLResponse:
    """Renderiza página de erro"""
    context = {
        "error_message": error_message,
        "error_type": error_type
    }
    return render_template("error.html", request=request, status_code=500, **context)
