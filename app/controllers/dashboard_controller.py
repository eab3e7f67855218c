"""
Controller do dashboard
"""
import logging
from typing import Dict, Any
from fastapi import HTTPException, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from app.services.dashboard_service import DashboardService
from app.views.template_renderer import render_template, render_error

logger = logging.getLogger(__name__)


class DashboardController:

    def get_stats(self, db: Session) -> Dict[str, Any]:
        try:
            return DashboardService(db).get_stats()
        except Exception as e:
            logger.error(f"Erro ao buscar estatísticas do dashboard: {str(e)}")
            raise HTTPException(status_code=500, detail="Erro interno do servidor")

    def get_dashboard_page(self, request: Request, db: Session) -> HTMLResponse:
        """Página HTML com os mesmos totais da API"""
        try:
            stats = DashboardService(db).get_stats()["data"]
            return render_template("dashboard.html", request=request, stats=stats)
        except Exception as e:
            logger.error(f"Erro ao renderizar dashboard: {str(e)}")
            return render_error("Erro ao carregar o dashboard", request=request)
