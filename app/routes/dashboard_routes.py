"""
Rotas do dashboard (API e página HTML)
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.controllers.dashboard_controller import DashboardController

logger = logging.getLogger(__name__)

dashboard_router = APIRouter(tags=["Dashboard"])
dashboard_page_router = APIRouter(tags=["Dashboard"])

dashboard_controller = DashboardController()


@dashboard_router.get("/dashboard/stats")
def dashboard_stats(db: Session = Depends(get_db)):
    """Totais de produtos, estoque e produtos otimizados"""
    try:
        return dashboard_controller.get_stats(db)
    except HTTPException as e:
        raise e
    except Exception as e:
        logger.error(f"Erro ao buscar estatísticas do dashboard: {str(e)}")
        raise HTTPException(status_code=500, detail="Erro interno do servidor")


@dashboard_page_router.get("/dashboard", response_class=HTMLResponse)
def dashboard_page(request: Request, db: Session = Depends(get_db)):
    try:
        return dashboard_controller.get_dashboard_page(request, db)
    except HTTPException as e:
        raise e
    except Exception as e:
        logger.error(f"Erro ao renderizar dashboard: {str(e)}")
        raise HTTPException(status_code=500, detail="Erro interno do servidor")
