"""
Rotas de autenticação (JWT)
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Header
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.controllers.auth_controller import AuthController
from app.models.api_models import LoginRequest

logger = logging.getLogger(__name__)

# Router para autenticação
auth_router = APIRouter(prefix="/auth", tags=["Auth"])

auth_controller = AuthController()


@auth_router.post("/login")
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    """Login com email/username e senha/password; retorna o token JWT"""
    try:
        return auth_controller.login(payload.login(), payload.secret(), db)
    except HTTPException as e:
        raise e
    except Exception as e:
        logger.error(f"Erro ao fazer login: {str(e)}")
        raise HTTPException(status_code=500, detail="Erro interno do servidor")


@auth_router.get("/verify")
def verify(authorization: Optional[str] = Header(None), db: Session = Depends(get_db)):
    """Valida o token Bearer"""
    return auth_controller.verify_token(authorization, db)
