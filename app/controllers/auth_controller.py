"""
Controller de autenticação (login com JWT)
"""
from typing import Optional, Dict, Any
from fastapi import HTTPException
from sqlalchemy.orm import Session
from passlib.context import CryptContext
from jose import JWTError, jwt
from datetime import datetime, timedelta
import logging

from app.config.settings import settings
from app.models.user_models import User

logger = logging.getLogger(__name__)

# Configuração de hash de senha
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


class AuthController:
    """Controller para autenticação e autorização"""

    def __init__(self):
        self.pwd_context = pwd_context

    def create_access_token(self, user: User) -> str:
        payload = {
            "userId": user.id,
            "email": user.email,
            "role": user.role,
            "exp": datetime.utcnow() + timedelta(hours=settings.jwt_expires_hours)
        }
        return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)

    def authenticate(self, login: Optional[str], password: Optional[str], db: Session) -> Dict[str, Any]:
        """Valida credenciais; retorna dict com token ou erro"""
        if not login or not password:
            return {"error": "Email e senha são obrigatórios"}

        try:
            user = db.query(User).filter(User.email == login, User.is_active == True).first()
            if not user or not self.pwd_context.verify(password, user.senha):
                logger.warning(f"⚠️ Tentativa de login inválida para {login}")
                return {"error": "Credenciais inválidas", "status_code": 401}

            user.last_login = datetime.now()
            db.commit()

            logger.info(f"✅ Login realizado: {user.email}")
            return {
                "success": True,
                "message": "Login realizado com sucesso",
                "token": self.create_access_token(user),
                "user": user.to_dict()
            }
        except Exception as e:
            db.rollback()
            logger.error(f"Erro no login: {str(e)}")
            return {"error": f"Erro interno: {str(e)}", "status_code": 500}

    def login(self, login: Optional[str], password: Optional[str], db: Session) -> Dict[str, Any]:
        try:
            result = self.authenticate(login, password, db)
            if "error" in result:
                raise HTTPException(status_code=result.get("status_code", 400), detail=result["error"])
            return result
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Erro no controller de login: {e}")
            raise HTTPException(status_code=500, detail="Erro interno do servidor")

    def verify_token(self, authorization: Optional[str], db: Session) -> Dict[str, Any]:
        """Valida o header 'Bearer <token>' e retorna os dados do usuário"""
        if not authorization or not authorization.lower().startswith("bearer "):
            raise HTTPException(status_code=401, detail="Token não fornecido")

        token = authorization.split(" ", 1)[1].strip()
        try:
            payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        except JWTError:
            raise HTTPException(status_code=401, detail="Token inválido ou expirado")

        user = db.query(User).filter(User.id == payload.get("userId"), User.is_active == True).first()
        if not user:
            raise HTTPException(status_code=401, detail="Usuário não encontrado ou inativo")

        return {"success": True, "user": user.to_dict()}
