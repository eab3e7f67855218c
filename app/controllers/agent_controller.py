"""
Controller para agentes LLM
"""
import logging
from typing import Dict, Any
from fastapi import HTTPException
from sqlalchemy.orm import Session

from app.services.agent_service import AgentService

logger = logging.getLogger(__name__)


class AgentController:
    """CRUD de agentes"""

    def _run(self, action: str, fn) -> Dict[str, Any]:
        try:
            result = fn()
            if "error" in result:
                raise HTTPException(status_code=result.get("status_code", 400), detail=result["error"])
            return result
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Erro no controller ao {action}: {str(e)}")
            raise HTTPException(status_code=500, detail="Erro interno do servidor")

    def list_agents(self, db: Session) -> Dict[str, Any]:
        return self._run("listar agentes", lambda: AgentService(db).list_agents())

    def get_agent(self, agent_id: int, db: Session) -> Dict[str, Any]:
        return self._run("buscar agente", lambda: AgentService(db).get_agent(agent_id))

    def create_agent(self, data: Dict[str, Any], db: Session) -> Dict[str, Any]:
        return self._run("criar agente", lambda: AgentService(db).create_agent(data))

    def update_agent(self, agent_id: int, data: Dict[str, Any], db: Session) -> Dict[str, Any]:
        return self._run("atualizar agente", lambda: AgentService(db).update_agent(agent_id, data))

    def delete_agent(self, agent_id: int, db: Session) -> Dict[str, Any]:
        return self._run("excluir agente", lambda: AgentService(db).delete_agent(agent_id))
