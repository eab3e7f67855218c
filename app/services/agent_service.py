"""
Serviço de agentes LLM
"""
import logging
from typing import Dict, Optional, Any
from sqlalchemy.orm import Session

from app.config.default_agents import DEFAULT_AGENTS
from app.models.content_models import Agent

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "name", "description", "function_type", "model", "max_tokens",
    "temperature", "system_prompt", "guidelines_template", "is_active"
)


class AgentService:
    """CRUD de agentes e seleção do agente ativo por função"""

    def __init__(self, db: Session):
        self.db = db

    def list_agents(self) -> Dict[str, Any]:
        try:
            agents = self.db.query(Agent).filter(Agent.is_active == True).order_by(
                Agent.function_type, Agent.name
            ).all()
            return {"success": True, "agents": [a.to_dict() for a in agents], "total": len(agents)}
        except Exception as e:
            logger.error(f"Erro ao listar agentes: {str(e)}")
            return {"error": f"Erro interno: {str(e)}", "status_code": 500}

    def get_agent(self, agent_id: int) -> Dict[str, Any]:
        agent = self.db.query(Agent).filter(Agent.id == agent_id).first()
        if not agent:
            return {"error": "Agente não encontrado", "status_code": 404}
        return {"success": True, "agent": agent.to_dict()}

    def create_agent(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Cria um agente; nome, tipo de função e modelo são obrigatórios"""
        if not data.get("name") or not data.get("function_type") or not data.get("model"):
            return {"error": "Nome, tipo de função e modelo são obrigatórios"}

        try:
            agent = Agent(
                name=data["name"],
                description=data.get("description"),
                function_type=data["function_type"],
                model=data["model"],
                max_tokens=data.get("max_tokens") or 1500,
                temperature=data.get("temperature") if data.get("temperature") is not None else 0.7,
                system_prompt=data.get("system_prompt"),
                guidelines_template=data.get("guidelines_template"),
                is_active=data.get("is_active") if data.get("is_active") is not None else True
            )
            self.db.add(agent)
            self.db.commit()
            self.db.refresh(agent)
            logger.info(f"✅ Agente criado: {agent.name} ({agent.function_type})")
            return {"success": True, "message": "Agente criado com sucesso", "agent": agent.to_dict()}
        except Exception as e:
            self.db.rollback()
            logger.error(f"Erro ao criar agente: {str(e)}")
            return {"error": f"Erro interno: {str(e)}", "status_code": 500}

    def update_agent(self, agent_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            agent = self.db.query(Agent).filter(Agent.id == agent_id).first()
            if not agent:
                return {"error": "Agente não encontrado", "status_code": 404}

            for field in EDITABLE_FIELDS:
                if data.get(field) is not None:
                    setattr(agent, field, data[field])

            self.db.commit()
            self.db.refresh(agent)
            return {"success": True, "message": "Agente atualizado com sucesso", "agent": agent.to_dict()}
        except Exception as e:
            self.db.rollback()
            logger.error(f"Erro ao atualizar agente {agent_id}: {str(e)}")
            return {"error": f"Erro interno: {str(e)}", "status_code": 500}

    def delete_agent(self, agent_id: int) -> Dict[str, Any]:
        """Desativa o agente (soft delete)"""
        try:
            agent = self.db.query(Agent).filter(Agent.id == agent_id).first()
            if not agent:
                return {"error": "Agente não encontrado", "status_code": 404}

            agent.is_active = False
            self.db.commit()
            return {"success": True, "message": "Agente desativado com sucesso"}
        except Exception as e:
            self.db.rollback()
            logger.error(f"Erro ao desativar agente {agent_id}: {str(e)}")
            return {"error": f"Erro interno: {str(e)}", "status_code": 500}

    def get_active_agent(self, function_type: str) -> Optional[Agent]:
        """Agente ativo mais recente para a função"""
        return self.db.query(Agent).filter(
            Agent.function_type == function_type,
            Agent.is_active == True
        ).order_by(Agent.created_at.desc(), Agent.id.desc()).first()

    def ensure_default_agent(self, function_type: str) -> Agent:
        """Retorna o agente ativo da função, criando o padrão se não existir"""
        agent = self.get_active_agent(function_type)
        if agent:
            return agent

        agent = Agent(**DEFAULT_AGENTS[function_type])
        self.db.add(agent)
        self.db.commit()
        self.db.refresh(agent)
        logger.info(f"✅ Agente padrão criado para {function_type}: {agent.name}")
        return agent
