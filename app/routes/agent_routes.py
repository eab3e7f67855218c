"""
Rotas de agentes LLM
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.controllers.agent_controller import AgentController
from app.models.api_models import AgentPayload

agent_router = APIRouter(prefix="/agents", tags=["Agents"])

agent_controller = AgentController()


@agent_router.get("")
def list_agents(db: Session = Depends(get_db)):
    """Lista os agentes ativos"""
    return agent_controller.list_agents(db)


@agent_router.get("/{agent_id}")
def get_agent(agent_id: int, db: Session = Depends(get_db)):
    return agent_controller.get_agent(agent_id, db)


@agent_router.post("", status_code=201)
def create_agent(payload: AgentPayload, db: Session = Depends(get_db)):
    return agent_controller.create_agent(payload.model_dump(exclude_none=True), db)


@agent_router.put("/{agent_id}")
def update_agent(agent_id: int, payload: AgentPayload, db: Session = Depends(get_db)):
    return agent_controller.update_agent(agent_id, payload.model_dump(exclude_none=True), db)


@agent_router.delete("/{agent_id}")
def delete_agent(agent_id: int, db: Session = Depends(get_db)):
    """Desativa o agente (soft delete)"""
    return agent_controller.delete_agent(agent_id, db)
