#!/usr/bin/env python3
"""
Garante a constraint única (produto_id, caracteristica) em respostas_caracteristicas.

Bancos antigos aceitavam respostas duplicadas; as duplicatas são removidas
mantendo a resposta mais recente antes de criar a constraint.
"""
import sys
import os
import logging

sys.path.append(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from app.config.database import engine
from sqlalchemy import text

logger = logging.getLogger(__name__)

CONSTRAINT_NAME = "uq_resposta_produto_caracteristica"


def fix_respostas_unique_constraint() -> bool:
    """Retorna True se a constraint foi criada nesta execução"""
    with engine.begin() as conn:
        table_exists = conn.execute(text("""
            SELECT 1 FROM information_schema.tables
            WHERE table_name = 'respostas_caracteristicas'
        """)).first()
        if not table_exists:
            logger.info("ℹ️ Tabela respostas_caracteristicas ainda não existe")
            return False

        constraint_exists = conn.execute(text("""
            SELECT 1 FROM information_schema.table_constraints
            WHERE table_name = 'respostas_caracteristicas' AND constraint_name = :name
        """), {"name": CONSTRAINT_NAME}).first()
        if constraint_exists:
            logger.info(f"✅ Constraint {CONSTRAINT_NAME} já existe")
            return False

        removed = conn.execute(text("""
            DELETE FROM respostas_caracteristicas r
            USING respostas_caracteristicas newer
            WHERE r.produto_id = newer.produto_id
              AND r.caracteristica = newer.caracteristica
              AND r.id < newer.id
        """)).rowcount
        if removed:
            logger.warning(f"⚠️ {removed} respostas duplicadas removidas")

        conn.execute(text(
            f"ALTER TABLE respostas_caracteristicas "
            f"ADD CONSTRAINT {CONSTRAINT_NAME} UNIQUE (produto_id, caracteristica)"
        ))
        logger.info(f"✅ Constraint {CONSTRAINT_NAME} criada")
        return True


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    fix_respostas_unique_constraint()
