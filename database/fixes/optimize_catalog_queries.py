#!/usr/bin/env python3
"""
Script para otimizar consultas do catálogo e do conteúdo gerado criando índices
"""
import sys
import os
import logging

sys.path.append(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from app.config.database import engine
from sqlalchemy import text

logger = logging.getLogger(__name__)

INDEXES = [
    {
        "table": "skus_vtex",
        "name": "idx_skus_vtex_produto_active",
        "sql": "CREATE INDEX IF NOT EXISTS idx_skus_vtex_produto_active ON skus_vtex (id_produto_vtex, is_active)",
        "description": "SKUs ativos por produto (estoque agendado e detalhes do produto)"
    },
    {
        "table": "images_vtex",
        "name": "idx_images_vtex_sku_main",
        "sql": "CREATE INDEX IF NOT EXISTS idx_images_vtex_sku_main ON images_vtex (id_sku_vtex, is_main DESC, id_photo_vtex)",
        "description": "Seleção das imagens principais para análise"
    },
    {
        "table": "titles",
        "name": "idx_titles_product_status_created",
        "sql": "CREATE INDEX IF NOT EXISTS idx_titles_product_status_created ON titles (id_product_vtex, status, created_at DESC)",
        "description": "Último título validado por produto"
    },
    {
        "table": "descriptions",
        "name": "idx_descriptions_product_status_created",
        "sql": "CREATE INDEX IF NOT EXISTS idx_descriptions_product_status_created ON descriptions (id_product_vtex, status, created_at DESC)",
        "description": "Última descrição gerada por produto"
    },
    {
        "table": "anymarket_sync_logs",
        "name": "idx_anymarket_sync_logs_product_created",
        "sql": "CREATE INDEX IF NOT EXISTS idx_anymarket_sync_logs_product_created ON anymarket_sync_logs (id_produto_vtex, created_at DESC)",
        "description": "Histórico de sincronização por produto"
    },
]


def optimize_catalog_queries():
    """Cria os índices das tabelas que já existem no banco"""
    created = 0
    with engine.begin() as conn:
        existing_tables = {
            row[0] for row in conn.execute(text(
                "SELECT table_name FROM information_schema.tables WHERE table_schema = 'public'"
            ))
        }

        for index in INDEXES:
            if index["table"] not in existing_tables:
                logger.warning(f"⚠️ Tabela {index['table']} não existe, índice {index['name']} ignorado")
                continue
            conn.execute(text(index["sql"]))
            created += 1
            logger.info(f"✅ {index['name']}: {index['description']}")

    return created


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    total = optimize_catalog_queries()
    logger.info(f"✅ {total} índices verificados/criados")
