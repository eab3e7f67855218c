#!/usr/bin/env python3
"""
Script para executar todas as migrações de banco de dados (PostgreSQL)
Execute este script em produção após fazer deploy

Uso:
    python database/fixes/run_all_migrations.py
"""
import sys
import os
import importlib.util
import logging

sys.path.append(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from app.config.database import engine

logger = logging.getLogger(__name__)

# (arquivo, função) na ordem de execução
MIGRATIONS = [
    ("fix_respostas_unique_constraint.py", "fix_respostas_unique_constraint"),
    ("optimize_catalog_queries.py", "optimize_catalog_queries"),
]


def _load(file_name: str):
    script_path = os.path.join(os.path.dirname(os.path.abspath(__file__)), file_name)
    spec = importlib.util.spec_from_file_location(file_name[:-3], script_path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def run_all_migrations() -> bool:
    """Executa todas as migrações; falhas individuais são registradas e não interrompem as demais"""
    if engine.dialect.name != "postgresql":
        logger.info(f"ℹ️ Migrações ignoradas para o banco {engine.dialect.name}")
        return False

    logger.info("🚀 Iniciando migrações de banco de dados...")
    ok = True
    for index, (file_name, function_name) in enumerate(MIGRATIONS, start=1):
        logger.info(f"📋 {index}/{len(MIGRATIONS)}: {file_name}")
        try:
            getattr(_load(file_name), function_name)()
        except Exception as e:
            ok = False
            logger.warning(f"⚠️ Erro ao executar {file_name} (pode já estar aplicada): {e}")

    if ok:
        logger.info("✅ Todas as migrações concluídas!")
    return ok


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    run_all_migrations()
