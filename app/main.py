import os
import time
import atexit
import logging
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.config.settings import settings
from app.config.database import engine, Base, SessionLocal
from app.models import catalog_models, content_models, anymarket_models, user_models  # noqa: F401 (registra as tabelas)
from app.routes.auth_routes import auth_router
from app.routes.analysis_routes import analysis_router
from app.routes.content_routes import content_router
from app.routes.agent_routes import agent_router
from app.routes.catalog_routes import catalog_router
from app.routes.anymarket_routes import anymarket_router
from app.routes.pixian_routes import pixian_router
from app.routes.dashboard_routes import dashboard_router, dashboard_page_router
from app.services.stock_import_service import StockImportService

# Scheduler para sincronização automática de estoque
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Inicializar FastAPI
app = FastAPI(
    title="B2B SEO Hub",
    description="Catálogo VTEX, conteúdo gerado por IA e publicação no Anymarket",
    version="1.0.0",
    docs_url="/docs"
)

# Configurar CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Imagens processadas pela Pixian
os.makedirs(settings.processed_images_dir, exist_ok=True)
app.mount("/processed-images", StaticFiles(directory=settings.processed_images_dir), name="processed-images")


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Erros no formato {success: false, message}"""
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.detail},
        headers=getattr(exc, "headers", None)
    )


# Inicializar scheduler
scheduler = BackgroundScheduler()


def run_stock_sync():
    """Atualiza o estoque de todos os SKUs ativos"""
    db = SessionLocal()
    try:
        logger.info("🔄 [STOCK-SYNC] Iniciando atualização de estoque...")
        result = StockImportService(db).import_all_active_skus()
        if result.get("success"):
            logger.info(f"✅ [STOCK-SYNC] {result.get('message', 'Concluído')}")
        else:
            logger.error(f"❌ [STOCK-SYNC] {result.get('error')}")
    except Exception as e:
        logger.error(f"❌ [STOCK-SYNC] Erro na atualização de estoque: {e}")
    finally:
        db.close()


def run_startup_migrations():
    """Executa database/fixes/run_all_migrations.py (somente PostgreSQL)"""
    if engine.dialect.name != "postgresql":
        return

    import importlib.util
    script_path = os.path.join(
        os.path.dirname(os.path.dirname(os.path.abspath(__file__))),
        "database", "fixes", "run_all_migrations.py"
    )
    if not os.path.exists(script_path):
        logger.warning("⚠️ [STARTUP] Script de migrações não encontrado")
        return

    spec = importlib.util.spec_from_file_location("run_all_migrations", script_path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    module.run_all_migrations()


@app.on_event("startup")
async def startup_event():
    """Evento de inicialização da aplicação"""
    logger.info("🚀 [STARTUP] Iniciando aplicação...")

    # Criar tabelas se não existirem (com retry para conexões lentas)
    max_retries = 3
    retry_delay = 2

    for attempt in range(max_retries):
        try:
            logger.info(f"🔄 [STARTUP] Conectando ao banco de dados (tentativa {attempt + 1}/{max_retries})...")
            Base.metadata.create_all(bind=engine, checkfirst=True)
            logger.info("✅ Banco de dados inicializado")
            break
        except Exception as db_error:
            if "already exists" in str(db_error).lower():
                logger.info("ℹ️ [STARTUP] Tabelas/índices já existem no banco, continuando...")
                break
            if attempt < max_retries - 1:
                logger.warning(f"⚠️ [STARTUP] Falha na conexão, tentando novamente em {retry_delay}s...")
                time.sleep(retry_delay)
            else:
                logger.error(f"❌ [STARTUP] Falha ao conectar após {max_retries} tentativas")
                raise

    try:
        run_startup_migrations()
    except Exception as e:
        logger.warning(f"⚠️ [STARTUP] Erro ao executar migrações automáticas: {e}")

    if settings.stock_sync_enabled:
        scheduler.add_job(
            run_stock_sync,
            trigger=IntervalTrigger(minutes=settings.stock_sync_interval_minutes),
            id="stock_sync",
            name="Atualizar estoque de todos os SKUs ativos",
            replace_existing=True
        )
        if not scheduler.running:
            scheduler.start()
        logger.info(f"🔄 [STARTUP] Sincronização de estoque a cada {settings.stock_sync_interval_minutes} minutos")
    else:
        logger.info("ℹ️ [STARTUP] Sincronização automática de estoque desabilitada")

    logger.info("✅ [STARTUP] Aplicação inicializada com sucesso!")


@app.on_event("shutdown")
async def shutdown_event():
    """Evento de encerramento da aplicação"""
    try:
        if scheduler.running:
            scheduler.shutdown()
            logger.info("🛑 Scheduler de estoque parado")
    except Exception as e:
        logger.error(f"❌ Erro ao parar scheduler: {e}")


# Garantir que o scheduler seja parado ao sair
atexit.register(lambda: scheduler.shutdown() if scheduler.running else None)

# Incluir todas as rotas com prefixo /api
app.include_router(auth_router, prefix="/api")
app.include_router(analysis_router, prefix="/api")
app.include_router(content_router, prefix="/api")
app.include_router(agent_router, prefix="/api")
app.include_router(catalog_router, prefix="/api")
app.include_router(anymarket_router, prefix="/api")
app.include_router(pixian_router, prefix="/api")
app.include_router(dashboard_router, prefix="/api")
app.include_router(dashboard_page_router)  # Para /dashboard (HTML)


@app.get("/health")
async def health_check():
    return {"status": "ok", "environment": settings.environment}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug
    )
