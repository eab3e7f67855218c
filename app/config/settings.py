import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Configurações da aplicação"""

    def __init__(self):
        # Detecta ambiente (produção ou desenvolvimento)
        self.environment = os.getenv("ENVIRONMENT", "development").lower()
        self.is_production = self.environment == "production"

        # API Configuration
        self.api_host = os.getenv("API_HOST", "0.0.0.0")
        self.api_port = int(os.getenv("API_PORT", "8000"))
        self.debug = os.getenv("DEBUG", str(not self.is_production)).lower() == "true"
        self.base_url = os.getenv("BASE_URL", f"http://localhost:{self.api_port}")

        # VTEX
        self.vtex_account = os.getenv("VTEX_ACCOUNT", "")
        self.vtex_environment = os.getenv("VTEX_ENVIRONMENT", "vtexcommercestable")
        self.vtex_app_key = os.getenv("VTEX_APP_KEY", "")
        self.vtex_app_token = os.getenv("VTEX_APP_TOKEN", "")
        self.vtex_timeout = int(os.getenv("VTEX_TIMEOUT", "30"))
        # Warehouse usado nas importações de estoque
        self.vtex_default_warehouse = os.getenv("VTEX_DEFAULT_WAREHOUSE", "13")

        # Anymarket (token gumga)
        self.anymarket_token = os.getenv("ANYMARKET", "")
        self.anymarket_base_url = os.getenv("ANYMARKET_BASE_URL", "https://api.anymarket.com.br/v2").rstrip("/")
        self.anymarket_user_agent = "Meli-Integration/1.0"

        # OpenAI
        self.openai_api_key = os.getenv("OPENAI_API_KEY", "")

        # Pixian.ai
        self.pixian_api_id = os.getenv("PIXIAN_API_ID", "")
        self.pixian_api_secret = os.getenv("PIXIAN_API_SECRET", "")
        self.pixian_api_url = os.getenv("PIXIAN_API_URL", "https://api.pixian.ai/api/v2/remove-background")
        self.processed_images_dir = os.getenv("PROCESSED_IMAGES_DIR", "public/processed-images")

        # Autenticação
        self.jwt_secret = os.getenv("JWT_SECRET", "")
        if not self.jwt_secret:
            if self.is_production:
                raise ValueError("❌ ERRO CRÍTICO: JWT_SECRET deve ser definido nas variáveis de ambiente!")
            self.jwt_secret = "dev-secret-change-me"
        self.jwt_algorithm = "HS256"
        self.jwt_expires_hours = int(os.getenv("JWT_EXPIRES_HOURS", "24"))

        # Análise de imagens em lote: pausa fixa entre produtos
        self.batch_pause_seconds = float(os.getenv("BATCH_PAUSE_SECONDS", "0.1"))

        # Sincronização automática de estoque (APScheduler)
        self.stock_sync_enabled = os.getenv("STOCK_SYNC_ENABLED", "false").lower() == "true"
        self.stock_sync_interval_minutes = int(os.getenv("STOCK_SYNC_INTERVAL_MINUTES", "60"))

        # Logs de integração
        self.log_dir = os.getenv("LOG_DIR", "app/logs")

    @property
    def vtex_base_url(self) -> Optional[str]:
        """URL base da loja VTEX (None se a conta não estiver configurada)"""
        if not self.vtex_account:
            return None
        return f"https://{self.vtex_account}.{self.vtex_environment}.com.br"


# Instância global das configurações
settings = Settings()
