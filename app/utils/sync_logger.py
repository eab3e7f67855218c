"""
Logger de eventos de integração (VTEX, Anymarket, OpenAI, Pixian)
"""
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, Optional

from app.config.settings import settings


class SyncEventLogger:
    """Grava eventos de integração em arquivos JSON por tipo de evento"""

    def __init__(self, log_dir: Optional[str] = None):
        self.log_dir = Path(log_dir or settings.log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.logger = logging.getLogger("sync_events")
        self.logger.setLevel(logging.INFO)

        # Evitar duplicação de handlers
        if not self.logger.handlers:
            general_handler = logging.FileHandler(
                self.log_dir / "integrations.log",
                encoding='utf-8'
            )
            general_handler.setLevel(logging.INFO)
            general_handler.setFormatter(logging.Formatter('%(asctime)s - %(levelname)s - %(message)s'))
            self.logger.addHandler(general_handler)

    def log_event(self, event_type: str, data: Dict[str, Any], product_id: Optional[int] = None,
                  success: bool = True, error_message: Optional[str] = None):
        """Registra um evento de integração"""
        try:
            log_entry = {
                "timestamp": datetime.now().isoformat(),
                "event_type": event_type,
                "product_id": product_id,
                "success": success,
                "error_message": error_message,
                "data": data
            }

            if success:
                self.logger.info(f"✅ {event_type}: {data.get('description', 'Evento processado')} - Produto: {product_id}")
            else:
                self.logger.error(f"❌ {event_type}: {data.get('description', 'Erro no evento')} - Produto: {product_id} - Erro: {error_message}")

            self._append(self.log_dir / f"{event_type}.jsonl", log_entry)

        except Exception as e:
            self.logger.error(f"❌ Erro ao logar evento {event_type}: {e}")

    def log_api_call(self, service: str, method: str, url: str, status_code: Optional[int] = None,
                     response_time_ms: Optional[int] = None, product_id: Optional[int] = None,
                     error_message: Optional[str] = None):
        """Registra uma chamada a uma API externa"""
        success = status_code is not None and 200 <= status_code < 300
        data = {
            "service": service,
            "method": method,
            "url": url,
            "status_code": status_code,
            "response_time_ms": response_time_ms,
            "description": f"{service} {method} {url}"
        }
        self.log_event("api_call", data, product_id, success, error_message)

    def _append(self, file_path: Path, log_entry: Dict[str, Any]):
        with open(file_path, "a", encoding="utf-8") as f:
            f.write(json.dumps(log_entry, ensure_ascii=False, default=str) + "\n")


_sync_logger: Optional[SyncEventLogger] = None


def get_sync_logger() -> SyncEventLogger:
    """Instância compartilhada do logger de integrações"""
    global _sync_logger
    if _sync_logger is None:
        _sync_logger = SyncEventLogger()
    return _sync_logger
