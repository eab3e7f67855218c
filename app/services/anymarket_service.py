"""
Serviço de integração com o Anymarket
"""
import time
import logging
import requests
from typing import Dict, List, Optional, Any
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.config.settings import settings
from app.models.anymarket_models import AnymarketProduct, AnymarketSyncLog
from app.models.content_models import Title, Description, CharacteristicAnswer
from app.utils.html_formatter import convert_text_to_html
from app.utils.sync_logger import get_sync_logger

logger = logging.getLogger(__name__)

FIELD_TITLE = "Título do Produto"
FIELD_DESCRIPTION = "Descrição do Produto"
FIELD_CHARACTERISTICS = "Características do Produto"


def _error_message(response: requests.Response) -> str:
    try:
        data = response.json()
        if isinstance(data, dict):
            return data.get("message") or "Erro desconhecido"
    except ValueError:
        pass
    return response.text or "Erro desconhecido"


class AnymarketService:
    """Atualização de produtos, imagens e mapeamentos no Anymarket"""

    def __init__(self, db: Session, token: Optional[str] = None, base_url: Optional[str] = None):
        self.db = db
        self.token = token if token is not None else settings.anymarket_token
        self.base_url = (base_url or settings.anymarket_base_url).rstrip("/")
        self.timeout = 30

    def _headers(self, content_type: str = "application/json") -> Dict[str, str]:
        return {
            "gumgaToken": self.token or "",
            "Content-Type": content_type,
            "User-Agent": settings.anymarket_user_agent,
            "Accept": "application/json"
        }

    def _request(self, method: str, path: str, product_id: Optional[int] = None, **kwargs) -> requests.Response:
        url = f"{self.base_url}{path}"
        start_time = time.time()
        response = requests.request(method, url, timeout=self.timeout, **kwargs)
        get_sync_logger().log_api_call(
            "anymarket", method, path, response.status_code,
            int((time.time() - start_time) * 1000), product_id=product_id
        )
        return response

    # Atualização de produto

    def _latest_title(self, product_id: int) -> Optional[str]:
        title = self.db.query(Title).filter(
            Title.id_product_vtex == product_id, Title.status == "validated"
        ).order_by(Title.created_at.desc(), Title.id.desc()).first()
        return title.title if title else None

    def _latest_description(self, product_id: int) -> Optional[str]:
        description = self.db.query(Description).filter(
            Description.id_product_vtex == product_id, Description.status == "generated"
        ).order_by(Description.created_at.desc(), Description.id.desc()).first()
        if not description or not description.description:
            return None
        return convert_text_to_html(description.description)

    def _product_characteristics(self, product_id: int) -> List[Dict[str, Any]]:
        answers = self.db.query(CharacteristicAnswer).filter(
            CharacteristicAnswer.produto_id == product_id,
            CharacteristicAnswer.resposta.isnot(None)
        ).order_by(CharacteristicAnswer.caracteristica.asc()).all()

        answers = [a for a in answers if a.resposta and a.resposta.strip()]
        return [
            {"index": index, "name": a.caracteristica, "value": a.resposta}
            for index, a in enumerate(answers, start=1)
        ]

    def update_product(self, product_id: Optional[int], anymarket_id: Optional[Any]) -> Dict[str, Any]:
        """Envia título, descrição e características gerados para o produto no Anymarket (PATCH)"""
        if not product_id or not anymarket_id:
            return {"error": "productId e anymarketId são obrigatórios"}

        try:
            new_title = self._latest_title(product_id)
            if not new_title:
                return {"error": "Nenhum título gerado encontrado para este produto", "status_code": 404}

            new_description = self._latest_description(product_id)
            characteristics = self._product_characteristics(product_id)

            get_response = self._request("GET", f"/products/{anymarket_id}", product_id, headers=self._headers())
            if not get_response.ok:
                return {
                    "error": f"Erro ao buscar dados atuais do produto: {_error_message(get_response)}",
                    "status_code": get_response.status_code
                }
            current = get_response.json()

            updates = []
            if current.get("title") != new_title:
                updates.append({"field": FIELD_TITLE, "oldValue": current.get("title"), "newValue": new_title})
            if new_description and current.get("description") != new_description:
                updates.append({"field": FIELD_DESCRIPTION, "oldValue": current.get("description"), "newValue": new_description})
            if characteristics:
                updates.append({"field": FIELD_CHARACTERISTICS, "oldValue": "N/A",
                                "newValue": f"{len(characteristics)} características"})

            if not updates:
                return {
                    "success": True,
                    "message": "Título, descrição e características já estão sincronizados - nenhuma atualização necessária",
                    "data": {
                        "anymarket_id": anymarket_id,
                        "action": "no_updates_needed",
                        "updates": [],
                        "response": current
                    }
                }

            model_value = current.get("model")
            model_answer = next((c for c in characteristics if "modelo" in c["name"].lower()), None)
            if model_answer:
                model_value = model_answer["value"]

            patch_payload = {
                "title": new_title,
                "description": new_description or current.get("description"),
                "characteristics": characteristics
            }
            if model_value and model_value != current.get("model"):
                patch_payload["model"] = model_value

            target_id = current.get("id") or anymarket_id
            patch_response = self._request(
                "PATCH", f"/products/{target_id}", product_id,
                headers=self._headers("application/merge-patch+json"),
                json=patch_payload
            )
            if not patch_response.ok:
                logger.error(f"❌ Erro no PATCH do produto Anymarket {target_id}: {patch_response.status_code}")
                self._save_sync_log(product_id, anymarket_id, new_title, new_description or "", None,
                                    action="update_failed",
                                    error_message=f"{patch_response.status_code} - {patch_response.text[:500]}")
                return {
                    "error": f"Erro ao atualizar produto no Anymarket: {patch_response.status_code} - {_error_message(patch_response)}",
                    "status_code": 500
                }

            try:
                patch_result = patch_response.json()
            except ValueError:
                patch_result = {"status": patch_response.status_code}

            self._save_sync_log(product_id, anymarket_id, new_title, new_description or "", patch_result, action="update")

            updated_fields = " e ".join(u["field"] for u in updates)
            characteristics_message = f" e {len(characteristics)} características" if characteristics else ""
            logger.info(f"✅ Produto {product_id} atualizado no Anymarket ({anymarket_id})")

            return {
                "success": True,
                "message": f"Produto atualizado com sucesso: {updated_fields}{characteristics_message} atualizados",
                "data": {
                    "anymarket_id": anymarket_id,
                    "action": "product_updated_patch",
                    "updates": updates,
                    "characteristics": characteristics,
                    "characteristics_count": len(characteristics),
                    "patch_payload": patch_payload,
                    "response": patch_result
                }
            }

        except requests.RequestException as e:
            logger.error(f"❌ Erro de conexão com o Anymarket: {str(e)}")
            return {"error": f"Erro de conexão com o Anymarket: {str(e)}", "status_code": 502}
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Erro ao atualizar produto {product_id} no Anymarket: {str(e)}")
            return {"error": "Erro interno do servidor ao atualizar produto", "status_code": 500}

    def _save_sync_log(self, product_id: int, anymarket_id: Any, title: str, description: str,
                       response_data: Any, action: str, error_message: Optional[str] = None):
        """Grava o histórico; falhas aqui só geram log"""
        try:
            self.db.add(AnymarketSyncLog(
                id_produto_vtex=product_id,
                id_produto_any=int(anymarket_id),
                title=title,
                description=description,
                sync_type="info" if not error_message else "error",
                action=action,
                response_data=response_data,
                error_message=error_message
            ))
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.warning(f"⚠️ Erro ao salvar log de sincronização: {str(e)}")

        get_sync_logger().log_event(
            "anymarket_sync",
            {"description": f"Atualização Anymarket {anymarket_id}", "action": action},
            product_id=product_id,
            success=error_message is None,
            error_message=error_message
        )

    # Imagens

    def upload_image(self, anymarket_id: Optional[Any], image_url: Optional[str],
                     index: Optional[int] = None, main: Optional[bool] = None) -> Dict[str, Any]:
        if not anymarket_id or not image_url:
            return {"error": "anymarketId e imageUrl são obrigatórios"}
        if not self.token:
            return {"error": "Token do Anymarket não configurado"}

        try:
            response = self._request(
                "POST", f"/products/{anymarket_id}/images",
                headers=self._headers(),
                json={"index": index or 1, "main": main or False, "url": image_url}
            )
            if not response.ok:
                return {
                    "error": f"Erro ao enviar imagem para Anymarket: {response.status_code} - {response.text}",
                    "status_code": response.status_code
                }

            try:
                data = response.json()
            except ValueError:
                data = None
            return {"success": True, "message": "Imagem enviada para Anymarket com sucesso", "data": data}

        except requests.RequestException as e:
            logger.error(f"❌ Erro ao enviar imagem para o Anymarket: {str(e)}")
            return {"error": "Erro interno do servidor ao enviar imagem para Anymarket", "status_code": 500}

    def delete_image(self, anymarket_id: Optional[Any], image_id: Optional[Any]) -> Dict[str, Any]:
        if not anymarket_id or not image_id:
            return {"error": "anymarketId e imageId são obrigatórios"}
        if not self.token:
            return {"error": "Token do Anymarket não configurado"}

        try:
            response = self._request(
                "DELETE", f"/products/{anymarket_id}/images/{image_id}", headers=self._headers()
            )
            if not response.ok:
                return {
                    "error": f"Erro ao deletar imagem: {response.status_code} - {response.text}",
                    "status_code": response.status_code
                }
            return {"success": True, "message": f"Imagem {image_id} deletada com sucesso"}

        except requests.RequestException as e:
            logger.error(f"❌ Erro ao deletar imagem no Anymarket: {str(e)}")
            return {"error": "Erro interno do servidor ao deletar imagem", "status_code": 500}

    # Mapeamentos

    def list_mappings(self, search: Optional[str] = None, page: int = 1, limit: int = 50) -> Dict[str, Any]:
        query = self.db.query(AnymarketProduct)
        if search:
            like = f"%{search}%"
            query = query.filter(or_(
                AnymarketProduct.ref_vtex.ilike(like),
                AnymarketProduct.title.ilike(like)
            ))

        total = query.count()
        page = max(page, 1)
        items = query.order_by(AnymarketProduct.id.desc()).offset((page - 1) * limit).limit(limit).all()

        return {
            "success": True,
            "data": [i.to_dict() for i in items],
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "totalPages": (total + limit - 1) // limit if limit else 0
            }
        }

    def create_mapping(self, data: Dict[str, Any]) -> Dict[str, Any]:
        if not data.get("id_produto_any") or not data.get("ref_vtex"):
            return {"error": "id_produto_any e ref_vtex são obrigatórios"}

        try:
            exists = self.db.query(AnymarketProduct.id).filter(
                AnymarketProduct.id_produto_any == data["id_produto_any"]
            ).first()
            if exists:
                return {"error": "Produto Anymarket já cadastrado"}

            mapping = AnymarketProduct(
                id_produto_any=data["id_produto_any"],
                ref_vtex=data["ref_vtex"],
                id_produto_vtex=data.get("id_produto_vtex"),
                title=data.get("title")
            )
            self.db.add(mapping)
            self.db.commit()
            self.db.refresh(mapping)
            return {"success": True, "message": "Mapeamento criado com sucesso", "data": mapping.to_dict()}
        except Exception as e:
            self.db.rollback()
            logger.error(f"Erro ao criar mapeamento Anymarket: {str(e)}")
            return {"error": f"Erro interno: {str(e)}", "status_code": 500}

    def list_sync_logs(self, product_id: Optional[int] = None, limit: int = 100) -> Dict[str, Any]:
        query = self.db.query(AnymarketSyncLog)
        if product_id:
            query = query.filter(AnymarketSyncLog.id_produto_vtex == product_id)
        logs = query.order_by(AnymarketSyncLog.created_at.desc(), AnymarketSyncLog.id.desc()).limit(limit).all()
        return {"success": True, "data": [l.to_dict() for l in logs], "total": len(logs)}
