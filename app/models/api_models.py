"""
Modelos Pydantic das requisições e respostas da API
"""
from pydantic import BaseModel, Field
from typing import Optional, Union, Any


class BatchAnalysisResult(BaseModel):
    """Resultado da análise de um produto dentro de um lote"""
    productId: Any  # valor recebido, mesmo inválido
    productName: str
    success: bool = False
    message: str = "Aguardando processamento..."
    error: Optional[str] = None
    duration: Optional[int] = None  # ms

    def to_response(self):
        data = self.model_dump(exclude_none=True)
        data["productId"] = self.productId
        return data


class BatchAnalysisRequest(BaseModel):
    """Requisição de análise de imagens em lote"""
    product_ids: Any = Field(None, alias="productIds")
    skip_existing: bool = Field(False, alias="skipExisting")

    class Config:
        populate_by_name = True


class ImageAnalysisRequest(BaseModel):
    """Requisição de análise de imagens de um produto"""
    product_id: Optional[int] = Field(None, alias="productId")
    category_vtex_id: Optional[int] = Field(None, alias="categoryVtexId")
    force_new_analysis: bool = Field(False, alias="forceNewAnalysis")

    class Config:
        populate_by_name = True


class ProductGenerationRequest(BaseModel):
    """Requisição de geração de conteúdo (título, descrição, características)"""
    product_id: Optional[int] = Field(None, alias="productId")
    force_regenerate: bool = Field(False, alias="forceRegenerate")

    class Config:
        populate_by_name = True


class AgentPayload(BaseModel):
    """Dados de criação/atualização de agente"""
    name: Optional[str] = None
    description: Optional[str] = None
    function_type: Optional[str] = None
    model: Optional[str] = None
    max_tokens: Optional[int] = None
    temperature: Optional[float] = None
    system_prompt: Optional[str] = None
    guidelines_template: Optional[str] = None
    is_active: Optional[bool] = None

    class Config:
        protected_namespaces = ()
        json_schema_extra = {
            "example": {
                "name": "Gerador de Títulos SEO",
                "function_type": "title_generation",
                "model": "gpt-4o-mini",
                "max_tokens": 100,
                "temperature": 0.7
            }
        }


class CharacteristicPayload(BaseModel):
    """Dados de criação/atualização de característica"""
    caracteristica: Optional[str] = None
    pergunta_ia: Optional[str] = None
    valores_possiveis: Optional[str] = None
    categorias: Optional[str] = None
    is_active: Optional[bool] = None


class AnymarketUpdateRequest(BaseModel):
    """Atualização de produto no Anymarket"""
    product_id: Optional[int] = Field(None, alias="productId")
    anymarket_id: Optional[int] = Field(None, alias="anymarketId")

    class Config:
        populate_by_name = True


class AnymarketImageRequest(BaseModel):
    """Upload de imagem no Anymarket"""
    anymarket_id: Optional[int] = Field(None, alias="anymarketId")
    image_url: Optional[str] = Field(None, alias="imageUrl")
    index: Optional[int] = None
    main: Optional[bool] = None

    class Config:
        populate_by_name = True


class AnymarketMappingPayload(BaseModel):
    """Novo mapeamento produto Anymarket <-> VTEX"""
    id_produto_any: Optional[int] = None
    ref_vtex: Optional[str] = None
    id_produto_vtex: Optional[int] = None
    title: Optional[str] = None


class PixianRequest(BaseModel):
    """Remoção de fundo de imagem via Pixian"""
    image_url: Optional[str] = Field(None, alias="imageUrl")
    product_id: Optional[Union[int, str]] = Field(None, alias="productId")

    class Config:
        populate_by_name = True


class LoginRequest(BaseModel):
    """Credenciais de login (aceita nomes em português e inglês)"""
    email: Optional[str] = None
    username: Optional[str] = None
    senha: Optional[str] = None
    password: Optional[str] = None

    def login(self) -> Optional[str]:
        return self.email or self.username

    def secret(self) -> Optional[str]:
        return self.senha or self.password


class VtexImportRequest(BaseModel):
    """Importação de catálogo a partir de RefIds VTEX"""
    ref_ids: Optional[list] = Field(None, alias="refIds")

    class Config:
        populate_by_name = True


class StockImportRequest(BaseModel):
    """Importação de estoque para uma lista de SKUs"""
    sku_ids: Optional[list] = Field(None, alias="skuIds")
    warehouse: Optional[str] = None

    class Config:
        populate_by_name = True
