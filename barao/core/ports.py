# barao/core/ports.py
"""
Definição das Portas (Interfaces/Protocolos) da Arquitetura Limpa.

Estes protocolos definem o contrato que a camada de Infraestrutura (Gateways, Cache)
DEVE seguir para se conectar à camada Core (Casos de Uso e Controlador).
"""

from typing import Protocol, List, Optional, Dict
from abc import abstractmethod

from barao.core.entities import (
    Product, ProductDraft, Order, OrderStatus, StatusConexao
)


# ====================================================================
# 1. PERSISTÊNCIA REMOTA
# ====================================================================

class IPersistenciaGateway(Protocol):
    """
    Protocolo do banco remoto (coleções 'products' e 'orders').
    Qualquer falha de rede ou consulta DEVE ser levantada como ErroConectividade.
    """

    @property
    @abstractmethod
    def status_conexao(self) -> StatusConexao: ...

    @abstractmethod
    def buscar_produtos(self) -> List[Product]: ...

    @abstractmethod
    def buscar_pedidos(self) -> List[Order]: ...

    @abstractmethod
    def inserir_pedido(self, pedido: Order) -> None: ...

    @abstractmethod
    def atualizar_estoque(self, produto_id: str, novo_estoque: int) -> None: ...

    @abstractmethod
    def inserir_produto(self, draft: ProductDraft) -> Product: ...

    @abstractmethod
    def atualizar_produto(self, produto_id: str, draft: ProductDraft) -> None: ...

    @abstractmethod
    def atualizar_status_pedido(self, pedido_id: str, status: OrderStatus) -> None: ...


# ====================================================================
# 2. ARMAZENAMENTO LOCAL
# ====================================================================

class ICacheLocal(Protocol):
    """Snapshot chave-valor do catálogo, usado apenas quando o banco remoto cai."""

    @abstractmethod
    def salvar_produtos(self, produtos: List[Product]) -> None: ...

    @abstractmethod
    def carregar_produtos(self) -> Optional[List[Product]]: ...


# ====================================================================
# 3. SERVIÇOS EXTERNOS
# ====================================================================

class IBuscaCep(Protocol):
    """Consulta de endereço por CEP."""

    @abstractmethod
    def buscar_endereco(self, cep: str) -> Dict[str, str]: ...
