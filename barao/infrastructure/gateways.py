# barao/infrastructure/gateways.py

import dataclasses
import logging
import re
from typing import Any, Dict, List, Optional

import requests

from barao.core.entities import Order, OrderStatus, Product, ProductDraft, StatusConexao
from barao.core.exceptions import CepInvalidoError, CepNaoEncontradoError, ErroConectividade
from barao.core.ports import IBuscaCep, IPersistenciaGateway
from barao.infrastructure.mappers import PedidoMapper, ProdutoMapper

logger = logging.getLogger(__name__)

# ====================================================================
# GATEWAYS: Implementações concretas que se comunicam com APIs externas.
# ====================================================================

class SupabaseGateway(IPersistenciaGateway):
    """
    Gateway para o banco remoto (Supabase / PostgREST).
    Implementa a interface IPersistenciaGateway.

    Toda falha de rede, resposta fora da faixa 2xx ou linha ilegível vira
    ErroConectividade e marca o gateway como desconectado.
    """

    TABELA_PRODUTOS = 'products'
    TABELA_PEDIDOS = 'orders'

    def __init__(self, url: Optional[str], chave: Optional[str], timeout: float = 10.0, sessao=None):
        self.api_base_url = f"{url.rstrip('/')}/rest/v1" if url else None
        self.chave = chave or ''
        self.timeout = timeout
        self.http = sessao or requests.Session()
        self._status = StatusConexao.DESCONHECIDO

        self.headers = {
            "apikey": self.chave,
            "Authorization": f"Bearer {self.chave}",
            "Content-Type": "application/json",
        }

    # --- Estado da conexão ---

    @property
    def status_conexao(self) -> StatusConexao:
        return self._status

    # --- Requisição base ---

    def _requisitar(
        self,
        metodo: str,
        tabela: str,
        params: Optional[Dict[str, str]] = None,
        payload: Any = None,
        retornar: bool = False,
    ) -> Any:
        if not self.api_base_url:
            self._status = StatusConexao.DESCONECTADO
            raise ErroConectividade("SUPABASE_URL não configurada; operando apenas com dados locais.")

        headers = dict(self.headers)
        if retornar:
            headers["Prefer"] = "return=representation"

        try:
            response = self.http.request(
                metodo,
                f"{self.api_base_url}/{tabela}",
                params=params,
                json=payload,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()  # Levanta um erro para códigos de status HTTP 4xx/5xx
            dados = response.json() if response.content else None
        except requests.exceptions.RequestException as e:
            self._status = StatusConexao.DESCONECTADO
            logger.warning(f"Falha em {metodo} /{tabela}: {e}")
            raise ErroConectividade(f"Erro de conexão com o banco remoto: {e}") from e
        except ValueError as e:
            self._status = StatusConexao.DESCONECTADO
            raise ErroConectividade(f"Resposta inválida do banco remoto em /{tabela}: {e}") from e

        self._status = StatusConexao.CONECTADO
        return dados

    def _mapear(self, linhas: Optional[List[Dict]], mapper) -> List:
        try:
            return [mapper.to_entity(linha) for linha in (linhas or [])]
        except (KeyError, ValueError, TypeError) as e:
            self._status = StatusConexao.DESCONECTADO
            raise ErroConectividade(f"Dados rejeitados ao ler o banco remoto: {e}") from e

    # --- Produtos ---

    def buscar_produtos(self) -> List[Product]:
        linhas = self._requisitar("GET", self.TABELA_PRODUTOS, params={"select": "*", "order": "id.asc"})
        return self._mapear(linhas, ProdutoMapper)

    def inserir_produto(self, draft: ProductDraft) -> Product:
        """Insere o produto e devolve a linha criada, já com o ID gerado pelo banco."""
        linhas = self._requisitar(
            "POST", self.TABELA_PRODUTOS, payload=ProdutoMapper.draft_to_row(draft), retornar=True
        )
        produtos = self._mapear(linhas, ProdutoMapper)
        if not produtos:
            raise ErroConectividade("O banco remoto não devolveu o produto inserido.")
        # O peso não tem coluna remota; mantém o valor do formulário
        return dataclasses.replace(produtos[0], weight=draft.weight)

    def atualizar_produto(self, produto_id: str, draft: ProductDraft) -> None:
        self._requisitar(
            "PATCH", self.TABELA_PRODUTOS,
            params={"id": f"eq.{produto_id}"},
            payload=ProdutoMapper.draft_to_row(draft),
        )

    def atualizar_estoque(self, produto_id: str, novo_estoque: int) -> None:
        # Piso em zero: diferente da subtração simples, o estoque nunca fica negativo.
        self._requisitar(
            "PATCH", self.TABELA_PRODUTOS,
            params={"id": f"eq.{produto_id}"},
            payload={"estoque": max(0, novo_estoque)},
        )

    # --- Pedidos ---

    def buscar_pedidos(self) -> List[Order]:
        linhas = self._requisitar("GET", self.TABELA_PEDIDOS, params={"select": "*", "order": "created_at.asc"})
        return self._mapear(linhas, PedidoMapper)

    def inserir_pedido(self, pedido: Order) -> None:
        self._requisitar("POST", self.TABELA_PEDIDOS, payload=PedidoMapper.to_row(pedido), retornar=True)

    def atualizar_status_pedido(self, pedido_id: str, status: OrderStatus) -> None:
        self._requisitar(
            "PATCH", self.TABELA_PEDIDOS,
            params={"id": f"eq.{pedido_id}"},
            payload={"status": status.value},
        )


class ViaCepGateway(IBuscaCep):
    """Gateway para a consulta pública de CEP (ViaCEP)."""

    def __init__(self, timeout: float = 5.0):
        self.base_url = "https://viacep.com.br/ws"
        self.timeout = timeout

    def buscar_endereco(self, cep: str) -> Dict[str, str]:
        """Retorna os campos do endereço e a linha pronta para o checkout."""
        digitos = re.sub(r'\D', '', cep or '')
        if len(digitos) != 8:
            raise CepInvalidoError()

        try:
            response = requests.get(f"{self.base_url}/{digitos}/json/", timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            raise ErroConectividade(f"Erro de conexão com o serviço de CEP: {e}") from e
        except ValueError as e:
            raise ErroConectividade(f"Resposta inválida do serviço de CEP: {e}") from e

        if data.get("erro"):
            raise CepNaoEncontradoError()

        return {
            "cep": digitos,
            "logradouro": data.get("logradouro", ""),
            "bairro": data.get("bairro", ""),
            "localidade": data.get("localidade", ""),
            "uf": data.get("uf", ""),
            "endereco": f"{data.get('logradouro', '')}, {data.get('bairro', '')}, "
                        f"{data.get('localidade', '')} - {data.get('uf', '')}",
        }
