# barao/core/calculos.py
"""
Funções puras usadas pelos casos de uso e pelas views:
totais, taxas de entrega, filtro do catálogo, link do mapa e ID de pedido.
"""
import random
import threading
import time
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Union
from urllib.parse import quote

from barao.core.constants import ARTIGOS, FILTRO_DICAS, FILTRO_TODOS, TAXA_ENTREGA, URL_BUSCA_MAPS
from barao.core.entities import (
    Article, CartItem, Category, DeliveryType, Order, OrderStatus, Product
)


# ====================================================================
# TOTAIS
# ====================================================================

def calcular_subtotal(itens: Iterable[CartItem]) -> Decimal:
    """Soma de preço x quantidade de todas as linhas."""
    return sum((item.price * item.quantity for item in itens), Decimal('0.00'))


def taxa_entrega_carrinho(subtotal: Decimal) -> Decimal:
    """Tela do carrinho: cobra a taxa sempre que há algo no carrinho."""
    return TAXA_ENTREGA if subtotal > 0 else Decimal('0.00')


_TAXA_POR_TIPO_ENTREGA = {
    DeliveryType.DELIVERY: TAXA_ENTREGA,
    DeliveryType.PICKUP: Decimal('0.00'),
}


def taxa_entrega_checkout(tipo_entrega: DeliveryType) -> Decimal:
    """Tela de checkout: cobra a taxa apenas para entrega."""
    return _TAXA_POR_TIPO_ENTREGA[tipo_entrega]


# ====================================================================
# CATÁLOGO
# ====================================================================

def filtrar_catalogo(
    produtos: List[Product], filtro: Union[Category, str, None] = None
) -> Union[List[Product], List[Article]]:
    """
    Filtra o catálogo pela categoria. 'todos' (ou None) devolve tudo e
    'dicas' devolve os artigos estáticos em vez de produtos.
    """
    if filtro is None or filtro == FILTRO_TODOS:
        return list(produtos)
    if filtro == FILTRO_DICAS:
        return list(ARTIGOS)
    categoria = Category(filtro)
    return [p for p in produtos if p.category == categoria]


def buscar_artigo(artigo_id: str) -> Optional[Article]:
    return next((a for a in ARTIGOS if a.id == artigo_id), None)


# ====================================================================
# PEDIDO
# ====================================================================

def gerar_link_mapa(endereco: str) -> str:
    return URL_BUSCA_MAPS.format(endereco=quote(endereco, safe=''))


def compor_endereco(endereco: str, numero: Optional[str] = None, complemento: Optional[str] = None) -> str:
    """Junta número e complemento ao endereço vindo da busca de CEP."""
    if not numero:
        return endereco
    final = f"{endereco}, Nº {numero}"
    if complemento:
        final += f" ({complemento})"
    return final


class GeradorIdPedido:
    """
    IDs numéricos em texto: milissegundos + sufixo aleatório de 3 dígitos.
    Estritamente crescentes dentro do processo.
    """

    def __init__(self):
        self._ultimo = 0
        self._lock = threading.Lock()

    def __call__(self) -> str:
        candidato = int(time.time() * 1000) * 1000 + random.randint(0, 999)
        with self._lock:
            if candidato <= self._ultimo:
                candidato = self._ultimo + 1
            self._ultimo = candidato
        return str(candidato)


gerar_id_pedido = GeradorIdPedido()


# ====================================================================
# PAINEL ADMIN
# ====================================================================

def estatisticas_painel(produtos: List[Product], pedidos: List[Order]) -> Dict:
    """Faturamento e ranking de mais vendidos (pedidos cancelados não contam)."""
    validos = [o for o in pedidos if o.status != OrderStatus.CANCELLED]
    faturamento = sum((o.total for o in validos), Decimal('0.00'))

    vendidos: Dict[str, int] = {}
    for pedido in validos:
        for item in pedido.items:
            vendidos[item.id] = vendidos.get(item.id, 0) + item.quantity

    ranking = sorted(
        ({'produto': p, 'quantidade': vendidos.get(p.id, 0)} for p in produtos),
        key=lambda linha: linha['quantidade'],
        reverse=True,
    )
    return {
        'faturamento': faturamento,
        'total_pedidos': len(pedidos),
        'ranking': ranking,
    }
