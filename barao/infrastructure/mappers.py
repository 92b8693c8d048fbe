"""
Mapeadores (Mappers) para converter entre:
1. Linhas das tabelas do banco remoto (dicts JSON com colunas em português)
2. Entidades de Domínio (barao.core.entities)

Os mesmos formatos de linha são usados no snapshot do cache local e no
carrinho guardado na sessão.
"""
from decimal import Decimal
from typing import Any, Dict, List, Optional

from barao.core.calculos import calcular_subtotal, gerar_link_mapa
from barao.core.entities import (
    CartItem, Category, Customer, DeliveryType, Order, OrderStatus,
    PaymentMethod, Product, ProductDraft,
)

# ====================================================================
# TABELAS DE COLUNAS (campo da entidade -> coluna remota)
# ====================================================================

PRODUTO_COLUNAS = {
    'id': 'id',
    'name': 'nome',
    'category': 'categoria',
    'price': 'preco',
    'cost': 'custo',
    'description': 'descricao',
    'stock': 'estoque',
    'image': 'imagem',
}

PEDIDO_COLUNAS = {
    'id': 'id',
    'date': 'created_at',
    'customer.name': 'cliente_nome',
    'customer.phone': 'cliente_telefone',
    'customer.address': 'cliente_endereco',
    'items': 'itens',
    'total': 'total',
    'status': 'status',
    'payment_method': 'forma_pagamento',
}

COLUNA_QUANTIDADE = 'quantidade'

# Peso não existe na tabela de produtos: vai só no snapshot local e nos itens do pedido.
COLUNA_PESO = 'peso'


def decimal_de(valor: Any) -> Decimal:
    """Converte número JSON (float/int/str) em Decimal sem ruído binário."""
    if valor is None or valor == '':
        return Decimal('0.00')
    if isinstance(valor, Decimal):
        return valor
    return Decimal(str(valor))


def numero_json(valor: Decimal) -> float:
    return float(valor)


# ====================================================================
# MAPPER DE PRODUTO
# ====================================================================

class ProdutoMapper:
    """Mapeador para a tabela 'products'."""

    @staticmethod
    def to_entity(linha: Dict) -> Product:
        """Converte uma linha remota em Product."""
        return Product(
            id=str(linha['id']),
            name=linha.get('nome') or '',
            category=Category(linha['categoria']),
            price=decimal_de(linha.get('preco')),
            cost=decimal_de(linha.get('custo')),
            description=linha.get('descricao') or '',
            stock=int(linha.get('estoque') or 0),
            image=linha.get('imagem') or '',
            weight=linha.get(COLUNA_PESO) or None,
        )

    @staticmethod
    def draft_to_row(draft: ProductDraft) -> Dict:
        """Colunas gravadas na inserção/edição (o ID é atribuído pelo banco)."""
        return {
            'nome': draft.name,
            'categoria': draft.category.value,
            'preco': numero_json(draft.price),
            'custo': numero_json(draft.cost),
            'descricao': draft.description,
            'estoque': draft.stock,
            'imagem': draft.image,
        }

    @classmethod
    def to_row(cls, produto: Product) -> Dict:
        linha = {'id': produto.id}
        linha.update(cls.draft_to_row(produto.to_draft()))
        if produto.weight:
            linha[COLUNA_PESO] = produto.weight
        return linha


# ====================================================================
# MAPPER DE ITEM (carrinho / itens do pedido)
# ====================================================================

class ItemMapper:
    """Item = colunas do produto + 'quantidade'."""

    @staticmethod
    def to_entity(linha: Dict) -> CartItem:
        produto = ProdutoMapper.to_entity(linha)
        return CartItem.from_product(produto, quantity=int(linha.get(COLUNA_QUANTIDADE) or 0))

    @staticmethod
    def to_row(item: CartItem) -> Dict:
        linha = ProdutoMapper.to_row(item)
        linha[COLUNA_QUANTIDADE] = item.quantity
        return linha


# ====================================================================
# MAPPER DE PEDIDO
# ====================================================================

class PedidoMapper:
    """Mapeador para a tabela 'orders'."""

    @staticmethod
    def to_row(pedido: Order) -> Dict:
        """
        Converte Order em linha remota. Subtotal, taxa, tipo de entrega e
        dados de pagamento não têm coluna própria e não são gravados.
        """
        return {
            'id': pedido.id,
            'created_at': pedido.date,
            'cliente_nome': pedido.customer.name,
            'cliente_telefone': pedido.customer.phone,
            'cliente_endereco': pedido.customer.address,
            'itens': [ItemMapper.to_row(item) for item in pedido.items],
            'total': numero_json(pedido.total),
            'status': pedido.status.value,
            'forma_pagamento': pedido.payment_method.value,
        }

    @staticmethod
    def to_entity(linha: Dict) -> Order:
        """
        Reconstrói o pedido a partir da linha remota: subtotal é a soma dos
        itens, a taxa é a diferença para o total e a entrega é presumida
        quando há taxa.
        """
        itens = [ItemMapper.to_entity(item) for item in (linha.get('itens') or [])]
        subtotal = calcular_subtotal(itens)
        total = decimal_de(linha.get('total'))
        taxa = total - subtotal
        tipo = DeliveryType.DELIVERY if taxa > 0 else DeliveryType.PICKUP
        endereco = linha.get('cliente_endereco') or ''

        maps_url: Optional[str] = None
        if tipo == DeliveryType.DELIVERY and endereco:
            maps_url = gerar_link_mapa(endereco)

        return Order(
            id=str(linha['id']),
            date=str(linha.get('created_at') or ''),
            customer=Customer(
                name=linha.get('cliente_nome') or '',
                phone=linha.get('cliente_telefone') or '',
                address=endereco,
                delivery_type=tipo,
            ),
            items=itens,
            subtotal=subtotal,
            delivery_fee=taxa,
            total=total,
            status=OrderStatus(linha['status']),
            payment_method=PaymentMethod(linha['forma_pagamento']),
            maps_url=maps_url,
        )


def produtos_para_linhas(produtos: List[Product]) -> List[Dict]:
    return [ProdutoMapper.to_row(p) for p in produtos]


def linhas_para_produtos(linhas: List[Dict]) -> List[Product]:
    return [ProdutoMapper.to_entity(linha) for linha in linhas]
