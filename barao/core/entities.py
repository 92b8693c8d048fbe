from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import List, Optional, Dict

# ====================================================================
# ENUMERAÇÕES
# Valores fechados; os valores (.value) são os gravados no banco remoto.
# ====================================================================

class Category(str, Enum):
    TRADITIONAL = 'tradicional'
    SPECIAL = 'especial'
    DRINK = 'bebida'
    SIDE = 'acompanhamento'


class OrderStatus(str, Enum):
    PENDING = 'pendente'
    AWAITING_PAYMENT = 'aguardando_pagamento'
    PREPARING = 'preparando'
    SHIPPED = 'enviado'
    CANCELLED = 'cancelado'


class PaymentMethod(str, Enum):
    CASH = 'cash'
    CARD = 'card'
    PIX = 'pix'


class DeliveryType(str, Enum):
    DELIVERY = 'delivery'
    PICKUP = 'pickup'


class Visao(str, Enum):
    """Telas da loja (máquina de estados de navegação)."""
    CATALOGO = 'catalogo'
    CARRINHO = 'carrinho'
    CHECKOUT = 'checkout'
    ADMIN = 'admin'
    SUCESSO = 'sucesso'
    SOBRE = 'sobre'


class StatusConexao(str, Enum):
    DESCONHECIDO = 'desconhecido'
    CONECTADO = 'conectado'
    DESCONECTADO = 'desconectado'


# ====================================================================
# ENTIDADES CORE
# Representam os objetos de negócio puros.
# ====================================================================

@dataclass
class ProductDraft:
    """Dados de um produto ainda sem ID (criação/edição pelo admin)."""
    name: str
    category: Category
    price: Decimal
    cost: Decimal
    description: str
    stock: int
    image: str = ''
    weight: Optional[str] = None


@dataclass
class Product:
    """Produto do cardápio."""
    id: str
    name: str
    category: Category
    price: Decimal
    cost: Decimal
    description: str
    stock: int
    image: str = ''
    weight: Optional[str] = None  # porção exibida (ex.: "120g"); não tem coluna no banco remoto

    @property
    def disponivel(self) -> bool:
        return self.stock > 0

    def to_draft(self) -> ProductDraft:
        return ProductDraft(
            name=self.name,
            category=self.category,
            price=self.price,
            cost=self.cost,
            description=self.description,
            stock=self.stock,
            image=self.image,
            weight=self.weight,
        )

    @classmethod
    def from_draft(cls, produto_id: str, draft: ProductDraft) -> 'Product':
        return cls(
            id=produto_id,
            name=draft.name,
            category=draft.category,
            price=draft.price,
            cost=draft.cost,
            description=draft.description,
            stock=draft.stock,
            image=draft.image,
            weight=draft.weight,
        )


@dataclass
class CartItem(Product):
    """Produto acrescido da quantidade escolhida (existe só no carrinho)."""
    quantity: int = 1

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity

    @classmethod
    def from_product(cls, product: Product, quantity: int = 1) -> 'CartItem':
        return cls(
            id=product.id,
            name=product.name,
            category=product.category,
            price=product.price,
            cost=product.cost,
            description=product.description,
            stock=product.stock,
            image=product.image,
            weight=product.weight,
            quantity=quantity,
        )


@dataclass
class Customer:
    """Dados do cliente no momento do pedido."""
    name: str
    phone: str
    address: str = ''
    delivery_type: DeliveryType = DeliveryType.DELIVERY


@dataclass
class Order:
    """
    Pedido confirmado. Os itens são cópias (snapshot) do carrinho:
    alterações posteriores nos produtos não afetam o histórico.
    """
    id: str
    date: str
    customer: Customer
    items: List[CartItem]
    subtotal: Decimal
    delivery_fee: Decimal
    total: Decimal
    status: OrderStatus
    payment_method: PaymentMethod
    payer_name: Optional[str] = None
    change_for: Optional[Decimal] = None
    maps_url: Optional[str] = None


@dataclass
class Article:
    """Conteúdo editorial estático da aba de dicas."""
    id: str
    title: str
    excerpt: str
    content: str
    author: str
    date: str
    image: str = ''
    tags: List[str] = field(default_factory=list)


# ====================================================================
# ESTADO DA APLICAÇÃO
# ====================================================================

@dataclass
class EstadoLoja:
    """Estado compartilhado: catálogo, histórico de pedidos e conexão."""
    produtos: List[Product] = field(default_factory=list)
    pedidos: List[Order] = field(default_factory=list)
    status_conexao: StatusConexao = StatusConexao.DESCONHECIDO
    inicializado: bool = False

    def buscar_produto(self, produto_id: str) -> Optional[Product]:
        return next((p for p in self.produtos if p.id == produto_id), None)

    def buscar_pedido(self, pedido_id: str) -> Optional[Order]:
        return next((o for o in self.pedidos if o.id == pedido_id), None)


@dataclass
class SessaoCliente:
    """Estado de um visitante: carrinho, tela atual e flag de admin."""
    carrinho: List[CartItem] = field(default_factory=list)
    visao: Visao = Visao.CATALOGO
    is_admin: bool = False
    ultimo_pedido_id: Optional[str] = None

    def buscar_item(self, produto_id: str) -> Optional[CartItem]:
        return next((i for i in self.carrinho if i.id == produto_id), None)

    @property
    def total_itens(self) -> int:
        return sum(item.quantity for item in self.carrinho)

    def quantidades(self) -> Dict[str, int]:
        return {item.id: item.quantity for item in self.carrinho}


@dataclass
class OrderDraft:
    """Dados preenchidos no checkout, antes de virar um pedido."""
    customer: Customer
    payment_method: PaymentMethod
    payer_name: Optional[str] = None
    change_for: Optional[Decimal] = None
    house_number: Optional[str] = None
    complement: Optional[str] = None
