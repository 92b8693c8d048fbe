from decimal import Decimal
from typing import Dict, Optional

from rest_framework import serializers

from barao.core.constants import CATEGORY_LABELS, PAYMENT_LABELS, STATUS_LABELS
from barao.core.entities import (
    Category, Customer, DeliveryType, OrderDraft, OrderStatus, PaymentMethod, ProductDraft, Visao,
)


def _escolhas(enum_cls, rotulos=None):
    return [(membro.value, (rotulos or {}).get(membro, membro.value)) for membro in enum_cls]


# ====================================================================
# SERIALIZERS DO CATÁLOGO
# ====================================================================

class ProductSerializer(serializers.Serializer):
    """
    Produto como exibido na loja. 'quantidade_no_carrinho' vem do contexto
    para que o cliente desabilite os botões quando o estoque acaba.
    """
    id = serializers.CharField()
    name = serializers.CharField()
    category = serializers.CharField(source='category.value')
    category_label = serializers.SerializerMethodField()
    price = serializers.DecimalField(max_digits=10, decimal_places=2)
    description = serializers.CharField()
    stock = serializers.IntegerField()
    image = serializers.CharField()
    weight = serializers.CharField(allow_null=True)
    disponivel = serializers.BooleanField()
    quantidade_no_carrinho = serializers.SerializerMethodField()

    def get_category_label(self, obj) -> str:
        return CATEGORY_LABELS[obj.category]

    def get_quantidade_no_carrinho(self, obj) -> int:
        return self.context.get('quantidades', {}).get(obj.id, 0)


class ProductAdminSerializer(ProductSerializer):
    """No painel o custo também é exibido."""
    cost = serializers.DecimalField(max_digits=10, decimal_places=2)


class ArticleSerializer(serializers.Serializer):
    id = serializers.CharField()
    title = serializers.CharField()
    excerpt = serializers.CharField()
    content = serializers.CharField()
    author = serializers.CharField()
    date = serializers.CharField()
    image = serializers.CharField()
    tags = serializers.ListField(child=serializers.CharField())


# ====================================================================
# SERIALIZERS PARA O CARRINHO
# ====================================================================

class CartItemSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    price = serializers.DecimalField(max_digits=10, decimal_places=2)
    image = serializers.CharField()
    quantity = serializers.IntegerField()
    subtotal = serializers.DecimalField(max_digits=10, decimal_places=2)


class CarrinhoSerializer(serializers.Serializer):
    """Resumo do carrinho, recalculado a cada requisição."""
    itens = CartItemSerializer(many=True)
    total_itens = serializers.IntegerField()
    subtotal = serializers.DecimalField(max_digits=10, decimal_places=2)
    taxa_entrega = serializers.DecimalField(max_digits=10, decimal_places=2)
    total = serializers.DecimalField(max_digits=10, decimal_places=2)


class AdicionarItemSerializer(serializers.Serializer):
    produto_id = serializers.CharField()


class QuantidadeSerializer(serializers.Serializer):
    delta = serializers.IntegerField()


# ====================================================================
# SERIALIZERS DE PEDIDO E CHECKOUT
# ====================================================================

class CustomerSerializer(serializers.Serializer):
    name = serializers.CharField()
    phone = serializers.CharField()
    address = serializers.CharField(allow_blank=True)
    delivery_type = serializers.CharField(source='delivery_type.value')


class OrderSerializer(serializers.Serializer):
    id = serializers.CharField()
    date = serializers.CharField()
    customer = CustomerSerializer()
    items = CartItemSerializer(many=True)
    subtotal = serializers.DecimalField(max_digits=10, decimal_places=2)
    delivery_fee = serializers.DecimalField(max_digits=10, decimal_places=2)
    total = serializers.DecimalField(max_digits=10, decimal_places=2)
    status = serializers.CharField(source='status.value')
    status_label = serializers.SerializerMethodField()
    payment_method = serializers.CharField(source='payment_method.value')
    payment_label = serializers.SerializerMethodField()
    payer_name = serializers.CharField(allow_null=True)
    change_for = serializers.DecimalField(max_digits=10, decimal_places=2, allow_null=True)
    maps_url = serializers.CharField(allow_null=True)

    def get_status_label(self, obj) -> str:
        return STATUS_LABELS[obj.status]

    def get_payment_label(self, obj) -> str:
        return PAYMENT_LABELS[obj.payment_method]


class CheckoutSerializer(serializers.Serializer):
    """
    Serializer para a validação dos dados de checkout.
    Nome e telefone são obrigatórios; o endereço só para entrega.
    """
    name = serializers.CharField(allow_blank=True, default='')
    phone = serializers.CharField(allow_blank=True, default='')
    address = serializers.CharField(allow_blank=True, default='')
    house_number = serializers.CharField(allow_blank=True, required=False)
    complement = serializers.CharField(allow_blank=True, required=False)
    delivery_type = serializers.ChoiceField(choices=_escolhas(DeliveryType), default=DeliveryType.DELIVERY.value)
    payment_method = serializers.ChoiceField(choices=_escolhas(PaymentMethod, PAYMENT_LABELS))
    payer_name = serializers.CharField(allow_blank=True, required=False)
    change_for = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, allow_null=True)

    def validate(self, attrs):
        faltando = {}
        if not attrs.get('name', '').strip():
            faltando['name'] = "Informe seu nome."
        if not attrs.get('phone', '').strip():
            faltando['phone'] = "Informe seu telefone."
        if attrs['delivery_type'] == DeliveryType.DELIVERY.value and not attrs.get('address', '').strip():
            faltando['address'] = "Informe o endereço de entrega."
        if faltando:
            raise serializers.ValidationError(faltando)
        return attrs

    def to_order_draft(self) -> OrderDraft:
        dados = self.validated_data
        return OrderDraft(
            customer=Customer(
                name=dados['name'].strip(),
                phone=dados['phone'].strip(),
                address=dados.get('address', '').strip(),
                delivery_type=DeliveryType(dados['delivery_type']),
            ),
            payment_method=PaymentMethod(dados['payment_method']),
            payer_name=dados.get('payer_name') or None,
            change_for=dados.get('change_for'),
            house_number=dados.get('house_number') or None,
            complement=dados.get('complement') or None,
        )


# ====================================================================
# SERIALIZERS DO PAINEL ADMIN
# ====================================================================

class ProductDraftSerializer(serializers.Serializer):
    """
    Formulário de produto do painel. A imagem pode vir como URL/data URL
    em 'image' ou como arquivo em 'imagem_arquivo' (reduzida antes de salvar).
    """
    name = serializers.CharField()
    category = serializers.ChoiceField(choices=_escolhas(Category, CATEGORY_LABELS))
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0.00'))
    cost = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0.00'), default=Decimal('0.00'))
    description = serializers.CharField(allow_blank=True, default='')
    stock = serializers.IntegerField(min_value=0, default=0)
    image = serializers.CharField(allow_blank=True, required=False, default='')
    weight = serializers.CharField(allow_blank=True, allow_null=True, required=False)
    imagem_arquivo = serializers.FileField(required=False, write_only=True)

    def to_draft(self, imagem: Optional[str] = None) -> ProductDraft:
        dados = self.validated_data
        return ProductDraft(
            name=dados['name'],
            category=Category(dados['category']),
            price=dados['price'],
            cost=dados['cost'],
            description=dados['description'],
            stock=dados['stock'],
            image=imagem if imagem is not None else dados.get('image', ''),
            weight=dados.get('weight') or None,
        )

    def to_alteracoes(self, imagem: Optional[str] = None) -> Dict:
        """Somente os campos enviados (edição parcial)."""
        alteracoes = {
            campo: valor for campo, valor in self.validated_data.items()
            if campo != 'imagem_arquivo'
        }
        if 'category' in alteracoes:
            alteracoes['category'] = Category(alteracoes['category'])
        if 'weight' in alteracoes:
            alteracoes['weight'] = alteracoes['weight'] or None
        if imagem is not None:
            alteracoes['image'] = imagem
        return alteracoes


class StatusPedidoSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=_escolhas(OrderStatus, STATUS_LABELS))


class LoginAdminSerializer(serializers.Serializer):
    senha = serializers.CharField(trim_whitespace=False)


class NavegacaoSerializer(serializers.Serializer):
    destino = serializers.ChoiceField(choices=_escolhas(Visao))


class EstadoSerializer(serializers.Serializer):
    visao = serializers.CharField()
    status_conexao = serializers.CharField()
    total_itens = serializers.IntegerField()
    is_admin = serializers.BooleanField()
