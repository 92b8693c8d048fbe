"""
Dados fixos da loja: cardápio inicial, artigos da aba de dicas e rótulos.
"""
from decimal import Decimal
from typing import List

from barao.core.entities import Article, Category, OrderStatus, PaymentMethod, Product

TAXA_ENTREGA = Decimal('5.00')

URL_BUSCA_MAPS = 'https://www.google.com/maps/search/?api=1&query={endereco}'

_IMG = 'https://images.unsplash.com/{foto}?auto=format&fit=crop&w=400&h=300&q=80'

# (id, nome, categoria, custo, preço, descrição, foto)
_CARDAPIO = [
    ('1', 'ESP. BOI', Category.TRADITIONAL, '42.09', '51.90',
     'Espetinho de carne bovina premium selecionada.', 'photo-1628268909376-e8c44bb3153f'),
    ('2', 'ESP. FRANGO', Category.TRADITIONAL, '34.71', '42.90',
     'Peito de frango temperado em cubos suculentos.', 'photo-1606728035253-49e8a23146de'),
    ('3', 'ESP. LING. SUINA', Category.TRADITIONAL, '37.87', '46.90',
     'Linguiça suína tradicional de alta qualidade.', 'photo-1544025162-d76694265947'),
    ('4', 'ESP. LING. FRANGO', Category.TRADITIONAL, '37.87', '46.90',
     'Linguiça de frango leve e bem temperada.', 'photo-1615937657715-bc7b4b7962c1'),
    ('5', 'ESP. KAFTA', Category.TRADITIONAL, '37.87', '46.90',
     'Carne moída temperada com especiarias árabes.', 'photo-1529692236671-f1f6cf9683ba'),
    ('6', 'ESP. KAFTA C/QUEIJO', Category.TRADITIONAL, '39.98', '49.90',
     'Kafta bovina recheada com queijo derretido.', 'photo-1594968973184-9140fa307f7f'),
    ('7', 'ESP. PERNIL SUINO', Category.TRADITIONAL, '32.60', '40.90',
     'Pernil suíno marinado em ervas finas.', 'photo-1516684732162-798a0062be99'),
    ('8', 'ESP. CORAÇÃO', Category.SPECIAL, '44.20', '54.90',
     'Coração de frango temperado no ponto perfeito.', 'photo-1555939594-58d7cb561ad1'),
    ('9', 'ESP. BANANINHA', Category.SPECIAL, '48.42', '59.90',
     'Corte entre-costela bovina, extremamente suculento.', 'photo-1558030006-450675393462'),
    ('10', 'ESP. FRALDINHA', Category.SPECIAL, '49.48', '60.90',
     'Fraldinha premium com gordura equilibrada.', 'photo-1546241072-48010ad28c2c'),
    ('11', 'ESP. MEDALHÃO FGO', Category.SPECIAL, '47.37', '58.90',
     'Medalhão de frango envolto em bacon crocante.', 'photo-1604908176997-125f25cc6f3d'),
    ('12', 'ESP. CONT. FILÉ', Category.SPECIAL, '60.03', '73.90',
     'Contra filé de novilha com capa de gordura.', 'photo-1603048297172-c92544798d5a'),
    ('13', 'ESP. ALCATRA', Category.SPECIAL, '60.03', '73.90',
     'Corte de alcatra macio e sem gordura.', 'photo-1529193591184-b1d58fab356c'),
    ('14', 'ESP. FILÉ MIGNON', Category.SPECIAL, '84.29', '103.90',
     'A maciez suprema do filé mignon em espeto.', 'photo-1544025162-d76694265947'),
    ('15', 'ESP. MAMINHA', Category.SPECIAL, '58.97', '72.90',
     'Maminha selecionada, sabor marcante e suculento.', 'photo-1516100882582-76c9a58b3928'),
    ('16', 'ESP. CORDEIRO', Category.SPECIAL, '89.57', '110.90',
     'Carne de cordeiro nobre com tempero de hortelã.', 'photo-1602491673980-73aa38de027a'),
]

ESTOQUE_INICIAL = 20


def produtos_iniciais() -> List[Product]:
    """Retorna uma cópia nova do cardápio padrão (cada chamada gera objetos novos)."""
    return [
        Product(
            id=produto_id,
            name=nome,
            category=categoria,
            price=Decimal(preco),
            cost=Decimal(custo),
            description=descricao,
            stock=ESTOQUE_INICIAL,
            image=_IMG.format(foto=foto),
        )
        for produto_id, nome, categoria, custo, preco, descricao, foto in _CARDAPIO
    ]


ARTIGOS = [
    Article(
        id='art-1',
        title='O ponto certo da brasa',
        excerpt='Como saber se o carvão está pronto para receber os espetos.',
        content=(
            'Espere as chamas baixarem e o carvão ficar coberto por uma camada fina de cinza. '
            'Aproxime a mão a um palmo da grelha: se aguentar uns cinco segundos, a brasa está '
            'no ponto para carnes bovinas. Frango e linguiça pedem fogo um pouco mais brando.'
        ),
        author='Mestre Barão',
        date='2025-01-10T12:00:00',
        image='https://images.unsplash.com/photo-1544025162-d76694265947?auto=format&fit=crop&w=800&q=80',
        tags=['Churrasco', 'Brasa'],
    ),
    Article(
        id='art-2',
        title='Sal grosso ou sal de parrilla?',
        excerpt='A escolha do sal muda a crosta e a suculência do espetinho.',
        content=(
            'O sal grosso é ideal para cortes maiores, que ficam mais tempo na grelha. Nos espetinhos, '
            'o sal de parrilla, mais fino, distribui melhor o tempero e forma uma crosta uniforme. '
            'Salgue pouco antes de levar ao fogo para não perder líquido.'
        ),
        author='Mestre Barão',
        date='2025-02-03T12:00:00',
        image='https://images.unsplash.com/photo-1529193591184-b1d58fab356c?auto=format&fit=crop&w=800&q=80',
        tags=['Churrasco', 'Tempero'],
    ),
    Article(
        id='art-3',
        title='Acompanhamentos que combinam com espetinho',
        excerpt='Farofa, vinagrete e pão de alho: o trio clássico.',
        content=(
            'Uma boa farofa na manteiga, vinagrete bem picado e pão de alho saindo da brasa completam '
            'qualquer pedido. Para os espetos especiais, experimente um chimichurri caseiro.'
        ),
        author='Mestre Barão',
        date='2025-03-15T12:00:00',
        image='https://images.unsplash.com/photo-1555939594-58d7cb561ad1?auto=format&fit=crop&w=800&q=80',
        tags=['Churrasco', 'Acompanhamentos'],
    ),
]

# Rótulos exibidos na loja; todo membro das enumerações precisa ter um rótulo.
CATEGORY_LABELS = {
    Category.TRADITIONAL: 'Tradicionais',
    Category.SPECIAL: 'Especiais',
    Category.DRINK: 'Bebidas',
    Category.SIDE: 'Acompanhamentos',
}

STATUS_LABELS = {
    OrderStatus.PENDING: 'Pendente',
    OrderStatus.AWAITING_PAYMENT: 'Aguardando Pagamento',
    OrderStatus.PREPARING: 'Preparando',
    OrderStatus.SHIPPED: 'Enviado',
    OrderStatus.CANCELLED: 'Cancelado',
}

PAYMENT_LABELS = {
    PaymentMethod.CASH: 'Dinheiro',
    PaymentMethod.CARD: 'Cartão',
    PaymentMethod.PIX: 'PIX',
}

# Status que o painel admin pode aplicar diretamente.
STATUS_PERMITIDOS_ADMIN = (OrderStatus.PENDING, OrderStatus.PREPARING, OrderStatus.SHIPPED)

# Filtros especiais do catálogo (além das categorias).
FILTRO_TODOS = 'todos'
FILTRO_DICAS = 'dicas'
