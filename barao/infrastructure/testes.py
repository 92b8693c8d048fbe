# barao/infrastructure/testes.py

import base64
import dataclasses
import io
from decimal import Decimal
from unittest.mock import Mock, patch

import requests
from asgiref.sync import async_to_sync
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import SimpleTestCase, override_settings
from PIL import Image

from barao.core.entities import (
    CartItem, Category, Customer, DeliveryType, Order, OrderStatus, PaymentMethod, Product, StatusConexao,
)
from barao.core.exceptions import CepInvalidoError, CepNaoEncontradoError, ErroConectividade
from barao.infrastructure.cache_local import CacheLocalProdutos
from barao.infrastructure.gateways import SupabaseGateway, ViaCepGateway
from barao.infrastructure.imagens import reduzir_imagem
from barao.infrastructure.mappers import ItemMapper, PedidoMapper, ProdutoMapper

LINHA_PRODUTO = {
    'id': '1',
    'nome': 'ESP. BOI',
    'categoria': 'tradicional',
    'preco': 51.9,
    'custo': 42.09,
    'descricao': 'Espetinho de carne bovina premium selecionada.',
    'estoque': 20,
    'imagem': 'https://exemplo/boi.jpg',
}


def resposta(dados=None, status_code=200):
    response = Mock(status_code=status_code)
    response.content = b'{}' if dados is not None else b''
    response.json.return_value = dados
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(f"{status_code} Error")
    return response


# ====================================================================
# MAPPERS
# ====================================================================

class TestMappers(SimpleTestCase):

    def test_linha_de_produto_ida_e_volta(self):
        """A linha reconstruída a partir da entidade é igual à original."""
        produto = ProdutoMapper.to_entity(LINHA_PRODUTO)

        self.assertEqual(produto.price, Decimal('51.9'))
        self.assertEqual(produto.category, Category.TRADITIONAL)
        self.assertEqual(ProdutoMapper.to_row(produto), LINHA_PRODUTO)

    def test_id_numerico_vira_texto(self):
        produto = ProdutoMapper.to_entity(dict(LINHA_PRODUTO, id=17))
        self.assertEqual(produto.id, '17')

    def test_draft_nao_envia_id(self):
        produto = ProdutoMapper.to_entity(LINHA_PRODUTO)
        self.assertNotIn('id', ProdutoMapper.draft_to_row(produto.to_draft()))

    def test_peso_fica_fora_da_tabela_de_produtos(self):
        """O peso vai no snapshot e nos itens do pedido, nunca nas colunas de 'products'."""
        produto = ProdutoMapper.to_entity(dict(LINHA_PRODUTO, peso='120g'))

        self.assertEqual(produto.weight, '120g')
        self.assertEqual(ProdutoMapper.to_row(produto)['peso'], '120g')
        self.assertNotIn('peso', ProdutoMapper.draft_to_row(produto.to_draft()))
        self.assertIsNone(ProdutoMapper.to_entity(LINHA_PRODUTO).weight)

    def test_item_leva_quantidade(self):
        item = ItemMapper.to_entity(dict(LINHA_PRODUTO, quantidade=3))
        self.assertEqual(item.quantity, 3)
        self.assertEqual(ItemMapper.to_row(item)['quantidade'], 3)

    def test_pedido_reconstroi_campos_sem_coluna(self):
        """
        Cenário: pedido de entrega gravado só com total e itens.
        Subtotal, taxa, tipo de entrega e link do mapa são recalculados.
        """
        linha = {
            'id': 1736000000000123,
            'created_at': '2025-01-04T12:00:00',
            'cliente_nome': 'Maria Silva',
            'cliente_telefone': '11999990000',
            'cliente_endereco': 'Rua A, 10',
            'itens': [dict(LINHA_PRODUTO, quantidade=2)],
            'total': 108.8,
            'status': 'pendente',
            'forma_pagamento': 'cash',
        }

        pedido = PedidoMapper.to_entity(linha)

        self.assertEqual(pedido.id, '1736000000000123')
        self.assertEqual(pedido.subtotal, Decimal('103.8'))
        self.assertEqual(pedido.delivery_fee, Decimal('5.0'))
        self.assertEqual(pedido.customer.delivery_type, DeliveryType.DELIVERY)
        self.assertTrue(pedido.maps_url.endswith('Rua%20A%2C%2010'))
        self.assertEqual(pedido.status, OrderStatus.PENDING)
        self.assertEqual(pedido.payment_method, PaymentMethod.CASH)

    def test_pedido_sem_taxa_e_retirada(self):
        linha = {
            'id': '5', 'created_at': '2025-01-04', 'cliente_nome': 'João', 'cliente_telefone': '1',
            'cliente_endereco': '', 'itens': [dict(LINHA_PRODUTO, quantidade=1)], 'total': 51.9,
            'status': 'enviado', 'forma_pagamento': 'pix',
        }

        pedido = PedidoMapper.to_entity(linha)

        self.assertEqual(pedido.customer.delivery_type, DeliveryType.PICKUP)
        self.assertIsNone(pedido.maps_url)

    def test_pedido_para_linha(self):
        produto = ProdutoMapper.to_entity(LINHA_PRODUTO)
        pedido = Order(
            id='10', date='2025-01-04T12:00:00',
            customer=Customer('Maria', '11', 'Rua A'),
            items=[CartItem.from_product(produto, 2)],
            subtotal=Decimal('103.80'), delivery_fee=Decimal('5.00'), total=Decimal('108.80'),
            status=OrderStatus.AWAITING_PAYMENT, payment_method=PaymentMethod.PIX, payer_name='Maria',
        )

        linha = PedidoMapper.to_row(pedido)

        self.assertEqual(linha['cliente_nome'], 'Maria')
        self.assertEqual(linha['total'], 108.8)
        self.assertEqual(linha['status'], 'aguardando_pagamento')
        self.assertEqual(linha['forma_pagamento'], 'pix')
        self.assertEqual(linha['itens'][0]['quantidade'], 2)
        self.assertNotIn('payer_name', linha)


# ====================================================================
# GATEWAY SUPABASE
# ====================================================================

class TestSupabaseGateway(SimpleTestCase):

    def setUp(self):
        self.http_mock = Mock()
        self.gateway = SupabaseGateway(
            url='https://projeto.supabase.co/', chave='anon', timeout=3, sessao=self.http_mock
        )

    def test_buscar_produtos(self):
        self.http_mock.request.return_value = resposta([LINHA_PRODUTO])

        produtos = self.gateway.buscar_produtos()

        self.assertEqual(produtos[0].name, 'ESP. BOI')
        self.assertEqual(self.gateway.status_conexao, StatusConexao.CONECTADO)
        args, kwargs = self.http_mock.request.call_args
        self.assertEqual(args, ('GET', 'https://projeto.supabase.co/rest/v1/products'))
        self.assertEqual(kwargs['headers']['apikey'], 'anon')
        self.assertEqual(kwargs['headers']['Authorization'], 'Bearer anon')
        self.assertEqual(kwargs['timeout'], 3)

    def test_falha_de_rede_vira_erro_de_conectividade(self):
        self.http_mock.request.side_effect = requests.exceptions.ConnectionError("sem rede")

        with self.assertRaises(ErroConectividade):
            self.gateway.buscar_produtos()

        self.assertEqual(self.gateway.status_conexao, StatusConexao.DESCONECTADO)

    def test_resposta_http_de_erro(self):
        self.http_mock.request.return_value = resposta({'message': 'denied'}, status_code=401)

        with self.assertRaises(ErroConectividade):
            self.gateway.buscar_pedidos()

        self.assertEqual(self.gateway.status_conexao, StatusConexao.DESCONECTADO)

    def test_linha_invalida_vira_erro_de_conectividade(self):
        self.http_mock.request.return_value = resposta([dict(LINHA_PRODUTO, categoria='sobremesa')])

        with self.assertRaises(ErroConectividade):
            self.gateway.buscar_produtos()

    def test_sem_url_nao_acessa_a_rede(self):
        gateway = SupabaseGateway(url='', chave='', sessao=self.http_mock)

        with self.assertRaises(ErroConectividade):
            gateway.buscar_produtos()

        self.http_mock.request.assert_not_called()

    def test_inserir_produto_devolve_id_gerado(self):
        self.http_mock.request.return_value = resposta([dict(LINHA_PRODUTO, id=42)])
        draft = ProdutoMapper.to_entity(LINHA_PRODUTO).to_draft()

        produto = self.gateway.inserir_produto(draft)

        self.assertEqual(produto.id, '42')
        args, kwargs = self.http_mock.request.call_args
        self.assertEqual(args[0], 'POST')
        self.assertEqual(kwargs['headers']['Prefer'], 'return=representation')
        self.assertNotIn('id', kwargs['json'])

    def test_inserir_produto_mantem_o_peso_do_formulario(self):
        self.http_mock.request.return_value = resposta([dict(LINHA_PRODUTO, id=43)])
        draft = dataclasses.replace(ProdutoMapper.to_entity(LINHA_PRODUTO).to_draft(), weight='120g')

        produto = self.gateway.inserir_produto(draft)

        self.assertEqual(produto.weight, '120g')
        self.assertNotIn('peso', self.http_mock.request.call_args[1]['json'])

    def test_atualizar_estoque_nunca_negativo(self):
        self.http_mock.request.return_value = resposta(None, status_code=204)

        self.gateway.atualizar_estoque('1', -3)

        args, kwargs = self.http_mock.request.call_args
        self.assertEqual(args[0], 'PATCH')
        self.assertEqual(kwargs['params'], {'id': 'eq.1'})
        self.assertEqual(kwargs['json'], {'estoque': 0})

    def test_atualizar_status_pedido(self):
        self.http_mock.request.return_value = resposta(None, status_code=204)

        self.gateway.atualizar_status_pedido('10', OrderStatus.PREPARING)

        args, kwargs = self.http_mock.request.call_args
        self.assertEqual(args[1], 'https://projeto.supabase.co/rest/v1/orders')
        self.assertEqual(kwargs['json'], {'status': 'preparando'})


# ====================================================================
# VIACEP
# ====================================================================

class TestViaCepGateway(SimpleTestCase):

    def setUp(self):
        self.gateway = ViaCepGateway()

    def test_cep_com_menos_de_oito_digitos(self):
        with self.assertRaises(CepInvalidoError):
            self.gateway.buscar_endereco('123-45')

    @patch('barao.infrastructure.gateways.requests.get')
    def test_cep_encontrado(self, get_mock):
        get_mock.return_value = resposta({
            'logradouro': 'Avenida Paulista', 'bairro': 'Bela Vista', 'localidade': 'São Paulo', 'uf': 'SP',
        })

        endereco = self.gateway.buscar_endereco('01310-100')

        self.assertEqual(endereco['endereco'], 'Avenida Paulista, Bela Vista, São Paulo - SP')
        self.assertEqual(get_mock.call_args[0][0], 'https://viacep.com.br/ws/01310100/json/')

    @patch('barao.infrastructure.gateways.requests.get')
    def test_cep_nao_encontrado(self, get_mock):
        get_mock.return_value = resposta({'erro': True})

        with self.assertRaises(CepNaoEncontradoError):
            self.gateway.buscar_endereco('99999999')


# ====================================================================
# CACHE LOCAL
# ====================================================================

@override_settings(CACHES={
    'default': {'BACKEND': 'django.core.cache.backends.locmem.LocMemCache', 'LOCATION': 'padrao'},
    'local': {'BACKEND': 'django.core.cache.backends.locmem.LocMemCache', 'LOCATION': 'testes-cache-local'},
})
class TestCacheLocal(SimpleTestCase):

    def setUp(self):
        self.cache_local = CacheLocalProdutos()
        self.cache_local.cache.clear()

    def test_sem_snapshot(self):
        self.assertIsNone(self.cache_local.carregar_produtos())

    def test_snapshot_ida_e_volta(self):
        produtos = [
            ProdutoMapper.to_entity(LINHA_PRODUTO),
            Product(id='2', name='ESP. FRANGO', category=Category.TRADITIONAL, price=Decimal('42.90'),
                    cost=Decimal('34.71'), description='', stock=0),
        ]

        self.cache_local.salvar_produtos(produtos)

        self.assertEqual(self.cache_local.carregar_produtos(), produtos)

    def test_snapshot_preserva_o_peso(self):
        produtos = [dataclasses.replace(ProdutoMapper.to_entity(LINHA_PRODUTO), weight='120g')]

        self.cache_local.salvar_produtos(produtos)

        self.assertEqual(self.cache_local.carregar_produtos()[0].weight, '120g')

    def test_snapshot_ilegivel_e_ignorado(self):
        self.cache_local.cache.set('produtos', [{'id': '1'}])

        with self.assertLogs('barao.infrastructure.cache_local', level='WARNING'):
            self.assertIsNone(self.cache_local.carregar_produtos())


# ====================================================================
# IMAGENS
# ====================================================================

class TestReduzirImagem(SimpleTestCase):

    def _png(self, largura, altura) -> bytes:
        saida = io.BytesIO()
        Image.new('RGB', (largura, altura), color=(200, 80, 20)).save(saida, format='PNG')
        return saida.getvalue()

    def test_reduz_para_no_maximo_800(self):
        data_url = async_to_sync(reduzir_imagem)(self._png(1600, 1000), 'image/png')

        self.assertTrue(data_url.startswith('data:image/jpeg;base64,'))
        conteudo = base64.b64decode(data_url.split(',', 1)[1])
        with Image.open(io.BytesIO(conteudo)) as imagem:
            self.assertEqual(imagem.size, (800, 500))
            self.assertEqual(imagem.format, 'JPEG')

    def test_imagem_pequena_nao_e_ampliada(self):
        data_url = async_to_sync(reduzir_imagem)(self._png(300, 200), 'image/png')

        conteudo = base64.b64decode(data_url.split(',', 1)[1])
        with Image.open(io.BytesIO(conteudo)) as imagem:
            self.assertEqual(imagem.size, (300, 200))

    def test_bytes_invalidos_voltam_sem_alteracao(self):
        original = b'isto nao e uma imagem'

        with self.assertLogs('barao.infrastructure.imagens', level='WARNING'):
            data_url = async_to_sync(reduzir_imagem)(original, 'image/png')

        self.assertEqual(data_url, 'data:image/png;base64,' + base64.b64encode(original).decode('ascii'))

    def test_imagem_acima_do_limite_de_pixels_volta_sem_alteracao(self):
        original = self._png(100, 100)

        with patch.object(Image, 'MAX_IMAGE_PIXELS', 1000):
            with self.assertLogs('barao.infrastructure.imagens', level='WARNING'):
                data_url = async_to_sync(reduzir_imagem)(original, 'image/png')

        self.assertEqual(data_url, 'data:image/png;base64,' + base64.b64encode(original).decode('ascii'))


# ====================================================================
# COMANDOS DE GERENCIAMENTO
# ====================================================================

class TestComandos(SimpleTestCase):

    def _controlador(self, gateway):
        return Mock(gateway=gateway)

    @patch('barao.infrastructure.management.commands.carregar_dados_iniciais.criar_controlador')
    def test_carrega_cardapio_quando_vazio(self, criar_controlador_mock):
        gateway = Mock()
        gateway.buscar_produtos.return_value = []
        gateway.inserir_produto.side_effect = lambda draft: Product.from_draft('1', draft)
        criar_controlador_mock.return_value = self._controlador(gateway)

        call_command('carregar_dados_iniciais', stdout=io.StringIO())

        self.assertEqual(gateway.inserir_produto.call_count, 16)

    @patch('barao.infrastructure.management.commands.carregar_dados_iniciais.criar_controlador')
    def test_nao_duplica_cardapio(self, criar_controlador_mock):
        gateway = Mock()
        gateway.buscar_produtos.return_value = [ProdutoMapper.to_entity(LINHA_PRODUTO)]
        criar_controlador_mock.return_value = self._controlador(gateway)

        call_command('carregar_dados_iniciais', stdout=io.StringIO())

        gateway.inserir_produto.assert_not_called()

    @patch('barao.infrastructure.management.commands.carregar_dados_iniciais.criar_controlador')
    def test_banco_indisponivel(self, criar_controlador_mock):
        gateway = Mock()
        gateway.buscar_produtos.side_effect = ErroConectividade()
        criar_controlador_mock.return_value = self._controlador(gateway)

        with self.assertRaises(CommandError):
            call_command('carregar_dados_iniciais', stdout=io.StringIO())

    @patch('barao.infrastructure.management.commands.aguardar_banco.time.sleep')
    @patch('barao.infrastructure.management.commands.aguardar_banco.criar_controlador')
    def test_aguardar_banco(self, criar_controlador_mock, sleep_mock):
        gateway = Mock()
        gateway.buscar_produtos.side_effect = [ErroConectividade(), ErroConectividade(), []]
        criar_controlador_mock.return_value = self._controlador(gateway)

        call_command('aguardar_banco', stdout=io.StringIO())

        self.assertEqual(sleep_mock.call_count, 2)

    @patch('barao.infrastructure.management.commands.aguardar_banco.time.sleep')
    @patch('barao.infrastructure.management.commands.aguardar_banco.criar_controlador')
    def test_aguardar_banco_esgota_tentativas(self, criar_controlador_mock, sleep_mock):
        gateway = Mock()
        gateway.buscar_produtos.side_effect = ErroConectividade()
        criar_controlador_mock.return_value = self._controlador(gateway)

        with self.assertRaises(CommandError):
            call_command('aguardar_banco', tentativas=3, stdout=io.StringIO())
