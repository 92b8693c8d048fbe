# barao/presentation/testes.py

from decimal import Decimal
from unittest.mock import Mock, patch

from django.test import SimpleTestCase
from rest_framework import status
from rest_framework.test import APIClient

from barao.core.controlador import ControladorLoja
from barao.core.entities import Category, Customer, Order, OrderStatus, PaymentMethod, Product
from barao.core.exceptions import CepNaoEncontradoError, ErroConectividade


def criar_produto(produto_id, preco, estoque=20):
    return Product(
        id=produto_id,
        name=f'ESP. {produto_id}',
        category=Category.TRADITIONAL,
        price=Decimal(preco),
        cost=Decimal('10.00'),
        description='',
        stock=estoque,
    )


class LojaAPITestCase(SimpleTestCase):
    """
    Sobe a API com um controlador real e um banco remoto simulado (Mock).
    """

    def setUp(self):
        self.gateway_mock = Mock()
        self.gateway_mock.buscar_produtos.return_value = [
            criar_produto('1', '51.90'),
            criar_produto('3', '46.90', estoque=0),
        ]
        self.gateway_mock.buscar_pedidos.return_value = []
        self.controlador = ControladorLoja(self.gateway_mock, Mock(), senha_admin='101210')

        patcher = patch('barao.presentation.views.obter_controlador', return_value=self.controlador)
        patcher.start()
        self.addCleanup(patcher.stop)

        self.client = APIClient()

    def adicionar(self, produto_id):
        return self.client.post('/api/carrinho/', {'produto_id': produto_id}, format='json')

    def login_admin(self):
        return self.client.post('/api/admin/login/', {'senha': '101210'}, format='json')


# ====================================================================
# ESTADO, NAVEGAÇÃO E CATÁLOGO
# ====================================================================

class TestEstadoENavegacao(LojaAPITestCase):

    def test_estado_inicial(self):
        response = self.client.get('/api/estado/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {
            'visao': 'catalogo', 'status_conexao': 'conectado', 'total_itens': 0, 'is_admin': False,
        })

    def test_navegacao_valida_persiste_na_sessao(self):
        response = self.client.post('/api/navegar/', {'destino': 'carrinho'}, format='json')
        self.assertEqual(response.data['visao'], 'carrinho')
        self.assertEqual(self.client.get('/api/estado/').data['visao'], 'carrinho')

    def test_navegacao_invalida(self):
        response = self.client.post('/api/navegar/', {'destino': 'sucesso'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_admin_sem_login_fica_no_catalogo(self):
        response = self.client.post('/api/navegar/', {'destino': 'admin'}, format='json')
        self.assertEqual(response.data['visao'], 'catalogo')


class TestCatalogoAPI(LojaAPITestCase):

    def test_lista_produtos(self):
        response = self.client.get('/api/catalogo/')

        self.assertEqual(response.data['tipo'], 'produtos')
        self.assertEqual([p['id'] for p in response.data['itens']], ['1', '3'])
        self.assertEqual(response.data['itens'][0]['price'], '51.90')
        self.assertFalse(response.data['itens'][1]['disponivel'])
        self.assertNotIn('cost', response.data['itens'][0])
        self.assertIsNone(response.data['itens'][0]['weight'])

    def test_quantidade_no_carrinho(self):
        self.adicionar('1')
        response = self.client.get('/api/catalogo/', {'categoria': 'tradicional'})
        self.assertEqual(response.data['itens'][0]['quantidade_no_carrinho'], 1)

    def test_dicas_devolve_artigos(self):
        response = self.client.get('/api/catalogo/', {'categoria': 'dicas'})
        self.assertEqual(response.data['tipo'], 'artigos')
        self.assertEqual(len(response.data['itens']), 3)

    def test_categoria_invalida(self):
        response = self.client.get('/api/catalogo/', {'categoria': 'sobremesa'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_detalhe_de_artigo(self):
        self.assertEqual(self.client.get('/api/artigos/art-1/').status_code, status.HTTP_200_OK)
        self.assertEqual(self.client.get('/api/artigos/art-9/').status_code, status.HTTP_404_NOT_FOUND)

    def test_produto_inexistente(self):
        response = self.client.get('/api/produtos/404/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


# ====================================================================
# CARRINHO E CHECKOUT
# ====================================================================

class TestCarrinhoAPI(LojaAPITestCase):

    def test_adicionar_e_resumo(self):
        self.adicionar('1')
        self.adicionar('1')
        response = self.adicionar('3')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['total_itens'], 3)
        self.assertEqual(response.data['subtotal'], '150.70')
        self.assertEqual(response.data['taxa_entrega'], '5.00')
        self.assertEqual(response.data['total'], '155.70')

    def test_carrinho_vazio_sem_taxa(self):
        response = self.client.get('/api/carrinho/')
        self.assertEqual(response.data['taxa_entrega'], '0.00')

    def test_produto_inexistente(self):
        self.assertEqual(self.adicionar('404').status_code, status.HTTP_404_NOT_FOUND)

    def test_atualizar_quantidade_e_remover(self):
        self.adicionar('1')
        self.adicionar('3')

        response = self.client.patch('/api/carrinho/itens/1/', {'delta': 2}, format='json')
        self.assertEqual(response.data['total_itens'], 4)

        response = self.client.patch('/api/carrinho/itens/1/', {'delta': -5}, format='json')
        self.assertEqual([i['id'] for i in response.data['itens']], ['3'])

        response = self.client.delete('/api/carrinho/itens/3/')
        self.assertEqual(response.data['itens'], [])


class TestCheckoutAPI(LojaAPITestCase):

    def setUp(self):
        super().setUp()
        self.dados = {
            'name': 'Maria Silva',
            'phone': '11999990000',
            'address': 'Rua A',
            'house_number': '10',
            'delivery_type': 'delivery',
            'payment_method': 'pix',
            'payer_name': 'Maria S.',
        }

    def test_totais_por_tipo_de_entrega(self):
        self.adicionar('1')
        entrega = self.client.get('/api/checkout/', {'delivery_type': 'delivery'})
        retirada = self.client.get('/api/checkout/', {'delivery_type': 'pickup'})

        self.assertEqual(entrega.data['total'], '56.90')
        self.assertEqual(retirada.data['taxa_entrega'], '0.00')
        self.assertEqual(retirada.data['total'], '51.90')

    def test_campos_obrigatorios(self):
        self.adicionar('1')
        response = self.client.post('/api/checkout/', {'payment_method': 'cash'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(set(response.data), {'name', 'phone', 'address'})

    def test_retirada_dispensa_endereco(self):
        self.adicionar('1')
        dados = dict(self.dados, address='', house_number='', delivery_type='pickup')

        response = self.client.post('/api/checkout/', dados, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIsNone(response.data['pedido']['maps_url'])

    def test_carrinho_vazio(self):
        response = self.client.post('/api/checkout/', self.dados, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_pedido_com_sucesso(self):
        """
        Cenário: compra completa; o pedido aparece na tela de sucesso e o carrinho esvazia.
        """
        self.adicionar('1')
        self.adicionar('1')

        response = self.client.post('/api/checkout/', self.dados, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        pedido = response.data['pedido']
        self.assertEqual(pedido['status'], 'aguardando_pagamento')
        self.assertEqual(pedido['total'], '108.80')
        self.assertEqual(pedido['customer']['address'], 'Rua A, Nº 10')
        self.gateway_mock.inserir_pedido.assert_called_once()

        self.assertEqual(self.client.get('/api/carrinho/').data['total_itens'], 0)
        self.assertEqual(self.client.get('/api/estado/').data['visao'], 'sucesso')
        self.assertEqual(self.controlador.obter_produto('1').stock, 18)

        sucesso = self.client.get('/api/pedidos/ultimo/')
        self.assertEqual(sucesso.data['primeiro_nome'], 'Maria')
        self.assertEqual(sucesso.data['pedido']['id'], pedido['id'])

    def test_falha_remota_nao_aparece_para_o_cliente(self):
        self.gateway_mock.inserir_pedido.side_effect = ErroConectividade()
        self.adicionar('1')

        response = self.client.post('/api/checkout/', self.dados, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_falha_remota_desconecta_a_loja(self):
        self.gateway_mock.inserir_pedido.side_effect = ErroConectividade()
        self.adicionar('1')

        self.client.post('/api/checkout/', self.dados, format='json')

        self.assertEqual(self.client.get('/api/estado/').data['status_conexao'], 'desconectado')

    def test_sem_pedido_recente(self):
        self.assertEqual(self.client.get('/api/pedidos/ultimo/').status_code, status.HTTP_404_NOT_FOUND)

    @patch('barao.presentation.views.busca_cep')
    def test_busca_de_cep(self, busca_cep_mock):
        busca_cep_mock.buscar_endereco.return_value = {'endereco': 'Avenida Paulista, Bela Vista, São Paulo - SP'}
        response = self.client.get('/api/cep/01310100/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        busca_cep_mock.buscar_endereco.side_effect = CepNaoEncontradoError()
        response = self.client.get('/api/cep/99999999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


# ====================================================================
# PAINEL ADMIN
# ====================================================================

class TestPainelAdminAPI(LojaAPITestCase):

    def test_painel_sem_login_nao_tem_conteudo(self):
        response = self.client.get('/api/admin/painel/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

    def test_mutacoes_sem_login_sao_proibidas(self):
        response = self.client.patch('/api/admin/produtos/1/', {'stock': 5}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.gateway_mock.atualizar_produto.assert_not_called()

    def test_senha_incorreta(self):
        response = self.client.post('/api/admin/login/', {'senha': 'errada'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data['message'], 'Senha incorreta!')

    def test_painel_com_login(self):
        self.login_admin()

        response = self.client.get('/api/admin/painel/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['faturamento'], '0.00')
        self.assertEqual(len(response.data['produtos']), 2)
        self.assertIn('cost', response.data['produtos'][0])

    def test_pedidos_do_painel_ordenados_pela_data_com_fuso(self):
        """
        Cenário: pedidos vindos do banco (com fuso) misturados a um pedido
        antigo sem fuso. O mais recente aparece primeiro.
        """
        def pedido(pedido_id, data):
            return Order(
                id=pedido_id, date=data, customer=Customer('Ana', '1'), items=[],
                subtotal=Decimal('0.00'), delivery_fee=Decimal('0.00'), total=Decimal('0.00'),
                status=OrderStatus.PENDING, payment_method=PaymentMethod.CASH,
            )

        self.gateway_mock.buscar_pedidos.return_value = [
            pedido('remoto', '2026-10-19T08:00:00+00:00'),
            pedido('sem_fuso', '2026-10-19T09:30:00.123456'),
            pedido('sao_paulo', '2026-10-19T07:00:00-03:00'),
        ]
        self.login_admin()

        response = self.client.get('/api/admin/painel/')

        self.assertEqual([p['id'] for p in response.data['pedidos']], ['sao_paulo', 'sem_fuso', 'remoto'])

    def test_edicao_com_falha_remota_mantem_estoque(self):
        self.login_admin()
        self.gateway_mock.atualizar_produto.side_effect = ErroConectividade()

        response = self.client.patch('/api/admin/produtos/1/', {'stock': 15}, format='json')

        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)
        self.assertEqual(self.controlador.obter_produto('1').stock, 20)

    def test_edicao_com_sucesso(self):
        self.login_admin()

        response = self.client.patch('/api/admin/produtos/1/', {'stock': 15}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['stock'], 15)
        self.assertEqual(self.controlador.obter_produto('1').price, Decimal('51.90'))

    def test_criar_produto(self):
        self.login_admin()
        self.gateway_mock.inserir_produto.side_effect = lambda draft: Product.from_draft('17', draft)

        response = self.client.post('/api/admin/produtos/', {
            'name': 'ESP. QUEIJO', 'category': 'especial', 'price': '30.00', 'stock': 10,
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['id'], '17')
        self.assertEqual(len(self.controlador.listar_catalogo()), 3)

    def test_criar_e_editar_peso(self):
        self.login_admin()
        self.gateway_mock.inserir_produto.side_effect = lambda draft: Product.from_draft('18', draft)

        criado = self.client.post('/api/admin/produtos/', {
            'name': 'ESP. KAFTA', 'category': 'tradicional', 'price': '40.00', 'weight': '120g',
        }, format='json')
        editado = self.client.patch('/api/admin/produtos/18/', {'weight': ''}, format='json')

        self.assertEqual(criado.data['weight'], '120g')
        self.assertIsNone(editado.data['weight'])
        self.assertIsNone(self.controlador.obter_produto('18').weight)

    def test_status_de_pedido(self):
        self.login_admin()
        self.adicionar('1')
        pedido = self.client.post('/api/checkout/', {
            'name': 'Ana', 'phone': '1', 'delivery_type': 'pickup', 'payment_method': 'cash',
        }, format='json').data['pedido']
        self.login_admin()

        cancelar = self.client.patch(f"/api/admin/pedidos/{pedido['id']}/status/", {'status': 'cancelado'}, format='json')
        enviar = self.client.patch(f"/api/admin/pedidos/{pedido['id']}/status/", {'status': 'enviado'}, format='json')
        inexistente = self.client.patch('/api/admin/pedidos/1/status/', {'status': 'enviado'}, format='json')

        self.assertEqual(cancelar.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(enviar.data['status'], 'enviado')
        self.assertEqual(inexistente.status_code, status.HTTP_404_NOT_FOUND)

    def test_logout(self):
        self.login_admin()
        self.client.post('/api/admin/logout/')
        self.assertEqual(self.client.get('/api/admin/painel/').status_code, status.HTTP_204_NO_CONTENT)
