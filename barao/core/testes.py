# barao/core/testes.py

import threading
import unittest
from datetime import datetime, timedelta
from decimal import Decimal
from unittest.mock import Mock, call

from barao.core.calculos import (
    GeradorIdPedido, calcular_subtotal, compor_endereco, estatisticas_painel, filtrar_catalogo,
    gerar_link_mapa, taxa_entrega_carrinho, taxa_entrega_checkout,
)
from barao.core.constants import (
    ARTIGOS, CATEGORY_LABELS, PAYMENT_LABELS, STATUS_LABELS, produtos_iniciais,
)
from barao.core.controlador import ControladorLoja
from barao.core.entities import (
    CartItem, Category, Customer, DeliveryType, EstadoLoja, Order, OrderDraft, OrderStatus,
    PaymentMethod, Product, ProductDraft, SessaoCliente, StatusConexao, Visao,
)
from barao.core.exceptions import (
    CarrinhoVazioError, DadosInvalidosError, ErroConectividade, ErroEscritaAdmin,
    PedidoNaoEncontradoError, ProdutoNaoEncontradoError, SenhaAdminInvalidaError,
    StatusInvalidoError, TransicaoInvalidaError,
)
from barao.core.politicas import LocalFirst, RemoteGated
from barao.core.use_cases import (
    CriarPedidoUseCase, GerenciarCarrinhoUseCase, GerenciarPedidosAdminUseCase,
    GerenciarProdutosAdminUseCase, InicializarLojaUseCase, NavegacaoUseCase,
)


def criar_produto(produto_id='1', preco='51.90', estoque=20, categoria=Category.TRADITIONAL):
    return Product(
        id=produto_id,
        name=f'Produto {produto_id}',
        category=categoria,
        price=Decimal(preco),
        cost=Decimal('10.00'),
        description='Descrição',
        stock=estoque,
    )


def criar_draft_pedido(**kwargs):
    dados = {
        'customer': Customer(name='Maria Silva', phone='11999990000', address='Rua A, 10'),
        'payment_method': PaymentMethod.CASH,
    }
    dados.update(kwargs)
    return OrderDraft(**dados)


# ====================================================================
# CÁLCULOS
# ====================================================================

class TestCalculos(unittest.TestCase):

    def test_subtotal_e_total_do_carrinho(self):
        """
        Cenário: carrinho com 2x R$ 51,90 e 1x R$ 46,90.
        """
        itens = [
            CartItem.from_product(criar_produto('1', '51.90'), quantity=2),
            CartItem.from_product(criar_produto('3', '46.90'), quantity=1),
        ]

        subtotal = calcular_subtotal(itens)

        self.assertEqual(subtotal, Decimal('150.70'))
        self.assertEqual(subtotal + taxa_entrega_carrinho(subtotal), Decimal('155.70'))

    def test_taxa_do_carrinho_vazio_e_zero(self):
        self.assertEqual(taxa_entrega_carrinho(Decimal('0.00')), Decimal('0.00'))

    def test_taxa_do_checkout_depende_do_tipo_de_entrega(self):
        self.assertEqual(taxa_entrega_checkout(DeliveryType.DELIVERY), Decimal('5.00'))
        self.assertEqual(taxa_entrega_checkout(DeliveryType.PICKUP), Decimal('0.00'))

    def test_todo_tipo_de_entrega_tem_taxa(self):
        for tipo in DeliveryType:
            self.assertIsInstance(taxa_entrega_checkout(tipo), Decimal)

    def test_filtro_do_catalogo(self):
        produtos = [
            criar_produto('1', categoria=Category.TRADITIONAL),
            criar_produto('2', categoria=Category.SPECIAL),
        ]

        self.assertEqual(len(filtrar_catalogo(produtos, 'todos')), 2)
        self.assertEqual(len(filtrar_catalogo(produtos, None)), 2)
        self.assertEqual([p.id for p in filtrar_catalogo(produtos, 'especial')], ['2'])
        self.assertEqual([p.id for p in filtrar_catalogo(produtos, Category.TRADITIONAL)], ['1'])
        self.assertEqual(filtrar_catalogo(produtos, 'bebida'), [])
        self.assertEqual(filtrar_catalogo(produtos, 'dicas'), ARTIGOS)

    def test_filtro_invalido_levanta_value_error(self):
        with self.assertRaises(ValueError):
            filtrar_catalogo([], 'sobremesa')

    def test_link_do_mapa_codifica_o_endereco(self):
        link = gerar_link_mapa('Rua A, 10 - Centro')
        self.assertEqual(
            link, 'https://www.google.com/maps/search/?api=1&query=Rua%20A%2C%2010%20-%20Centro'
        )

    def test_compor_endereco_com_numero_e_complemento(self):
        self.assertEqual(compor_endereco('Rua A', '10', 'Apto 2'), 'Rua A, Nº 10 (Apto 2)')
        self.assertEqual(compor_endereco('Rua A', '10'), 'Rua A, Nº 10')
        self.assertEqual(compor_endereco('Rua A'), 'Rua A')

    def test_ids_de_pedido_sao_estritamente_crescentes(self):
        gerador = GeradorIdPedido()
        ids = [int(gerador()) for _ in range(200)]
        self.assertEqual(ids, sorted(set(ids)))

    def test_estatisticas_ignoram_pedidos_cancelados(self):
        produtos = [criar_produto('1'), criar_produto('2')]
        valido = Order(
            id='10', date='2025-01-01', customer=Customer('A', '1'),
            items=[CartItem.from_product(produtos[1], 3)],
            subtotal=Decimal('155.70'), delivery_fee=Decimal('0.00'), total=Decimal('155.70'),
            status=OrderStatus.SHIPPED, payment_method=PaymentMethod.CARD,
        )
        cancelado = Order(
            id='11', date='2025-01-02', customer=Customer('B', '2'),
            items=[CartItem.from_product(produtos[0], 5)],
            subtotal=Decimal('259.50'), delivery_fee=Decimal('0.00'), total=Decimal('259.50'),
            status=OrderStatus.CANCELLED, payment_method=PaymentMethod.CARD,
        )

        stats = estatisticas_painel(produtos, [valido, cancelado])

        self.assertEqual(stats['faturamento'], Decimal('155.70'))
        self.assertEqual(stats['total_pedidos'], 2)
        self.assertEqual(stats['ranking'][0]['produto'].id, '2')
        self.assertEqual(stats['ranking'][0]['quantidade'], 3)
        self.assertEqual(stats['ranking'][1]['quantidade'], 0)


class TestEnumeracoes(unittest.TestCase):
    """Todo membro das enumerações precisa de rótulo."""

    def test_rotulos_completos(self):
        self.assertEqual(set(CATEGORY_LABELS), set(Category))
        self.assertEqual(set(STATUS_LABELS), set(OrderStatus))
        self.assertEqual(set(PAYMENT_LABELS), set(PaymentMethod))

    def test_todas_as_telas_tem_transicoes(self):
        self.assertEqual(set(NavegacaoUseCase.TRANSICOES), set(Visao))

    def test_cardapio_inicial(self):
        produtos = produtos_iniciais()
        self.assertEqual(len(produtos), 16)
        self.assertEqual(len({p.id for p in produtos}), 16)
        self.assertTrue(all(p.stock == 20 for p in produtos))
        # Cada chamada devolve objetos novos
        self.assertIsNot(produtos[0], produtos_iniciais()[0])


# ====================================================================
# POLÍTICAS DE ESCRITA
# ====================================================================

class TestPoliticas(unittest.TestCase):

    def test_local_first_aplica_local_mesmo_com_falha_remota(self):
        remota = Mock(side_effect=ErroConectividade("timeout"))
        local = Mock(return_value='ok')

        with self.assertLogs('barao.core.politicas', level='WARNING'):
            resultado, falha = LocalFirst().executar('123', remota, local)

        self.assertEqual(resultado, 'ok')
        self.assertEqual(falha.pedido_id, '123')
        local.assert_called_once_with()

    def test_local_first_sem_escrita_remota(self):
        resultado, falha = LocalFirst().executar('123', None, lambda: 'ok')
        self.assertEqual(resultado, 'ok')
        self.assertIsNone(falha)

    def test_remote_gated_nao_aplica_local_em_falha(self):
        local = Mock()

        with self.assertRaises(ErroEscritaAdmin):
            RemoteGated().executar(Mock(side_effect=ErroConectividade()), local)

        local.assert_not_called()

    def test_remote_gated_repassa_resultado(self):
        local = Mock()
        resultado = RemoteGated().executar(lambda: 42, local)
        self.assertEqual(resultado, 42)
        local.assert_called_once_with(42)


# ====================================================================
# INICIALIZAÇÃO
# ====================================================================

class TestInicializarLoja(unittest.TestCase):

    def setUp(self):
        self.gateway_mock = Mock()
        self.cache_mock = Mock()
        self.use_case = InicializarLojaUseCase(self.gateway_mock, self.cache_mock)

    def test_catalogo_remoto_substitui_o_padrao(self):
        remotos = [criar_produto('99')]
        self.gateway_mock.buscar_produtos.return_value = remotos
        self.gateway_mock.buscar_pedidos.return_value = []

        estado = self.use_case.executar(EstadoLoja())

        self.assertEqual(estado.produtos, remotos)
        self.assertEqual(estado.status_conexao, StatusConexao.CONECTADO)
        self.assertTrue(estado.inicializado)
        self.cache_mock.salvar_produtos.assert_called_once_with(remotos)

    def test_catalogo_remoto_vazio_mantem_o_padrao(self):
        self.gateway_mock.buscar_produtos.return_value = []
        self.gateway_mock.buscar_pedidos.return_value = []

        estado = self.use_case.executar(EstadoLoja())

        self.assertEqual(len(estado.produtos), 16)
        self.assertEqual(estado.status_conexao, StatusConexao.CONECTADO)

    def test_desconectado_carrega_snapshot_exato(self):
        """
        Cenário: banco remoto fora do ar e cache local com snapshot.
        """
        snapshot = [criar_produto('1', estoque=3), criar_produto('7', estoque=0)]
        self.gateway_mock.buscar_produtos.side_effect = ErroConectividade()
        self.cache_mock.carregar_produtos.return_value = snapshot

        estado = self.use_case.executar(EstadoLoja())

        self.assertEqual(estado.produtos, snapshot)
        self.assertEqual(estado.status_conexao, StatusConexao.DESCONECTADO)
        self.gateway_mock.buscar_pedidos.assert_not_called()

    def test_desconectado_sem_snapshot_usa_cardapio_padrao(self):
        self.gateway_mock.buscar_produtos.side_effect = ErroConectividade()
        self.cache_mock.carregar_produtos.return_value = None

        estado = self.use_case.executar(EstadoLoja())

        self.assertEqual([p.id for p in estado.produtos], [p.id for p in produtos_iniciais()])
        self.cache_mock.salvar_produtos.assert_called_once()

    def test_falha_ao_carregar_pedidos_marca_desconectado(self):
        self.gateway_mock.buscar_produtos.return_value = [criar_produto('1')]
        self.gateway_mock.buscar_pedidos.side_effect = ErroConectividade()

        estado = self.use_case.executar(EstadoLoja())

        self.assertEqual(estado.pedidos, [])
        self.assertEqual(estado.status_conexao, StatusConexao.DESCONECTADO)


# ====================================================================
# CARRINHO
# ====================================================================

class TestGerenciarCarrinho(unittest.TestCase):

    def setUp(self):
        self.use_case = GerenciarCarrinhoUseCase()
        self.sessao = SessaoCliente()
        self.produto = criar_produto('1')

    def test_adicionar_duas_vezes_incrementa_a_linha(self):
        self.use_case.adicionar_item(self.sessao, self.produto)
        self.use_case.adicionar_item(self.sessao, self.produto)

        self.assertEqual(len(self.sessao.carrinho), 1)
        self.assertEqual(self.sessao.carrinho[0].quantity, 2)

    def test_adicionar_nao_verifica_estoque(self):
        esgotado = criar_produto('2', estoque=0)
        self.use_case.adicionar_item(self.sessao, esgotado)
        self.assertEqual(self.sessao.total_itens, 1)

    def test_quantidade_zerada_remove_a_linha(self):
        self.use_case.adicionar_item(self.sessao, self.produto)
        self.use_case.atualizar_quantidade(self.sessao, '1', -5)
        self.assertEqual(self.sessao.carrinho, [])

    def test_remover_item(self):
        self.use_case.adicionar_item(self.sessao, self.produto)
        self.use_case.adicionar_item(self.sessao, criar_produto('2'))
        self.use_case.remover_item(self.sessao, '1')
        self.assertEqual([i.id for i in self.sessao.carrinho], ['2'])

    def test_sequencia_mantem_linhas_unicas_e_positivas(self):
        produtos = [criar_produto(str(i)) for i in range(1, 4)]
        comandos = [
            ('add', 0), ('add', 1), ('add', 0), ('delta', 1, -1), ('add', 2),
            ('delta', 0, 3), ('delta', 2, -2), ('add', 1), ('delta', 0, -10), ('add', 0),
        ]
        for comando in comandos:
            if comando[0] == 'add':
                self.use_case.adicionar_item(self.sessao, produtos[comando[1]])
            else:
                self.use_case.atualizar_quantidade(self.sessao, produtos[comando[1]].id, comando[2])

            ids = [item.id for item in self.sessao.carrinho]
            self.assertEqual(len(ids), len(set(ids)))
            self.assertTrue(all(item.quantity > 0 for item in self.sessao.carrinho))

        self.assertEqual(self.sessao.quantidades(), {'2': 1, '1': 1})

    def test_resumo(self):
        self.use_case.adicionar_item(self.sessao, criar_produto('1', '51.90'))
        self.use_case.adicionar_item(self.sessao, criar_produto('1', '51.90'))
        self.use_case.adicionar_item(self.sessao, criar_produto('3', '46.90'))

        resumo = self.use_case.resumo(self.sessao)

        self.assertEqual(resumo['total_itens'], 3)
        self.assertEqual(resumo['subtotal'], Decimal('150.70'))
        self.assertEqual(resumo['taxa_entrega'], Decimal('5.00'))
        self.assertEqual(resumo['total'], Decimal('155.70'))


# ====================================================================
# CRIAR PEDIDO
# ====================================================================

class TestCriarPedido(unittest.TestCase):

    def setUp(self):
        self.gateway_mock = Mock()
        self.cache_mock = Mock()
        self.use_case = CriarPedidoUseCase(self.gateway_mock, self.cache_mock)

        self.estado = EstadoLoja(
            produtos=[criar_produto('1', '51.90', 20), criar_produto('3', '46.90', 1)],
            status_conexao=StatusConexao.CONECTADO,
            inicializado=True,
        )
        self.sessao = SessaoCliente(
            carrinho=[
                CartItem.from_product(self.estado.produtos[0], 2),
                CartItem.from_product(self.estado.produtos[1], 2),
            ],
            visao=Visao.CHECKOUT,
        )

    def test_pedido_com_sucesso(self):
        """
        Cenário: banco remoto conectado, pedido em dinheiro para entrega.
        """
        pedido = self.use_case.executar(self.estado, self.sessao, criar_draft_pedido())

        # Estado local
        self.assertEqual(self.sessao.carrinho, [])
        self.assertEqual(self.sessao.visao, Visao.SUCESSO)
        self.assertEqual(self.sessao.ultimo_pedido_id, pedido.id)
        self.assertIn(pedido, self.estado.pedidos)
        self.assertEqual(self.estado.buscar_produto('1').stock, 18)
        self.assertEqual(self.estado.buscar_produto('3').stock, 0)

        # Totais
        self.assertEqual(pedido.subtotal, Decimal('197.60'))
        self.assertEqual(pedido.delivery_fee, Decimal('5.00'))
        self.assertEqual(pedido.total, Decimal('202.60'))
        self.assertEqual(pedido.status, OrderStatus.PENDING)
        self.assertIsNotNone(pedido.maps_url)

        # Espelho remoto: pedido e baixa de estoque a partir do estoque anterior
        self.gateway_mock.inserir_pedido.assert_called_once_with(pedido)
        self.gateway_mock.atualizar_estoque.assert_has_calls([call('1', 18), call('3', 0)])
        self.cache_mock.salvar_produtos.assert_called_once_with(self.estado.produtos)

    def test_falha_remota_nao_impede_o_pedido(self):
        self.gateway_mock.inserir_pedido.side_effect = ErroConectividade()

        with self.assertLogs('barao.core.politicas', level='WARNING'):
            pedido = self.use_case.executar(self.estado, self.sessao, criar_draft_pedido())

        self.assertIn(pedido, self.estado.pedidos)
        self.assertEqual(self.sessao.carrinho, [])
        self.gateway_mock.atualizar_estoque.assert_not_called()

    def test_falha_remota_marca_a_loja_como_desconectada(self):
        self.gateway_mock.inserir_pedido.side_effect = ErroConectividade()

        with self.assertLogs('barao.core.politicas', level='WARNING'):
            self.use_case.executar(self.estado, self.sessao, criar_draft_pedido())

        self.assertEqual(self.estado.status_conexao, StatusConexao.DESCONECTADO)

    def test_falha_na_baixa_de_estoque_interrompe_o_espelho_remoto(self):
        """
        Cenário: o pedido é gravado no banco remoto, mas a baixa de estoque
        falha no segundo item. O terceiro item não é tentado, nada é desfeito
        no banco e o pedido local continua valendo.
        """
        self.estado.produtos.append(criar_produto('5', '12.00', 10))
        self.sessao.carrinho.append(CartItem.from_product(self.estado.produtos[2], 1))
        self.gateway_mock.atualizar_estoque.side_effect = [None, ErroConectividade()]

        with self.assertLogs('barao.core.politicas', level='WARNING') as logs:
            pedido = self.use_case.executar(self.estado, self.sessao, criar_draft_pedido())

        # Espelho remoto parcial
        self.gateway_mock.inserir_pedido.assert_called_once_with(pedido)
        self.assertEqual(self.gateway_mock.atualizar_estoque.call_count, 2)
        self.gateway_mock.atualizar_estoque.assert_has_calls([call('1', 18), call('3', 0)])
        self.assertIn(f'Pedido #{pedido.id}', logs.output[0])

        # Estado local completo
        self.assertIn(pedido, self.estado.pedidos)
        self.assertEqual(len(pedido.items), 3)
        self.assertEqual(self.estado.buscar_produto('1').stock, 18)
        self.assertEqual(self.estado.buscar_produto('3').stock, 0)
        self.assertEqual(self.estado.buscar_produto('5').stock, 9)
        self.assertEqual(self.sessao.carrinho, [])
        self.assertEqual(self.sessao.visao, Visao.SUCESSO)
        self.assertEqual(self.sessao.ultimo_pedido_id, pedido.id)
        self.cache_mock.salvar_produtos.assert_called_once_with(self.estado.produtos)

    def test_data_do_pedido_tem_fuso_utc(self):
        pedido = self.use_case.executar(self.estado, self.sessao, criar_draft_pedido())

        momento = datetime.fromisoformat(pedido.date)
        self.assertEqual(momento.utcoffset(), timedelta(0))

    def test_desconectado_nao_chama_o_banco_remoto(self):
        self.estado.status_conexao = StatusConexao.DESCONECTADO

        pedido = self.use_case.executar(self.estado, self.sessao, criar_draft_pedido())

        self.assertIn(pedido, self.estado.pedidos)
        self.gateway_mock.inserir_pedido.assert_not_called()

    def test_retirada_nao_cobra_taxa_nem_gera_mapa(self):
        draft = criar_draft_pedido(
            customer=Customer(name='João', phone='11', delivery_type=DeliveryType.PICKUP)
        )

        pedido = self.use_case.executar(self.estado, self.sessao, draft)

        self.assertEqual(pedido.delivery_fee, Decimal('0.00'))
        self.assertEqual(pedido.total, pedido.subtotal)
        self.assertIsNone(pedido.maps_url)

    def test_pix_aguarda_pagamento_e_guarda_pagador(self):
        draft = criar_draft_pedido(
            payment_method=PaymentMethod.PIX, payer_name='Maria', change_for=Decimal('100.00')
        )

        pedido = self.use_case.executar(self.estado, self.sessao, draft)

        self.assertEqual(pedido.status, OrderStatus.AWAITING_PAYMENT)
        self.assertEqual(pedido.payer_name, 'Maria')
        self.assertIsNone(pedido.change_for)

    def test_numero_e_complemento_entram_no_endereco(self):
        draft = criar_draft_pedido(house_number='10', complement='Fundos')

        pedido = self.use_case.executar(self.estado, self.sessao, draft)

        self.assertEqual(pedido.customer.address, 'Rua A, 10, Nº 10 (Fundos)')

    def test_carrinho_vazio(self):
        self.sessao.carrinho = []
        with self.assertRaises(CarrinhoVazioError):
            self.use_case.executar(self.estado, self.sessao, criar_draft_pedido())

    def test_campos_obrigatorios(self):
        draft = criar_draft_pedido(customer=Customer(name='', phone='', address=''))

        with self.assertRaises(DadosInvalidosError) as ctx:
            self.use_case.executar(self.estado, self.sessao, draft)

        self.assertEqual(ctx.exception.campos, ['name', 'phone', 'address'])
        self.assertEqual(len(self.sessao.carrinho), 2)
        self.gateway_mock.inserir_pedido.assert_not_called()

    def test_itens_do_pedido_sao_copias(self):
        pedido = self.use_case.executar(self.estado, self.sessao, criar_draft_pedido())
        self.estado.produtos[0].name = 'Renomeado'
        self.assertEqual(pedido.items[0].name, 'Produto 1')

    def test_resumo_checkout(self):
        resumo = self.use_case.resumo_checkout(self.sessao, DeliveryType.PICKUP)
        self.assertEqual(resumo['taxa_entrega'], Decimal('0.00'))
        self.assertEqual(resumo['total'], Decimal('197.60'))


# ====================================================================
# CASOS DE USO ADMINISTRATIVOS
# ====================================================================

class TestGerenciarProdutosAdmin(unittest.TestCase):

    def setUp(self):
        self.gateway_mock = Mock()
        self.cache_mock = Mock()
        self.use_case = GerenciarProdutosAdminUseCase(self.gateway_mock, self.cache_mock)
        self.estado = EstadoLoja(produtos=[criar_produto('1', estoque=20)], inicializado=True)

    def test_edicao_com_falha_remota_nao_altera_estado(self):
        """
        Cenário: admin altera o estoque de 20 para 15 e o banco remoto falha.
        """
        self.gateway_mock.atualizar_produto.side_effect = ErroConectividade()

        with self.assertRaises(ErroEscritaAdmin):
            self.use_case.editar_produto(self.estado, '1', {'stock': 15})

        self.assertEqual(self.estado.buscar_produto('1').stock, 20)
        self.cache_mock.salvar_produtos.assert_not_called()

    def test_edicao_com_sucesso(self):
        produto = self.use_case.editar_produto(self.estado, '1', {'stock': 15, 'price': Decimal('55.00')})

        self.assertEqual(produto.stock, 15)
        self.assertEqual(self.estado.buscar_produto('1').price, Decimal('55.00'))
        args = self.gateway_mock.atualizar_produto.call_args[0]
        self.assertEqual(args[0], '1')
        self.assertEqual(args[1].stock, 15)

    def test_edicao_do_peso(self):
        produto = self.use_case.editar_produto(self.estado, '1', {'weight': '150g'})

        self.assertEqual(produto.weight, '150g')
        self.assertEqual(self.estado.buscar_produto('1').weight, '150g')
        self.assertEqual(self.gateway_mock.atualizar_produto.call_args[0][1].weight, '150g')

    def test_edicao_de_produto_inexistente(self):
        with self.assertRaises(ProdutoNaoEncontradoError):
            self.use_case.editar_produto(self.estado, '404', {'stock': 1})

    def test_edicao_de_campo_nao_editavel(self):
        with self.assertRaises(DadosInvalidosError):
            self.use_case.editar_produto(self.estado, '1', {'id': '2'})
        self.gateway_mock.atualizar_produto.assert_not_called()

    def test_criar_produto_usa_id_do_banco(self):
        draft = ProductDraft(
            name='ESP. QUEIJO', category=Category.SPECIAL, price=Decimal('30.00'),
            cost=Decimal('20.00'), description='Queijo coalho', stock=10,
        )
        self.gateway_mock.inserir_produto.return_value = Product.from_draft('17', draft)

        produto = self.use_case.criar_produto(self.estado, draft)

        self.assertEqual(produto.id, '17')
        self.assertEqual([p.id for p in self.estado.produtos], ['1', '17'])

    def test_criar_produto_com_falha_remota(self):
        self.gateway_mock.inserir_produto.side_effect = ErroConectividade()
        draft = criar_produto('x').to_draft()

        with self.assertRaises(ErroEscritaAdmin):
            self.use_case.criar_produto(self.estado, draft)

        self.assertEqual(len(self.estado.produtos), 1)


class TestGerenciarPedidosAdmin(unittest.TestCase):

    def setUp(self):
        self.gateway_mock = Mock()
        self.use_case = GerenciarPedidosAdminUseCase(self.gateway_mock)
        self.pedido = Order(
            id='100', date='2025-01-01', customer=Customer('A', '1'), items=[],
            subtotal=Decimal('0'), delivery_fee=Decimal('0'), total=Decimal('0'),
            status=OrderStatus.PENDING, payment_method=PaymentMethod.CASH,
        )
        self.estado = EstadoLoja(pedidos=[self.pedido], inicializado=True)

    def test_status_permitido(self):
        atualizado = self.use_case.definir_status(self.estado, '100', OrderStatus.SHIPPED)

        self.assertEqual(atualizado.status, OrderStatus.SHIPPED)
        self.assertEqual(self.estado.buscar_pedido('100').status, OrderStatus.SHIPPED)
        self.gateway_mock.atualizar_status_pedido.assert_called_once_with('100', OrderStatus.SHIPPED)

    def test_status_nao_permitido_pelo_painel(self):
        for status in (OrderStatus.CANCELLED, OrderStatus.AWAITING_PAYMENT):
            with self.assertRaises(StatusInvalidoError):
                self.use_case.definir_status(self.estado, '100', status)
        self.gateway_mock.atualizar_status_pedido.assert_not_called()

    def test_pedido_inexistente(self):
        with self.assertRaises(PedidoNaoEncontradoError):
            self.use_case.definir_status(self.estado, '999', OrderStatus.PREPARING)

    def test_falha_remota_mantem_status(self):
        self.gateway_mock.atualizar_status_pedido.side_effect = ErroConectividade()

        with self.assertRaises(ErroEscritaAdmin):
            self.use_case.definir_status(self.estado, '100', OrderStatus.PREPARING)

        self.assertEqual(self.estado.buscar_pedido('100').status, OrderStatus.PENDING)


# ====================================================================
# NAVEGAÇÃO
# ====================================================================

class TestNavegacao(unittest.TestCase):

    def setUp(self):
        self.use_case = NavegacaoUseCase(senha_admin='101210')
        self.sessao = SessaoCliente()

    def test_transicoes_validas(self):
        self.use_case.navegar(self.sessao, Visao.CARRINHO)
        self.use_case.navegar(self.sessao, Visao.CHECKOUT)
        self.use_case.navegar(self.sessao, Visao.CARRINHO)
        self.use_case.navegar(self.sessao, Visao.CATALOGO)
        self.use_case.navegar(self.sessao, Visao.SOBRE)
        self.assertEqual(self.sessao.visao, Visao.SOBRE)

    def test_transicao_invalida(self):
        with self.assertRaises(TransicaoInvalidaError):
            self.use_case.navegar(self.sessao, Visao.CHECKOUT)
        self.sessao.visao = Visao.CHECKOUT
        with self.assertRaises(TransicaoInvalidaError):
            self.use_case.navegar(self.sessao, Visao.SUCESSO)

    def test_admin_sem_flag_nao_muda_a_tela(self):
        self.use_case.navegar(self.sessao, Visao.ADMIN)
        self.assertEqual(self.sessao.visao, Visao.CATALOGO)

    def test_mesma_tela_e_noop(self):
        self.use_case.navegar(self.sessao, Visao.CATALOGO)
        self.assertEqual(self.sessao.visao, Visao.CATALOGO)

    def test_login_e_logout(self):
        with self.assertRaises(SenhaAdminInvalidaError):
            self.use_case.login_admin(self.sessao, 'errada')
        self.assertFalse(self.sessao.is_admin)

        self.use_case.login_admin(self.sessao, '101210')
        self.assertTrue(self.sessao.is_admin)
        self.assertEqual(self.sessao.visao, Visao.ADMIN)

        self.use_case.logout_admin(self.sessao)
        self.assertFalse(self.sessao.is_admin)
        self.assertEqual(self.sessao.visao, Visao.CATALOGO)


# ====================================================================
# CONTROLADOR
# ====================================================================

class TestControladorLoja(unittest.TestCase):

    def setUp(self):
        self.gateway_mock = Mock()
        self.gateway_mock.buscar_produtos.return_value = [criar_produto('1'), criar_produto('2')]
        self.gateway_mock.buscar_pedidos.return_value = []
        self.cache_mock = Mock()
        self.controlador = ControladorLoja(self.gateway_mock, self.cache_mock, senha_admin='101210')

    def test_inicializa_uma_unica_vez(self):
        self.controlador.listar_catalogo()
        self.controlador.listar_pedidos()
        self.assertEqual(self.controlador.status_conexao, StatusConexao.CONECTADO)
        self.gateway_mock.buscar_produtos.assert_called_once()

    def test_adicionar_produto_inexistente(self):
        with self.assertRaises(ProdutoNaoEncontradoError):
            self.controlador.adicionar_ao_carrinho(SessaoCliente(), '404')

    def test_fluxo_completo_de_compra(self):
        sessao = SessaoCliente()
        self.controlador.adicionar_ao_carrinho(sessao, '1')
        self.controlador.adicionar_ao_carrinho(sessao, '1')
        self.controlador.navegar(sessao, Visao.CARRINHO)
        self.controlador.navegar(sessao, Visao.CHECKOUT)

        pedido = self.controlador.criar_pedido(sessao, criar_draft_pedido())

        self.assertEqual(sessao.visao, Visao.SUCESSO)
        self.assertEqual(self.controlador.obter_pedido(sessao.ultimo_pedido_id), pedido)
        self.assertEqual(self.controlador.obter_produto('1').stock, 18)
        self.assertEqual(self.controlador.estatisticas()['total_pedidos'], 1)

    def test_consulta_inicial_nao_segura_a_trava_do_estado(self):
        """
        Cenário: enquanto o banco remoto responde à carga inicial, outra
        thread consegue adquirir a trava das mutações locais.
        """
        trava_livre = []

        def tentar_adquirir():
            if self.controlador._trava.acquire(blocking=False):
                trava_livre.append(True)
                self.controlador._trava.release()

        def buscar_produtos():
            outra = threading.Thread(target=tentar_adquirir)
            outra.start()
            outra.join()
            return [criar_produto('1')]

        self.gateway_mock.buscar_produtos.side_effect = buscar_produtos

        self.controlador.inicializar()
        self.controlador.inicializar()

        self.assertEqual(trava_livre, [True])
        self.gateway_mock.buscar_produtos.assert_called_once()
        self.assertTrue(self.controlador.estado.inicializado)

    def test_falha_ao_sincronizar_pedido_desconecta_a_loja(self):
        """
        Cenário: loja conectada na inicialização; o banco remoto cai no
        checkout. O status passa a desconectado e o próximo pedido já não
        tenta o banco remoto.
        """
        self.assertEqual(self.controlador.status_conexao, StatusConexao.CONECTADO)
        self.gateway_mock.inserir_pedido.side_effect = ErroConectividade()
        sessao = SessaoCliente()
        self.controlador.adicionar_ao_carrinho(sessao, '1')

        with self.assertLogs('barao.core.politicas', level='WARNING'):
            self.controlador.criar_pedido(sessao, criar_draft_pedido())

        self.assertEqual(self.controlador.status_conexao, StatusConexao.DESCONECTADO)

        self.controlador.adicionar_ao_carrinho(sessao, '2')
        self.controlador.criar_pedido(sessao, criar_draft_pedido())

        self.gateway_mock.inserir_pedido.assert_called_once()
        self.assertEqual(len(self.controlador.listar_pedidos()), 2)


if __name__ == '__main__':
    unittest.main()
