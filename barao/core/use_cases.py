# barao/core/use_cases.py
"""
Implementação dos Casos de Uso (Lógica de Negócio) da loja.
Esta camada depende apenas das Entidades e Portas (Interfaces) do Core.
O estado (EstadoLoja / SessaoCliente) é sempre recebido explicitamente.
"""
import dataclasses
import logging
from contextlib import nullcontext
from datetime import datetime, timezone
from functools import partial
from typing import Dict, List, Optional

from barao.core.calculos import (
    calcular_subtotal, compor_endereco, gerar_id_pedido, gerar_link_mapa,
    taxa_entrega_carrinho, taxa_entrega_checkout,
)
from barao.core.constants import STATUS_PERMITIDOS_ADMIN, produtos_iniciais
from barao.core.entities import (
    CartItem, Customer, DeliveryType, EstadoLoja, Order, OrderDraft, OrderStatus,
    PaymentMethod, Product, ProductDraft, SessaoCliente, StatusConexao, Visao,
)
from barao.core.exceptions import (
    CarrinhoVazioError, DadosInvalidosError, ErroConectividade, PedidoNaoEncontradoError,
    ProdutoNaoEncontradoError, SenhaAdminInvalidaError, StatusInvalidoError, TransicaoInvalidaError,
)
from barao.core.politicas import LocalFirst, RemoteGated
from barao.core.ports import ICacheLocal, IPersistenciaGateway

logger = logging.getLogger(__name__)


# ====================================================================
# 1. INICIALIZAÇÃO
# ====================================================================

class InicializarLojaUseCase:
    """
    Carrega catálogo e pedidos do banco remoto, com fallback para o cache local.

    A carga é feita em duas etapas: `carregar` consulta o banco (sem tocar no
    estado) e `aplicar` grava o resultado no EstadoLoja. Assim o controlador
    pode fazer a consulta remota fora da trava das mutações locais.
    """

    def __init__(self, gateway: IPersistenciaGateway, cache_local: ICacheLocal):
        self.gateway = gateway
        self.cache_local = cache_local

    def executar(self, estado: EstadoLoja) -> EstadoLoja:
        return self.aplicar(estado, self.carregar())

    def carregar(self) -> Dict:
        carga = {'produtos': None, 'pedidos': None, 'status': StatusConexao.DESCONECTADO}
        try:
            produtos = self.gateway.buscar_produtos()
        except ErroConectividade as e:
            logger.warning(f"Banco remoto indisponível, usando cache local: {e.message}")
            carga['produtos'] = self.cache_local.carregar_produtos()
            return carga

        logger.info(f"Catálogo carregado do banco remoto: {len(produtos)} produtos.")
        carga['status'] = StatusConexao.CONECTADO
        # Catálogo remoto vazio mantém o cardápio atual
        carga['produtos'] = produtos or None
        try:
            carga['pedidos'] = self.gateway.buscar_pedidos()
        except ErroConectividade as e:
            logger.warning(f"Não foi possível carregar o histórico de pedidos: {e.message}")
            carga['status'] = StatusConexao.DESCONECTADO
        return carga

    def aplicar(self, estado: EstadoLoja, carga: Dict) -> EstadoLoja:
        if not estado.produtos:
            estado.produtos = produtos_iniciais()
        if carga['produtos'] is not None:
            estado.produtos = carga['produtos']
        if carga['pedidos'] is not None:
            estado.pedidos = carga['pedidos']
        estado.status_conexao = carga['status']

        self.cache_local.salvar_produtos(estado.produtos)
        estado.inicializado = True
        return estado


# ====================================================================
# 2. CARRINHO
# ====================================================================

class GerenciarCarrinhoUseCase:
    """
    Mantém as linhas do carrinho. Não há checagem de estoque aqui: o
    catálogo apenas desabilita o botão quando o estoque acaba.
    """

    def adicionar_item(self, sessao: SessaoCliente, produto: Product) -> SessaoCliente:
        existente = sessao.buscar_item(produto.id)
        if existente:
            existente.quantity += 1
        else:
            sessao.carrinho.append(CartItem.from_product(produto, quantity=1))
        return sessao

    def atualizar_quantidade(self, sessao: SessaoCliente, produto_id: str, delta: int) -> SessaoCliente:
        """Soma delta à linha (mínimo 0); linhas zeradas saem do carrinho."""
        for item in sessao.carrinho:
            if item.id == produto_id:
                item.quantity = max(0, item.quantity + delta)
        sessao.carrinho = [item for item in sessao.carrinho if item.quantity > 0]
        return sessao

    def remover_item(self, sessao: SessaoCliente, produto_id: str) -> SessaoCliente:
        sessao.carrinho = [item for item in sessao.carrinho if item.id != produto_id]
        return sessao

    def resumo(self, sessao: SessaoCliente) -> Dict:
        subtotal = calcular_subtotal(sessao.carrinho)
        taxa = taxa_entrega_carrinho(subtotal)
        return {
            'itens': list(sessao.carrinho),
            'total_itens': sessao.total_itens,
            'subtotal': subtotal,
            'taxa_entrega': taxa,
            'total': subtotal + taxa,
        }


# ====================================================================
# 3. PEDIDO E CHECKOUT
# ====================================================================

_STATUS_INICIAL = {
    PaymentMethod.PIX: OrderStatus.AWAITING_PAYMENT,
    PaymentMethod.CASH: OrderStatus.PENDING,
    PaymentMethod.CARD: OrderStatus.PENDING,
}


def validar_cliente(cliente: Customer) -> None:
    """Campos obrigatórios: nome, telefone e, para entrega, endereço."""
    faltando = []
    if not (cliente.name or '').strip():
        faltando.append('name')
    if not (cliente.phone or '').strip():
        faltando.append('phone')
    if cliente.delivery_type == DeliveryType.DELIVERY and not (cliente.address or '').strip():
        faltando.append('address')
    if faltando:
        raise DadosInvalidosError(campos=faltando)


class CriarPedidoUseCase:
    """
    Caso de Uso que finaliza o checkout.
    O pedido local é definitivo mesmo se o banco remoto falhar (LocalFirst).
    """

    def __init__(
        self,
        gateway: IPersistenciaGateway,
        cache_local: ICacheLocal,
        politica: Optional[LocalFirst] = None,
        trava=None,
    ):
        self.gateway = gateway
        self.cache_local = cache_local
        self.politica = politica or LocalFirst()
        self.trava = trava or nullcontext()

    def montar_pedido(self, itens: List[CartItem], draft: OrderDraft) -> Order:
        cliente = draft.customer
        endereco = compor_endereco(cliente.address, draft.house_number, draft.complement)
        cliente = dataclasses.replace(cliente, address=endereco)

        subtotal = calcular_subtotal(itens)
        taxa = taxa_entrega_checkout(cliente.delivery_type)
        metodo = draft.payment_method

        return Order(
            id=gerar_id_pedido(),
            date=datetime.now(timezone.utc).isoformat(),
            customer=cliente,
            items=[dataclasses.replace(item) for item in itens],
            subtotal=subtotal,
            delivery_fee=taxa,
            total=subtotal + taxa,
            status=_STATUS_INICIAL[metodo],
            payment_method=metodo,
            payer_name=draft.payer_name if metodo == PaymentMethod.PIX else None,
            change_for=draft.change_for if metodo == PaymentMethod.CASH else None,
            maps_url=gerar_link_mapa(endereco) if cliente.delivery_type == DeliveryType.DELIVERY else None,
        )

    def executar(self, estado: EstadoLoja, sessao: SessaoCliente, draft: OrderDraft) -> Order:
        if not sessao.carrinho:
            raise CarrinhoVazioError("Não é possível finalizar o pedido com o carrinho vazio.")
        validar_cliente(draft.customer)

        pedido = self.montar_pedido(sessao.carrinho, draft)

        # Estoque lido antes do pedido; a baixa remota parte deste valor
        # (pedidos simultâneos do mesmo produto podem se sobrescrever).
        estoque_anterior = {}
        for item in pedido.items:
            produto = estado.buscar_produto(item.id)
            if produto is not None:
                estoque_anterior[item.id] = produto.stock

        escrita_remota = None
        if estado.status_conexao == StatusConexao.CONECTADO:
            escrita_remota = partial(self._sincronizar, pedido, estoque_anterior)

        pedido, falha = self.politica.executar(
            pedido.id,
            escrita_remota,
            lambda: self._aplicar_local(estado, sessao, pedido),
        )
        if falha is not None:
            # Os próximos pedidos ficam só no local até a loja ser reinicializada.
            with self.trava:
                estado.status_conexao = StatusConexao.DESCONECTADO
        return pedido

    def _sincronizar(self, pedido: Order, estoque_anterior: Dict[str, int]) -> None:
        """Insere o pedido e baixa o estoque item a item, sem transação."""
        self.gateway.inserir_pedido(pedido)
        for item in pedido.items:
            if item.id in estoque_anterior:
                # Piso em zero (local e remoto), em vez da subtração simples
                self.gateway.atualizar_estoque(item.id, max(0, estoque_anterior[item.id] - item.quantity))

    def _aplicar_local(self, estado: EstadoLoja, sessao: SessaoCliente, pedido: Order) -> Order:
        vendidos = {item.id: item.quantity for item in pedido.items}
        with self.trava:
            estado.pedidos.append(pedido)
            # Mesmo piso em zero da baixa remota
            estado.produtos = [
                dataclasses.replace(p, stock=max(0, p.stock - vendidos[p.id])) if p.id in vendidos else p
                for p in estado.produtos
            ]
            sessao.carrinho = []
            sessao.ultimo_pedido_id = pedido.id
            sessao.visao = Visao.SUCESSO
            self.cache_local.salvar_produtos(estado.produtos)
        logger.info(f"Pedido #{pedido.id} registrado. Total: R$ {pedido.total:.2f}")
        return pedido

    def resumo_checkout(self, sessao: SessaoCliente, tipo_entrega: DeliveryType) -> Dict:
        subtotal = calcular_subtotal(sessao.carrinho)
        taxa = taxa_entrega_checkout(tipo_entrega)
        return {
            'subtotal': subtotal,
            'taxa_entrega': taxa,
            'total': subtotal + taxa,
        }


# ====================================================================
# 4. CASOS DE USO ADMINISTRATIVOS
# ====================================================================

class GerenciarProdutosAdminUseCase:
    """Cadastro e edição de produtos. Só altera o estado local após o banco remoto confirmar."""

    CAMPOS_EDITAVEIS = ('name', 'category', 'price', 'cost', 'description', 'stock', 'image', 'weight')

    def __init__(
        self,
        gateway: IPersistenciaGateway,
        cache_local: ICacheLocal,
        politica: Optional[RemoteGated] = None,
        trava=None,
    ):
        self.gateway = gateway
        self.cache_local = cache_local
        self.politica = politica or RemoteGated()
        self.trava = trava or nullcontext()

    def criar_produto(self, estado: EstadoLoja, draft: ProductDraft) -> Product:
        def aplicar(produto: Product) -> None:
            with self.trava:
                estado.produtos = estado.produtos + [produto]
                self.cache_local.salvar_produtos(estado.produtos)

        produto = self.politica.executar(lambda: self.gateway.inserir_produto(draft), aplicar)
        logger.info(f"Produto '{produto.name}' criado com ID {produto.id}.")
        return produto

    def editar_produto(self, estado: EstadoLoja, produto_id: str, alteracoes: Dict) -> Product:
        atual = estado.buscar_produto(produto_id)
        if not atual:
            raise ProdutoNaoEncontradoError(produto_id)

        invalidos = set(alteracoes) - set(self.CAMPOS_EDITAVEIS)
        if invalidos:
            raise DadosInvalidosError(f"Campos não editáveis: {', '.join(sorted(invalidos))}.", campos=sorted(invalidos))

        editado = dataclasses.replace(atual, **alteracoes)

        def aplicar(_resultado) -> None:
            with self.trava:
                estado.produtos = [editado if p.id == produto_id else p for p in estado.produtos]
                self.cache_local.salvar_produtos(estado.produtos)

        self.politica.executar(lambda: self.gateway.atualizar_produto(produto_id, editado.to_draft()), aplicar)
        logger.info(f"Produto {produto_id} atualizado: {', '.join(alteracoes)}.")
        return editado


class GerenciarPedidosAdminUseCase:
    """Atualização manual de status de pedido pelo painel."""

    def __init__(self, gateway: IPersistenciaGateway, politica: Optional[RemoteGated] = None, trava=None):
        self.gateway = gateway
        self.politica = politica or RemoteGated()
        self.trava = trava or nullcontext()

    def definir_status(self, estado: EstadoLoja, pedido_id: str, novo_status: OrderStatus) -> Order:
        if novo_status not in STATUS_PERMITIDOS_ADMIN:
            raise StatusInvalidoError(f"O status '{novo_status.value}' não pode ser aplicado pelo painel.")

        pedido = estado.buscar_pedido(pedido_id)
        if not pedido:
            raise PedidoNaoEncontradoError(pedido_id)

        atualizado = dataclasses.replace(pedido, status=novo_status)

        def aplicar(_resultado) -> None:
            with self.trava:
                estado.pedidos = [atualizado if o.id == pedido_id else o for o in estado.pedidos]

        self.politica.executar(lambda: self.gateway.atualizar_status_pedido(pedido_id, novo_status), aplicar)
        logger.info(f"Pedido #{pedido_id} agora está '{novo_status.value}'.")
        return atualizado


# ====================================================================
# 5. NAVEGAÇÃO E ACESSO ADMIN
# ====================================================================

class NavegacaoUseCase:
    """Máquina de estados das telas."""

    TRANSICOES = {
        Visao.CATALOGO: {Visao.CARRINHO, Visao.SOBRE, Visao.ADMIN},
        Visao.CARRINHO: {Visao.CATALOGO, Visao.CHECKOUT},
        Visao.CHECKOUT: {Visao.CARRINHO},
        Visao.SUCESSO: {Visao.CATALOGO},
        Visao.SOBRE: {Visao.CATALOGO},
        Visao.ADMIN: {Visao.CATALOGO},
    }

    def __init__(self, senha_admin: str):
        self.senha_admin = senha_admin

    def navegar(self, sessao: SessaoCliente, destino: Visao) -> SessaoCliente:
        if destino == sessao.visao:
            return sessao
        if destino not in self.TRANSICOES[sessao.visao]:
            raise TransicaoInvalidaError(sessao.visao, destino)
        if destino == Visao.ADMIN and not sessao.is_admin:
            return sessao
        sessao.visao = destino
        return sessao

    def login_admin(self, sessao: SessaoCliente, senha: str) -> SessaoCliente:
        if senha != self.senha_admin:
            logger.warning("Tentativa de acesso ao painel com senha incorreta.")
            raise SenhaAdminInvalidaError()
        sessao.is_admin = True
        sessao.visao = Visao.ADMIN
        return sessao

    def logout_admin(self, sessao: SessaoCliente) -> SessaoCliente:
        sessao.is_admin = False
        sessao.visao = Visao.CATALOGO
        return sessao
