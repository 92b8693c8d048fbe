# barao/core/controlador.py
"""
Controlador de estado da loja.

Único ponto de mutação do EstadoLoja (compartilhado) e das SessaoCliente
(por visitante): cada operação é um comando nomeado que delega ao caso de
uso correspondente. As mutações locais acontecem sob uma trava para manter
cada comando atômico mesmo com o servidor atendendo em várias threads; as
chamadas ao banco remoto acontecem fora dela.
"""
import threading
from typing import Dict, List, Optional, Union

from barao.core.calculos import estatisticas_painel, filtrar_catalogo
from barao.core.entities import (
    Article, Category, DeliveryType, EstadoLoja, Order, OrderDraft, OrderStatus,
    Product, ProductDraft, SessaoCliente, StatusConexao, Visao,
)
from barao.core.exceptions import ProdutoNaoEncontradoError
from barao.core.ports import ICacheLocal, IPersistenciaGateway
from barao.core.use_cases import (
    CriarPedidoUseCase, GerenciarCarrinhoUseCase, GerenciarPedidosAdminUseCase,
    GerenciarProdutosAdminUseCase, InicializarLojaUseCase, NavegacaoUseCase,
)


class ControladorLoja:

    def __init__(
        self,
        gateway: IPersistenciaGateway,
        cache_local: ICacheLocal,
        senha_admin: str,
        estado: Optional[EstadoLoja] = None,
    ):
        self.estado = estado or EstadoLoja()
        self.gateway = gateway
        self._trava = threading.RLock()
        # Serializa só a carga inicial; as consultas remotas dela não seguram _trava
        self._trava_inicializacao = threading.Lock()

        self._inicializar = InicializarLojaUseCase(gateway, cache_local)
        self._carrinho = GerenciarCarrinhoUseCase()
        self._pedidos = CriarPedidoUseCase(gateway, cache_local, trava=self._trava)
        self._produtos_admin = GerenciarProdutosAdminUseCase(gateway, cache_local, trava=self._trava)
        self._pedidos_admin = GerenciarPedidosAdminUseCase(gateway, trava=self._trava)
        self._navegacao = NavegacaoUseCase(senha_admin)

    # --- Inicialização ---

    def inicializar(self) -> EstadoLoja:
        """Executa a carga inicial uma única vez por processo."""
        if self.estado.inicializado:
            return self.estado
        with self._trava_inicializacao:
            if not self.estado.inicializado:
                carga = self._inicializar.carregar()
                with self._trava:
                    self._inicializar.aplicar(self.estado, carga)
        return self.estado

    @property
    def status_conexao(self) -> StatusConexao:
        return self.inicializar().status_conexao

    # --- Consultas ---

    def listar_catalogo(self, filtro: Union[Category, str, None] = None) -> Union[List[Product], List[Article]]:
        return filtrar_catalogo(self.inicializar().produtos, filtro)

    def obter_produto(self, produto_id: str) -> Product:
        produto = self.inicializar().buscar_produto(produto_id)
        if not produto:
            raise ProdutoNaoEncontradoError(produto_id)
        return produto

    def listar_pedidos(self) -> List[Order]:
        return list(self.inicializar().pedidos)

    def obter_pedido(self, pedido_id: Optional[str]) -> Optional[Order]:
        if not pedido_id:
            return None
        return self.inicializar().buscar_pedido(pedido_id)

    def resumo_carrinho(self, sessao: SessaoCliente) -> Dict:
        return self._carrinho.resumo(sessao)

    def resumo_checkout(self, sessao: SessaoCliente, tipo_entrega: DeliveryType) -> Dict:
        return self._pedidos.resumo_checkout(sessao, tipo_entrega)

    def estatisticas(self) -> Dict:
        estado = self.inicializar()
        return estatisticas_painel(estado.produtos, estado.pedidos)

    # --- Comandos do carrinho ---

    def adicionar_ao_carrinho(self, sessao: SessaoCliente, produto_id: str) -> SessaoCliente:
        produto = self.obter_produto(produto_id)
        with self._trava:
            return self._carrinho.adicionar_item(sessao, produto)

    def atualizar_quantidade(self, sessao: SessaoCliente, produto_id: str, delta: int) -> SessaoCliente:
        with self._trava:
            return self._carrinho.atualizar_quantidade(sessao, produto_id, delta)

    def remover_do_carrinho(self, sessao: SessaoCliente, produto_id: str) -> SessaoCliente:
        with self._trava:
            return self._carrinho.remover_item(sessao, produto_id)

    # --- Checkout ---

    def criar_pedido(self, sessao: SessaoCliente, draft: OrderDraft) -> Order:
        return self._pedidos.executar(self.inicializar(), sessao, draft)

    # --- Comandos do painel admin ---

    def criar_produto(self, draft: ProductDraft) -> Product:
        return self._produtos_admin.criar_produto(self.inicializar(), draft)

    def editar_produto(self, produto_id: str, alteracoes: Dict) -> Product:
        return self._produtos_admin.editar_produto(self.inicializar(), produto_id, alteracoes)

    def definir_status_pedido(self, pedido_id: str, status: OrderStatus) -> Order:
        return self._pedidos_admin.definir_status(self.inicializar(), pedido_id, status)

    # --- Navegação ---

    def navegar(self, sessao: SessaoCliente, destino: Visao) -> SessaoCliente:
        return self._navegacao.navegar(sessao, destino)

    def login_admin(self, sessao: SessaoCliente, senha: str) -> SessaoCliente:
        return self._navegacao.login_admin(sessao, senha)

    def logout_admin(self, sessao: SessaoCliente) -> SessaoCliente:
        return self._navegacao.logout_admin(sessao)
