# barao/presentation/sessao.py
# Persiste a SessaoCliente (carrinho, tela atual, flag de admin) na sessão do Django.

from typing import List

from django.http import HttpRequest

from barao.core.controlador import ControladorLoja
from barao.core.entities import CartItem, SessaoCliente, Visao


class GerenciadorSessao:
    """
    Carrega e salva a SessaoCliente na sessão do Django (cookie assinado).
    Do carrinho só guardamos [ID do produto, quantidade]; os dados do
    produto são lidos do catálogo atual a cada requisição.
    """

    SESSION_KEY = 'sessao_barao'

    def __init__(self, request: HttpRequest, controlador: ControladorLoja):
        self.request = request
        self.controlador = controlador

    # --- Métodos de Persistência ---

    def carregar(self) -> SessaoCliente:
        raw = self.request.session.get(self.SESSION_KEY)
        if not raw:
            return SessaoCliente()

        try:
            visao = Visao(raw.get('visao', Visao.CATALOGO.value))
        except ValueError:
            visao = Visao.CATALOGO

        return SessaoCliente(
            carrinho=self._carregar_carrinho(raw.get('carrinho') or []),
            visao=visao,
            is_admin=bool(raw.get('is_admin', False)),
            ultimo_pedido_id=raw.get('ultimo_pedido_id'),
        )

    def _carregar_carrinho(self, linhas: List) -> List[CartItem]:
        itens = []
        estado = self.controlador.inicializar()
        for produto_id, quantidade in linhas:
            produto = estado.buscar_produto(str(produto_id))
            # Produtos que sumiram do catálogo saem do carrinho
            if produto and int(quantidade) > 0:
                itens.append(CartItem.from_product(produto, quantity=int(quantidade)))
        return itens

    def salvar(self, sessao: SessaoCliente) -> None:
        self.request.session[self.SESSION_KEY] = {
            'carrinho': [[item.id, item.quantity] for item in sessao.carrinho],
            'visao': sessao.visao.value,
            'is_admin': sessao.is_admin,
            'ultimo_pedido_id': sessao.ultimo_pedido_id,
        }
        self.request.session.modified = True

