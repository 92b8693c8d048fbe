import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from barao.core.calculos import buscar_artigo
from barao.core.constants import FILTRO_DICAS, FILTRO_TODOS
from barao.core.entities import DeliveryType, Visao
from barao.core.exceptions import (
    BaseErroCore, CarrinhoVazioError, CepInvalidoError, CepNaoEncontradoError, DadosInvalidosError,
    ErroConectividade, ErroEscritaAdmin, ItemNaoEncontradoError, SenhaAdminInvalidaError,
    StatusInvalidoError, TransicaoInvalidaError,
)
from barao.infrastructure.instances import busca_cep, obter_controlador
from .serializers import (
    AdicionarItemSerializer, ArticleSerializer, CarrinhoSerializer, CheckoutSerializer,
    EstadoSerializer, NavegacaoSerializer, OrderSerializer, ProductSerializer, QuantidadeSerializer,
)
from .sessao import GerenciadorSessao

logger = logging.getLogger(__name__)


# ====================================================================
# TRADUÇÃO DE ERROS DO CORE PARA HTTP
# ====================================================================

STATUS_POR_ERRO = [
    (DadosInvalidosError, status.HTTP_400_BAD_REQUEST),
    (CarrinhoVazioError, status.HTTP_400_BAD_REQUEST),
    (StatusInvalidoError, status.HTTP_400_BAD_REQUEST),
    (CepInvalidoError, status.HTTP_400_BAD_REQUEST),
    (SenhaAdminInvalidaError, status.HTTP_401_UNAUTHORIZED),
    (ItemNaoEncontradoError, status.HTTP_404_NOT_FOUND),
    (CepNaoEncontradoError, status.HTTP_404_NOT_FOUND),
    (TransicaoInvalidaError, status.HTTP_409_CONFLICT),
    (ErroEscritaAdmin, status.HTTP_502_BAD_GATEWAY),
    (ErroConectividade, status.HTTP_502_BAD_GATEWAY),
]


def resposta_erro(erro: BaseErroCore) -> Response:
    """Converte uma exceção do Core em resposta JSON com o status adequado."""
    codigo = next(
        (codigo for classe, codigo in STATUS_POR_ERRO if isinstance(erro, classe)),
        status.HTTP_400_BAD_REQUEST,
    )
    corpo = {'message': erro.message}
    if isinstance(erro, DadosInvalidosError) and erro.campos:
        corpo['campos'] = erro.campos
    return Response(corpo, status=codigo)


class LojaAPIView(APIView):
    """
    Base das views da loja: resolve o controlador e a sessão do visitante.
    """

    def initial(self, request, *args, **kwargs):
        super().initial(request, *args, **kwargs)
        self.controlador = obter_controlador()
        self.gerenciador_sessao = GerenciadorSessao(request, self.controlador)
        self.sessao = self.gerenciador_sessao.carregar()

    def salvar_sessao(self):
        self.gerenciador_sessao.salvar(self.sessao)

    def resumo_carrinho(self):
        return CarrinhoSerializer(self.controlador.resumo_carrinho(self.sessao)).data


# ====================================================================
# ESTADO GLOBAL E NAVEGAÇÃO
# ====================================================================

class EstadoLojaAPIView(LojaAPIView):
    """Tela atual, status do banco remoto, itens no carrinho e flag de admin."""

    def get(self, request):
        dados = {
            'visao': self.sessao.visao.value,
            'status_conexao': self.controlador.status_conexao.value,
            'total_itens': self.sessao.total_itens,
            'is_admin': self.sessao.is_admin,
        }
        return Response(EstadoSerializer(dados).data)


class NavegacaoAPIView(LojaAPIView):

    def post(self, request):
        serializer = NavegacaoSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            self.controlador.navegar(self.sessao, Visao(serializer.validated_data['destino']))
        except TransicaoInvalidaError as e:
            return resposta_erro(e)
        self.salvar_sessao()
        return Response({'visao': self.sessao.visao.value})


# ====================================================================
# CATÁLOGO
# ====================================================================

class CatalogoAPIView(LojaAPIView):
    """
    Lista o cardápio. ?categoria=<categoria|todos|dicas>; 'dicas' devolve os artigos.
    """

    def get(self, request):
        filtro = request.query_params.get('categoria', FILTRO_TODOS)
        try:
            itens = self.controlador.listar_catalogo(filtro)
        except ValueError:
            return Response({'message': f"Categoria '{filtro}' inválida."}, status=status.HTTP_400_BAD_REQUEST)

        if filtro == FILTRO_DICAS:
            return Response({'tipo': 'artigos', 'itens': ArticleSerializer(itens, many=True).data})

        serializer = ProductSerializer(itens, many=True, context={'quantidades': self.sessao.quantidades()})
        return Response({'tipo': 'produtos', 'itens': serializer.data})


class ProdutoDetalheAPIView(LojaAPIView):

    def get(self, request, produto_id):
        try:
            produto = self.controlador.obter_produto(produto_id)
        except ItemNaoEncontradoError as e:
            return resposta_erro(e)
        return Response(ProductSerializer(produto, context={'quantidades': self.sessao.quantidades()}).data)


class ArtigoAPIView(APIView):
    """Conteúdo completo de um artigo da aba de dicas."""

    def get(self, request, artigo_id):
        artigo = buscar_artigo(artigo_id)
        if not artigo:
            return Response({'message': 'Artigo não encontrado.'}, status=status.HTTP_404_NOT_FOUND)
        return Response(ArticleSerializer(artigo).data)


# ====================================================================
# CARRINHO
# ====================================================================

class CarrinhoAPIView(LojaAPIView):
    """
    API View para o carrinho do visitante (guardado na sessão).
    """

    def get(self, request):
        return Response(self.resumo_carrinho())

    def post(self, request):
        """Adiciona uma unidade do produto ao carrinho."""
        serializer = AdicionarItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            self.controlador.adicionar_ao_carrinho(self.sessao, serializer.validated_data['produto_id'])
        except ItemNaoEncontradoError as e:
            return resposta_erro(e)
        self.salvar_sessao()
        return Response(self.resumo_carrinho(), status=status.HTTP_201_CREATED)


class ItemCarrinhoAPIView(LojaAPIView):

    def patch(self, request, produto_id):
        """Soma 'delta' à quantidade; linhas que chegam a zero são removidas."""
        serializer = QuantidadeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.controlador.atualizar_quantidade(self.sessao, produto_id, serializer.validated_data['delta'])
        self.salvar_sessao()
        return Response(self.resumo_carrinho())

    def delete(self, request, produto_id):
        self.controlador.remover_do_carrinho(self.sessao, produto_id)
        self.salvar_sessao()
        return Response(self.resumo_carrinho())


# ====================================================================
# CHECKOUT E PEDIDO
# ====================================================================

class CheckoutAPIView(LojaAPIView):
    """
    GET: totais do checkout (?delivery_type=delivery|pickup).
    POST: finaliza o pedido.
    """

    def get(self, request):
        try:
            tipo = DeliveryType(request.query_params.get('delivery_type', DeliveryType.DELIVERY.value))
        except ValueError:
            return Response({'message': 'Tipo de entrega inválido.'}, status=status.HTTP_400_BAD_REQUEST)
        resumo = self.controlador.resumo_checkout(self.sessao, tipo)
        return Response({
            'subtotal': f"{resumo['subtotal']:.2f}",
            'taxa_entrega': f"{resumo['taxa_entrega']:.2f}",
            'total': f"{resumo['total']:.2f}",
        })

    def post(self, request):
        serializer = CheckoutSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            pedido = self.controlador.criar_pedido(self.sessao, serializer.to_order_draft())
        except (CarrinhoVazioError, DadosInvalidosError) as e:
            return resposta_erro(e)

        self.salvar_sessao()
        return Response(
            {'message': 'Pedido criado com sucesso!', 'pedido': OrderSerializer(pedido).data},
            status=status.HTTP_201_CREATED,
        )


class PedidoSucessoAPIView(LojaAPIView):
    """Último pedido do visitante, com o primeiro nome do cliente."""

    def get(self, request):
        pedido = self.controlador.obter_pedido(self.sessao.ultimo_pedido_id)
        if not pedido:
            return Response({'message': 'Nenhum pedido recente.'}, status=status.HTTP_404_NOT_FOUND)
        primeiro_nome = pedido.customer.name.split(' ')[0] if pedido.customer.name else ''
        return Response({'primeiro_nome': primeiro_nome, 'pedido': OrderSerializer(pedido).data})


class BuscaCepAPIView(APIView):
    """Preenche o endereço de entrega a partir do CEP."""

    def get(self, request, cep):
        try:
            endereco = busca_cep.buscar_endereco(cep)
        except (CepInvalidoError, CepNaoEncontradoError, ErroConectividade) as e:
            return resposta_erro(e)
        return Response(endereco)
