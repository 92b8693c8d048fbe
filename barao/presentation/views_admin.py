# barao/presentation/views_admin.py
"""
Views para o painel de administração.
"""
from datetime import datetime, timezone
from typing import Optional

from asgiref.sync import async_to_sync
from django.utils.dateparse import parse_datetime
from rest_framework import status
from rest_framework.exceptions import PermissionDenied
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.response import Response

from barao.core.entities import OrderStatus
from barao.core.exceptions import (
    DadosInvalidosError, ErroEscritaAdmin, ItemNaoEncontradoError, StatusInvalidoError,
)
from barao.infrastructure.imagens import reduzir_imagem
from .serializers import OrderSerializer, ProductAdminSerializer, ProductDraftSerializer, StatusPedidoSerializer
from .views import LojaAPIView, resposta_erro


class AdminAPIView(LojaAPIView):
    """
    Base das views do painel: sem a flag de admin na sessão, responde 403.
    """

    def initial(self, request, *args, **kwargs):
        super().initial(request, *args, **kwargs)
        if not self.sessao.is_admin:
            raise PermissionDenied("Você não tem permissão para acessar o painel.")


def _imagem_enviada(serializer) -> Optional[str]:
    """Reduz o arquivo enviado e devolve a data URL (ou None se não houve upload)."""
    arquivo = serializer.validated_data.get('imagem_arquivo')
    if not arquivo:
        return None
    return async_to_sync(reduzir_imagem)(arquivo.read(), arquivo.content_type or 'application/octet-stream')


def _momento_do_pedido(pedido) -> datetime:
    """Data do pedido com fuso; datas sem fuso (pedidos antigos) contam como UTC."""
    try:
        momento = parse_datetime(pedido.date)
    except ValueError:
        momento = None
    if momento is None:
        return datetime.min.replace(tzinfo=timezone.utc)
    if momento.tzinfo is None:
        momento = momento.replace(tzinfo=timezone.utc)
    return momento


# ====================================================================
# DASHBOARD
# ====================================================================

class PainelAdminAPIView(LojaAPIView):
    """
    Dashboard: faturamento, ranking de mais vendidos, produtos e pedidos.
    Sem a flag de admin não há conteúdo a exibir (204).
    """

    def get(self, request):
        if not self.sessao.is_admin:
            return Response(status=status.HTTP_204_NO_CONTENT)

        estatisticas = self.controlador.estatisticas()
        ranking = [
            {
                'produto_id': linha['produto'].id,
                'nome': linha['produto'].name,
                'quantidade': linha['quantidade'],
            }
            for linha in estatisticas['ranking']
        ]
        pedidos = sorted(self.controlador.listar_pedidos(), key=_momento_do_pedido, reverse=True)
        return Response({
            'faturamento': f"{estatisticas['faturamento']:.2f}",
            'total_pedidos': estatisticas['total_pedidos'],
            'ranking': ranking,
            'produtos': ProductAdminSerializer(self.controlador.listar_catalogo(), many=True).data,
            'pedidos': OrderSerializer(pedidos, many=True).data,
        })


# ====================================================================
# GERENCIAMENTO DE PRODUTOS
# ====================================================================

class ProdutosAdminAPIView(AdminAPIView):
    parser_classes = [JSONParser, MultiPartParser, FormParser]

    def post(self, request):
        serializer = ProductDraftSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            produto = self.controlador.criar_produto(serializer.to_draft(_imagem_enviada(serializer)))
        except ErroEscritaAdmin as e:
            return resposta_erro(e)
        return Response(ProductAdminSerializer(produto).data, status=status.HTTP_201_CREATED)


class ProdutoAdminAPIView(AdminAPIView):
    parser_classes = [JSONParser, MultiPartParser, FormParser]

    def patch(self, request, produto_id):
        serializer = ProductDraftSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            produto = self.controlador.editar_produto(
                produto_id, serializer.to_alteracoes(_imagem_enviada(serializer))
            )
        except (ItemNaoEncontradoError, DadosInvalidosError, ErroEscritaAdmin) as e:
            return resposta_erro(e)
        return Response(ProductAdminSerializer(produto).data)


# ====================================================================
# GERENCIAMENTO DE PEDIDOS
# ====================================================================

class StatusPedidoAdminAPIView(AdminAPIView):

    def patch(self, request, pedido_id):
        serializer = StatusPedidoSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            pedido = self.controlador.definir_status_pedido(
                pedido_id, OrderStatus(serializer.validated_data['status'])
            )
        except (StatusInvalidoError, ItemNaoEncontradoError, ErroEscritaAdmin) as e:
            return resposta_erro(e)
        return Response(OrderSerializer(pedido).data)
