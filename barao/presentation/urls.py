"""
Define as rotas da API REST da loja: estado/navegação, catálogo, carrinho,
checkout, acesso ao painel e painel administrativo.
"""
from django.urls import path

from . import views, views_admin, views_auth

urlpatterns = [
    # ====================================================================
    # 1. ESTADO GLOBAL E NAVEGAÇÃO
    # ====================================================================
    path('estado/', views.EstadoLojaAPIView.as_view(), name='estado'),
    path('navegar/', views.NavegacaoAPIView.as_view(), name='navegar'),

    # ====================================================================
    # 2. CATÁLOGO
    # ====================================================================
    path('catalogo/', views.CatalogoAPIView.as_view(), name='catalogo'),
    path('produtos/<str:produto_id>/', views.ProdutoDetalheAPIView.as_view(), name='detalhe_produto'),
    path('artigos/<str:artigo_id>/', views.ArtigoAPIView.as_view(), name='detalhe_artigo'),

    # ====================================================================
    # 3. CARRINHO, CHECKOUT E PEDIDO
    # ====================================================================
    path('carrinho/', views.CarrinhoAPIView.as_view(), name='carrinho'),
    path('carrinho/itens/<str:produto_id>/', views.ItemCarrinhoAPIView.as_view(), name='item_carrinho'),
    path('checkout/', views.CheckoutAPIView.as_view(), name='checkout'),
    path('pedidos/ultimo/', views.PedidoSucessoAPIView.as_view(), name='pedido_sucesso'),
    path('cep/<str:cep>/', views.BuscaCepAPIView.as_view(), name='busca_cep'),

    # ====================================================================
    # 4. ACESSO AO PAINEL
    # ====================================================================
    path('admin/login/', views_auth.LoginAdminAPIView.as_view(), name='admin_login'),
    path('admin/logout/', views_auth.LogoutAdminAPIView.as_view(), name='admin_logout'),

    # ====================================================================
    # 5. PAINEL ADMINISTRATIVO
    # ====================================================================
    path('admin/painel/', views_admin.PainelAdminAPIView.as_view(), name='admin_painel'),
    path('admin/produtos/', views_admin.ProdutosAdminAPIView.as_view(), name='admin_produtos'),
    path('admin/produtos/<str:produto_id>/', views_admin.ProdutoAdminAPIView.as_view(), name='admin_editar_produto'),
    path('admin/pedidos/<str:pedido_id>/status/', views_admin.StatusPedidoAdminAPIView.as_view(),
         name='admin_status_pedido'),
]
