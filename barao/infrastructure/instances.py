"""
Módulo de inicialização das instâncias da loja.
Deve ser importado somente depois que o Django estiver configurado.
"""
import threading

from django.conf import settings

from barao.core.controlador import ControladorLoja
from .cache_local import CacheLocalProdutos
from .gateways import SupabaseGateway, ViaCepGateway

_trava = threading.Lock()
_controlador = None

# Instâncias globais dos gateways
busca_cep = ViaCepGateway()


def criar_controlador() -> ControladorLoja:
    gateway = SupabaseGateway(
        url=settings.SUPABASE_URL,
        chave=settings.SUPABASE_ANON_KEY,
        timeout=settings.SUPABASE_TIMEOUT,
    )
    return ControladorLoja(
        gateway=gateway,
        cache_local=CacheLocalProdutos(),
        senha_admin=settings.ADMIN_PASSWORD,
    )


def obter_controlador() -> ControladorLoja:
    """Controlador único por processo, criado no primeiro acesso."""
    global _controlador
    with _trava:
        if _controlador is None:
            _controlador = criar_controlador()
    return _controlador
