# barao/core/politicas.py
"""
Políticas de escrita local/remota.

- LocalFirst: a alteração local SEMPRE é aplicada; o espelho remoto é
  tentado antes e suas falhas apenas são registradas (pedidos).
- RemoteGated: a alteração local só é aplicada depois que o banco remoto
  confirmou a gravação (edições do painel admin).
"""
import logging
from typing import Callable, Optional, Tuple, TypeVar

from barao.core.exceptions import ErroConectividade, ErroEscritaAdmin, FalhaSincronizacaoPedido

logger = logging.getLogger(__name__)

T = TypeVar('T')


class LocalFirst:
    """Escrita otimista: o resultado remoto nunca bloqueia a mutação local."""

    def executar(
        self,
        referencia: str,
        escrita_remota: Optional[Callable[[], None]],
        mutacao_local: Callable[[], T],
    ) -> Tuple[T, Optional[FalhaSincronizacaoPedido]]:
        falha = None
        if escrita_remota is not None:
            try:
                escrita_remota()
            except ErroConectividade as e:
                falha = FalhaSincronizacaoPedido(referencia, e)
                logger.warning(falha.message)
        return mutacao_local(), falha


class RemoteGated:
    """Escrita confirmada: sem sucesso remoto, nada muda localmente."""

    def executar(
        self,
        escrita_remota: Callable[[], T],
        mutacao_local: Callable[[T], None],
    ) -> T:
        try:
            resultado = escrita_remota()
        except ErroConectividade as e:
            logger.error(f"Gravação remota do painel admin falhou: {e.message}")
            raise ErroEscritaAdmin(
                f"Não foi possível salvar a alteração no banco de dados: {e.message}"
            ) from e
        mutacao_local(resultado)
        return resultado
