"""
Cache local do catálogo (fallback quando o banco remoto está fora do ar).
Usa o framework de cache do Django, alias 'local' (FileBasedCache por padrão).
"""
import logging
from typing import List, Optional

from django.core.cache import caches

from barao.core.entities import Product
from barao.core.ports import ICacheLocal
from barao.infrastructure.mappers import linhas_para_produtos, produtos_para_linhas

logger = logging.getLogger(__name__)


class CacheLocalProdutos(ICacheLocal):

    CHAVE = 'produtos'

    def __init__(self, alias: str = 'local'):
        self.alias = alias

    @property
    def cache(self):
        return caches[self.alias]

    def salvar_produtos(self, produtos: List[Product]) -> None:
        # Sem expiração: o snapshot vale até ser sobrescrito.
        self.cache.set(self.CHAVE, produtos_para_linhas(produtos), timeout=None)

    def carregar_produtos(self) -> Optional[List[Product]]:
        linhas = self.cache.get(self.CHAVE)
        if linhas is None:
            return None
        try:
            return linhas_para_produtos(linhas)
        except (KeyError, ValueError, TypeError) as e:
            logger.warning(f"Snapshot local do catálogo ilegível, ignorando: {e}")
            return None
