"""
Redução de imagens enviadas pelo painel admin antes de gravá-las no produto.
"""
import asyncio
import base64
import io
import logging

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

LARGURA_MAXIMA = 800
ALTURA_MAXIMA = 800
QUALIDADE_JPEG = 70


def _data_url(conteudo: bytes, content_type: str) -> str:
    return f"data:{content_type};base64,{base64.b64encode(conteudo).decode('ascii')}"


def _reduzir(conteudo: bytes) -> bytes:
    with Image.open(io.BytesIO(conteudo)) as imagem:
        imagem = imagem.convert('RGB')
        # thumbnail preserva a proporção e nunca amplia
        imagem.thumbnail((LARGURA_MAXIMA, ALTURA_MAXIMA))
        saida = io.BytesIO()
        imagem.save(saida, format='JPEG', quality=QUALIDADE_JPEG)
    return saida.getvalue()


async def reduzir_imagem(conteudo: bytes, content_type: str = 'application/octet-stream') -> str:
    """
    Reduz para no máximo 800x800, JPEG qualidade 70, e devolve uma data URL.
    Se a imagem não puder ser decodificada (ou passar do limite de pixels do
    Pillow), devolve os bytes originais.
    """
    try:
        reduzida = await asyncio.to_thread(_reduzir, conteudo)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        logger.warning(f"Não foi possível reduzir a imagem, mantendo o original: {e}")
        return _data_url(conteudo, content_type)
    return _data_url(reduzida, 'image/jpeg')
