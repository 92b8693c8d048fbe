class BaseErroCore(Exception):
    """Classe base para todas as exceções da Camada Core."""
    def __init__(self, message="Erro na aplicação."):
        self.message = message
        super().__init__(self.message)


class DadosInvalidosError(BaseErroCore):
    """Erro levantado quando campos obrigatórios não são informados."""
    def __init__(self, message="Por favor, preencha todos os campos obrigatórios.", campos=None):
        self.campos = campos or []
        super().__init__(message)

# ===============================================
# ERROS DE CONEXÃO E SINCRONIZAÇÃO
# ===============================================

class ErroConectividade(BaseErroCore):
    """Banco remoto inacessível ou consulta rejeitada."""
    def __init__(self, message="Não foi possível conectar ao banco de dados remoto."):
        super().__init__(message)


class ErroEscritaAdmin(BaseErroCore):
    """Falha na gravação remota de uma alteração do painel admin (nada foi alterado localmente)."""
    def __init__(self, message="Não foi possível salvar a alteração no banco de dados. Tente novamente."):
        super().__init__(message)


class FalhaSincronizacaoPedido(BaseErroCore):
    """
    Falha ao espelhar um pedido (ou a baixa de estoque) no banco remoto.
    Apenas registrada em log: o pedido local continua válido.
    """
    def __init__(self, pedido_id: str, causa: Exception):
        self.pedido_id = pedido_id
        self.causa = causa
        super().__init__(f"Pedido #{pedido_id} não sincronizado com o banco remoto: {causa}")

# ===============================================
# ERROS DE ENTIDADE
# ===============================================

class ItemNaoEncontradoError(BaseErroCore):
    """Erro levantado quando um item (genérico) não é encontrado."""
    def __init__(self, message="O item solicitado não foi encontrado."):
        super().__init__(message)


class ProdutoNaoEncontradoError(ItemNaoEncontradoError):
    def __init__(self, produto_id: str):
        self.produto_id = produto_id
        super().__init__(f"Produto ID {produto_id} não encontrado.")


class PedidoNaoEncontradoError(ItemNaoEncontradoError):
    def __init__(self, pedido_id: str):
        self.pedido_id = pedido_id
        super().__init__(f"Pedido ID {pedido_id} não encontrado.")


class StatusInvalidoError(BaseErroCore):
    """Erro levantado ao tentar definir um status de pedido não permitido."""
    def __init__(self, message="O status fornecido não é válido para um pedido."):
        super().__init__(message)

# ===============================================
# ERROS DE FLUXO
# ===============================================

class CarrinhoVazioError(BaseErroCore):
    """Erro levantado ao tentar fazer checkout com carrinho vazio."""
    def __init__(self, message="O carrinho de compras está vazio."):
        super().__init__(message)


class SenhaAdminInvalidaError(BaseErroCore):
    def __init__(self, message="Senha incorreta!"):
        super().__init__(message)


class TransicaoInvalidaError(BaseErroCore):
    """Navegação entre telas não permitida pela máquina de estados."""
    def __init__(self, origem, destino):
        self.origem = origem
        self.destino = destino
        super().__init__(f"Navegação de '{origem.value}' para '{destino.value}' não é permitida.")


class CepInvalidoError(BaseErroCore):
    def __init__(self, message="Por favor, insira um CEP válido com 8 dígitos."):
        super().__init__(message)


class CepNaoEncontradoError(BaseErroCore):
    def __init__(self, message="CEP não encontrado. Por favor, digite o endereço manualmente."):
        super().__init__(message)
