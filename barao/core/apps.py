# barao/core/apps.py

from django.apps import AppConfig

class CoreConfig(AppConfig):
    # O nome completo do path da aplicação
    name = 'barao.core'
    label = 'core'
    verbose_name = 'Entidades e Lógica da Loja (Core)'

    # A camada Core não tem modelos de banco de dados: o estado vive no
    # ControladorLoja e é persistido pelo gateway remoto e pelo cache local.
    default_auto_field = 'django.db.models.BigAutoField'
