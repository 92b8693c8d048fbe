"""
Management command para aguardar o banco remoto estar disponível.
"""
import time

from django.core.management.base import BaseCommand, CommandError

from barao.core.exceptions import ErroConectividade
from barao.infrastructure.instances import criar_controlador


class Command(BaseCommand):
    """Pausa a execução até o banco remoto responder (ou as tentativas acabarem)."""

    def add_arguments(self, parser):
        parser.add_argument('--tentativas', type=int, default=30)
        parser.add_argument('--intervalo', type=float, default=1.0)

    def handle(self, *args, **options):
        self.stdout.write('Aguardando pelo banco remoto...')
        gateway = criar_controlador().gateway

        for _ in range(options['tentativas']):
            try:
                gateway.buscar_produtos()
            except ErroConectividade:
                self.stdout.write(f"Banco remoto indisponível, aguardando {options['intervalo']} segundo(s)...")
                time.sleep(options['intervalo'])
            else:
                self.stdout.write(self.style.SUCCESS('Banco remoto disponível!'))
                return

        raise CommandError('Banco remoto não respondeu dentro do limite de tentativas.')
