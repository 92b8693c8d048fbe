from django.core.management.base import BaseCommand, CommandError

from barao.core.constants import produtos_iniciais
from barao.core.exceptions import ErroConectividade
from barao.infrastructure.instances import criar_controlador


class Command(BaseCommand):
    help = 'Carrega o cardápio padrão na tabela de produtos do banco remoto (apenas se estiver vazia)'

    def add_arguments(self, parser):
        parser.add_argument(
            '--forcar', action='store_true',
            help='Insere o cardápio mesmo que já existam produtos cadastrados.',
        )

    def handle(self, *args, **options):
        self.stdout.write('Verificando produtos no banco remoto...')
        gateway = criar_controlador().gateway

        try:
            existentes = gateway.buscar_produtos()
        except ErroConectividade as e:
            raise CommandError(e.message)

        if existentes and not options['forcar']:
            self.stdout.write(self.style.WARNING(
                f'Já existem {len(existentes)} produtos cadastrados; nada foi alterado.'
            ))
            return

        for produto in produtos_iniciais():
            try:
                criado = gateway.inserir_produto(produto.to_draft())
            except ErroConectividade as e:
                self.stdout.write(self.style.ERROR(f'Falha ao criar "{produto.name}": {e.message}'))
                continue
            self.stdout.write(self.style.SUCCESS(f'Criado produto "{criado.name}" (ID {criado.id})'))

        self.stdout.write(self.style.SUCCESS('Dados iniciais carregados com sucesso!'))
