# barao/presentation/views_auth.py
"""
Views para o acesso ao painel administrativo (senha compartilhada).
"""
from rest_framework.response import Response

from barao.core.exceptions import SenhaAdminInvalidaError
from .serializers import LoginAdminSerializer
from .views import LojaAPIView, resposta_erro


class LoginAdminAPIView(LojaAPIView):

    def post(self, request):
        serializer = LoginAdminSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            self.controlador.login_admin(self.sessao, serializer.validated_data['senha'])
        except SenhaAdminInvalidaError as e:
            return resposta_erro(e)
        self.salvar_sessao()
        return Response({'message': 'Bem-vindo ao painel!', 'visao': self.sessao.visao.value})


class LogoutAdminAPIView(LojaAPIView):

    def post(self, request):
        self.controlador.logout_admin(self.sessao)
        self.salvar_sessao()
        return Response({'visao': self.sessao.visao.value})
