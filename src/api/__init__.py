"""API: camada de borda HTTP.

Responsabilidades:
- Registrar as rotas declarativas do núcleo em um APIRouter (FastAPI)
- Ler corpos (JSON, bytes, stream) e escrever respostas com checksum
- Traduzir ApiError no corpo de erro padronizado

Subpastas:
- routes/: FastApiRouter e endpoint genérico

NÃO PODE conter: inicialização de grupos, validação de parâmetros, regras de negócio.
"""
