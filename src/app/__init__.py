"""App: núcleo da exposição de APIs.

Subpastas:
- domain/: Api, Group, Descriptor, ServiceOptions
- services/: pipeline (introspecção, validação, grupos, descritores, handler)
- protocols/: contrato do adaptador de rotas
- clients/: clientes local e remoto
- bootstrap/: inicialização de logging e validação de settings
- observability/: correlation_id por requisição

Padrão: app executa; api adapta; config configura; utils apoia.
"""
