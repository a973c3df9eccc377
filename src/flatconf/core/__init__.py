# src/flatconf/core/__init__.py
"""
Core do flatconf: o motor de resolução.

Este pacote reúne as responsabilidades com invariantes reais:
    - merge        → agregação determinística de fontes por prioridade
    - placeholders → substituição recursiva de placeholders, com detecção de ciclo
    - accessor     → leitura tipada e imutável da configuração resolvida
    - builder      → orquestração do build (fontes → merge → resolução)
    - errors       → hierarquia de exceções
    - hashing      → identidade canônica da configuração resolvida

Princípios fundamentais:
    - Nenhuma decisão silenciosa: todo comportamento é explícito e testado
    - Build em passagem única, síncrona; leitura concorrente segura depois

Limites explícitos:
    - Não lê arquivos nem ambiente diretamente (isso pertence a `flatconf.sources`)
"""
