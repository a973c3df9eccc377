# src/flatconf/core/hashing.py
"""
Hashing canônico da configuração resolvida.

O hash gerado representa a **identidade** da configuração efetiva e é
exposto como `Config.fingerprint`, permitindo:
    - comparar builds produzidos em processos ou máquinas diferentes
    - registrar em logs qual configuração estava ativa
    - detectar mudanças sem expor valores sensíveis

Política de hashing (v1):
    - Serialização JSON canônica
    - Ordenação estável de chaves
    - Separadores compactos (sem espaços supérfluos)
    - Codificação UTF-8
    - Algoritmo SHA-256

Invariantes:
    - Configurações com o mesmo conteúdo produzem o mesmo hash,
      independentemente da ordem das chaves
    - O valor gerado é sempre uma string hexadecimal de 64 caracteres

Limites explícitos:
    - Não persiste o hash
    - Não inclui informações de ambiente, fontes ou prioridades
"""

import hashlib
import json
from typing import Mapping


def compute_config_hash(values: Mapping[str, str]) -> str:
    """
    Gera um hash determinístico de uma configuração plana.

    Args:
        values (Mapping[str, str]): Configuração resolvida.

    Returns:
        str: Hash SHA-256 hexadecimal da configuração.

    Raises:
        TypeError: Se o objeto fornecido não for um mapeamento.
    """

    if not isinstance(values, Mapping):
        raise TypeError(
            f"Config para hashing deve ser mapping, recebido: {type(values).__name__}"
        )

    canonical_json = json.dumps(
        dict(values),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )

    return hashlib.sha256(canonical_json.encode("utf-8")).hexdigest()
