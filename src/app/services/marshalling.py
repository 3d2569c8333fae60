"""Conversão entre lista posicional de argumentos e objeto nomeado.

Valores além dos parâmetros declarados ("rest"/overflow) são preservados:
- lista → objeto: chave igual ao índice (`"2"`, `"3"`, ...)
- objeto → lista: chaves não declaradas anexadas na ordem de iteração
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any


def to_named_object(args: Sequence[Any], names: Sequence[str]) -> dict[str, Any]:
    """Associa `args[i]` a `names[i]`; excedentes usam o índice como chave.

    Exemplo:
        to_named_object([1, 2, 3], ["a", "b"]) == {"a": 1, "b": 2, "2": 3}
    """
    named: dict[str, Any] = {}
    for index, value in enumerate(args):
        key = names[index] if index < len(names) else str(index)
        named[key] = value
    return named


def to_positional(payload: Mapping[str, Any], names: Sequence[str]) -> list[Any]:
    """Inverso de to_named_object.

    Parâmetros declarados primeiro (ausentes viram None), depois os valores
    das chaves não declaradas, na ordem de iteração do payload.

    Exemplo:
        to_positional({"a": 1, "b": 2, "2": 3, "extra": 4}, ["a", "b"]) == [1, 2, 3, 4]
    """
    declared = set(names)
    args = [payload.get(name) for name in names]
    args.extend(value for key, value in payload.items() if key not in declared)
    return args
