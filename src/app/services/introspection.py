"""Extração dos nomes de parâmetros declarados de uma função exposta."""

from __future__ import annotations

import inspect
from typing import Any

from utils.errors import UnsupportedSignatureError

# Parâmetros que não podem ser passados posicionalmente
_UNSUPPORTED_KINDS = {
    inspect.Parameter.VAR_POSITIONAL: "variadic parameter",
    inspect.Parameter.VAR_KEYWORD: "variadic keyword parameter",
    inspect.Parameter.KEYWORD_ONLY: "keyword-only parameter",
}


def param_names(fn: Any) -> list[str]:
    """Retorna os nomes dos parâmetros posicionais de `fn`, em ordem.

    Valores default não alteram o nome. Métodos ligados não incluem `self`.

    Args:
        fn: Função, método, partial ou objeto chamável.

    Returns:
        Lista ordenada de nomes (vazia para funções sem parâmetros).

    Raises:
        UnsupportedSignatureError: Se `fn` não é chamável, não tem assinatura
            inspecionável ou declara parâmetros variádicos/keyword-only.
    """
    if not callable(fn):
        msg = f"unsupported function {fn!r}"
        raise UnsupportedSignatureError(msg)
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError) as exc:
        msg = f"unsupported function {fn!r}: {exc}"
        raise UnsupportedSignatureError(msg) from exc

    names: list[str] = []
    for parameter in signature.parameters.values():
        reason = _UNSUPPORTED_KINDS.get(parameter.kind)
        if reason is not None:
            msg = f"unsupported function {_describe(fn, signature)}: {reason} {parameter}"
            raise UnsupportedSignatureError(msg)
        names.append(parameter.name)
    return names


def _describe(fn: Any, signature: inspect.Signature) -> str:
    name = getattr(fn, "__qualname__", None) or type(fn).__name__
    return f"{name}{signature}"
