# Overview: Query-string parsing shared by the ventas/compras listing routes.

from __future__ import annotations

from ..time_utils import parse_iso_date
from ..validation import ValidationError


def _int_arg(args, *names: str) -> int | None:
    for name in names:
        raw = args.get(name)
        if raw is None or raw.strip() == "":
            continue
        try:
            return int(raw.strip())
        except ValueError:
            raise ValidationError(f"{names[0]} debe ser un número entero")
    return None


def period_filters(args) -> dict:
    """
    Read `fecha` (YYYY-MM-DD) or `mes` + `año` from request.args.

    `anio` is accepted as an ASCII spelling of `año`.
    """
    raw_fecha = args.get("fecha")
    try:
        fecha = parse_iso_date(raw_fecha)
    except ValueError:
        raise ValidationError("fecha debe tener el formato YYYY-MM-DD")

    return {
        "fecha": fecha,
        "mes": _int_arg(args, "mes"),
        "anio": _int_arg(args, "año", "anio"),
    }
