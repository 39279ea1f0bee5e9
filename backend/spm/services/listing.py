# Overview: Shared date filters for the ventas/compras listings.

from __future__ import annotations

from datetime import date

from ..time_utils import day_bounds, month_bounds
from ..validation import ValidationError


def apply_period_filter(query, column, *, fecha: date | None = None, mes: int | None = None, anio: int | None = None):
    """
    Restrict `column` to one day (fecha) or one month (mes + anio).

    fecha wins when both are given; a month without a year (or the reverse)
    is ignored, matching the listing contract.
    """
    if fecha is not None:
        start, end = day_bounds(fecha)
    elif mes is not None and anio is not None:
        if not 1 <= mes <= 12:
            raise ValidationError("mes debe estar entre 1 y 12")
        if not 1 <= anio <= 9999:
            raise ValidationError("año inválido")
        try:
            start, end = month_bounds(anio, mes)
        except ValueError:
            # December of year 9999 has no end bound
            raise ValidationError("año inválido")
    else:
        return query
    return query.filter(column >= start, column < end)
