"""Fixed-point inverse DCT for baseline JPEG blocks.

Coefficients and quantisation tables are in zigzag order, as they come out of
the entropy decoder. Arithmetic uses 11 fractional bits throughout.
"""

from __future__ import annotations

from collections.abc import Sequence

_ISHIFT = 11


def _ifix(value: float) -> int:
    return int(value * (1 << _ISHIFT) + 0.5)


def _imult(a: int, b: int) -> int:
    return (a * b) >> _ISHIFT


_S22 = _ifix(2 * 0.382683432)
_C22 = _ifix(2 * 0.923879532)
_IC4 = _ifix(1 / 0.707106781)

_ZIGZAG = (
    0, 1, 5, 6, 14, 15, 27, 28,
    2, 4, 7, 13, 16, 26, 29, 42,
    3, 8, 12, 17, 25, 30, 41, 43,
    9, 11, 18, 24, 31, 40, 44, 53,
    10, 19, 23, 32, 39, 45, 52, 54,
    20, 22, 33, 38, 46, 51, 55, 60,
    21, 34, 37, 47, 50, 56, 59, 61,
    35, 36, 48, 49, 57, 58, 62, 63,
)

# zigzag positions grouped per pass, in the butterfly's input order
_PASS_ORDER = (
    0, 2, 3, 9, 10, 20, 21, 35,
    14, 16, 25, 31, 39, 46, 50, 57,
    5, 7, 12, 18, 23, 33, 37, 48,
    27, 29, 41, 44, 52, 55, 59, 62,
    15, 26, 30, 40, 45, 51, 56, 58,
    1, 4, 8, 11, 19, 22, 34, 36,
    28, 42, 43, 53, 54, 60, 61, 63,
    6, 13, 17, 24, 32, 38, 47, 49,
)

_AAIDCT = tuple(_ifix(c) for c in (
    0.3535533906, 0.4903926402, 0.4619397663, 0.4157348062,
    0.3535533906, 0.2777851165, 0.1913417162, 0.0975451610,
))


def _check(name: str, values: Sequence[int]) -> None:
    if len(values) < 64:
        raise ValueError(f"{name} needs 64 entries, got {len(values)}")


def scale_quant_table(table: Sequence[int]) -> list[int]:
    """Fold the IDCT scale factors into a zigzag-ordered quantisation table."""
    _check("quantisation table", table)
    scaled = [0] * 64
    for i in range(8):
        for j in range(8):
            n = _ZIGZAG[i * 8 + j]
            scaled[n] = table[n] * _imult(_AAIDCT[i], _AAIDCT[j])
    return scaled


def _butterfly(t0, t1, t2, t3, t4, t5, t6, t7):
    tmp0 = t0 + t1
    t1 = t0 - t1
    tmp2 = t2 - t3
    t3 = t2 + t3
    tmp2 = _imult(tmp2, _IC4) - t3
    tmp3 = tmp0 + t3
    t3 = tmp0 - t3
    tmp1 = t1 + tmp2
    tmp2 = t1 - tmp2
    tmp4 = t4 - t7
    t7 = t4 + t7
    tmp5 = t5 + t6
    t6 = t5 - t6
    tmp6 = tmp5 - t7
    t7 = tmp5 + t7
    tmp5 = _imult(tmp6, _IC4)
    tmp6 = _imult(tmp4 + t6, _S22)
    tmp4 = _imult(tmp4, _C22 - _S22) + tmp6
    t6 = _imult(t6, _C22 + _S22) - tmp6
    t6 = t6 - t7
    t5 = tmp5 - t6
    t4 = tmp4 - t5
    return (tmp3 + t7, tmp1 + t6, tmp2 + t5, t3 + t4,
            t3 - t4, tmp2 - t5, tmp1 - t6, tmp3 - t7)


def idct(
    coeffs: Sequence[int],
    quant: Sequence[int],
    offset: float = 128.5,
    max_index: int = 64,
) -> list[int]:
    """Inverse-transform one 8x8 block into 64 row-major samples.

    ``quant`` is a table from ``scale_quant_table``. ``offset`` is the level
    shift added to every sample (128.5 for luma, 0.5 for chroma). A
    ``max_index`` of 1 means only the DC coefficient is present.
    """
    _check("coefficient block", coeffs)
    _check("quantisation table", quant)
    shift = _ifix(offset)

    if max_index == 1:
        value = (shift + coeffs[0] * quant[0]) >> _ISHIFT
        return [value] * 64

    tmp = [0] * 64
    for column in range(8):
        positions = _PASS_ORDER[column * 8:column * 8 + 8]
        t0, t5, t2, t7, t1, t4, t3, t6 = (coeffs[p] * quant[p] for p in positions)
        if column == 0:
            t0 += shift
        if t1 == t2 == t3 == t4 == t5 == t6 == t7 == 0:
            results = (t0,) * 8
        else:
            results = _butterfly(t0, t1, t2, t3, t4, t5, t6, t7)
        tmp[column::8] = results

    out: list[int] = []
    for row in range(8):
        values = tmp[row * 8:row * 8 + 8]
        if not any(values[1:]):
            out += [values[0] >> _ISHIFT] * 8
        else:
            out += [v >> _ISHIFT for v in _butterfly(*values)]
    return out