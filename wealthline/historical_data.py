"""Historical annual market dataset.

Values are annual decimal (stock return, bond return, CPI inflation) keyed by
year. Stocks are S&P 500 total return; bonds are 10-year Treasury return.
The bundled dataset covers 1970-2024; the 2024 row is an estimate.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

HISTORICAL_ANNUAL_RETURNS: Final[dict[int, tuple[float, float, float]]] = {
    1970: (0.0401, 0.0812, 0.0574),
    1971: (0.1431, 0.0920, 0.0440),
    1972: (0.1898, 0.0543, 0.0327),
    1973: (-0.1466, 0.0394, 0.0621),
    1974: (-0.2647, 0.0569, 0.1103),
    1975: (0.3720, 0.0919, 0.0913),
    1976: (0.2384, 0.1175, 0.0586),
    1977: (-0.0718, 0.0471, 0.0651),
    1978: (0.0656, 0.0741, 0.0761),
    1979: (0.1844, 0.0578, 0.1135),
    1980: (0.3242, 0.0367, 0.1355),
    1981: (-0.0491, 0.1540, 0.1025),
    1982: (0.2155, 0.3209, 0.0619),
    1983: (0.2256, 0.0235, 0.0323),
    1984: (0.0627, 0.1543, 0.0439),
    1985: (0.3165, 0.3097, 0.0356),
    1986: (0.1847, 0.2422, 0.0186),
    1987: (0.0525, 0.0270, 0.0368),
    1988: (0.1661, 0.0853, 0.0413),
    1989: (0.3169, 0.1811, 0.0480),
    1990: (-0.0310, 0.0818, 0.0540),
    1991: (0.3047, 0.1792, 0.0424),
    1992: (0.0762, 0.0805, 0.0303),
    1993: (0.1008, 0.1517, 0.0296),
    1994: (0.0132, -0.0773, 0.0261),
    1995: (0.3758, 0.2341, 0.0281),
    1996: (0.2296, 0.0043, 0.0298),
    1997: (0.3336, 0.0959, 0.0233),
    1998: (0.2858, 0.1302, 0.0155),
    1999: (0.2104, -0.0751, 0.0219),
    2000: (-0.0910, 0.1660, 0.0338),
    2001: (-0.1189, 0.0551, 0.0283),
    2002: (-0.2210, 0.1515, 0.0159),
    2003: (0.2869, 0.0238, 0.0227),
    2004: (0.1088, 0.0481, 0.0268),
    2005: (0.0491, 0.0293, 0.0339),
    2006: (0.1579, 0.0197, 0.0323),
    2007: (0.0549, 0.0984, 0.0285),
    2008: (-0.3700, 0.2025, 0.0385),
    2009: (0.2646, -0.0822, -0.0036),
    2010: (0.1506, 0.0854, 0.0164),
    2011: (0.0211, 0.1675, 0.0316),
    2012: (0.1600, 0.0297, 0.0207),
    2013: (0.3239, -0.0901, 0.0150),
    2014: (0.1369, 0.1086, 0.0076),
    2015: (0.0138, 0.0087, 0.0012),
    2016: (0.1196, 0.0069, 0.0131),
    2017: (0.2183, 0.0241, 0.0213),
    2018: (-0.0438, 0.0002, 0.0244),
    2019: (0.3157, 0.0850, 0.0181),
    2020: (0.1840, 0.1104, 0.0124),
    2021: (0.2889, -0.0243, 0.0470),
    2022: (-0.1811, -0.1731, 0.0801),
    2023: (0.2643, 0.0297, 0.0410),
    2024: (0.2500, 0.0450, 0.0335),
}

FIRST_YEAR: Final[int] = min(HISTORICAL_ANNUAL_RETURNS)
LAST_YEAR: Final[int] = max(HISTORICAL_ANNUAL_RETURNS)


@dataclass(frozen=True, slots=True)
class SeriesStats:
    mean: float
    minimum: float
    maximum: float


def historical_stats() -> dict[str, SeriesStats]:
    """Mean, min and max of each series over the whole dataset."""
    rows = list(HISTORICAL_ANNUAL_RETURNS.values())
    out: dict[str, SeriesStats] = {}
    for idx, name in enumerate(("stocks", "bonds", "inflation")):
        series = [row[idx] for row in rows]
        out[name] = SeriesStats(mean=sum(series) / len(series), minimum=min(series), maximum=max(series))
    return out
