"""Built-in TAI-UTC history.

Rows are ``(MJD, TAI-UTC [s], drift reference MJD, drift rate [s/day])``.
The pre-1972 rows carry the rate offsets used to steer UTC before the
introduction of whole leap seconds.

Source: IERS Bulletin C / USNO ``tai-utc.dat`` (1960-01-01 through
2017-01-01).
"""

# fmt: off
BUILTIN_LEAP_SECONDS: tuple[tuple[float, float, float, float], ...] = (
    (36934.0,  1.4178180, 37300.0, 0.0012960),  # 1960-01-01
    (37300.0,  1.4228180, 37300.0, 0.0012960),  # 1961-01-01
    (37512.0,  1.3728180, 37300.0, 0.0012960),  # 1961-08-01
    (37665.0,  1.8458580, 37665.0, 0.0011232),  # 1962-01-01
    (38334.0,  1.9458580, 37665.0, 0.0011232),  # 1963-11-01
    (38395.0,  3.2401300, 38761.0, 0.0012960),  # 1964-01-01
    (38486.0,  3.3401300, 38761.0, 0.0012960),  # 1964-04-01
    (38639.0,  3.4401300, 38761.0, 0.0012960),  # 1964-09-01
    (38761.0,  3.5401300, 38761.0, 0.0012960),  # 1965-01-01
    (38820.0,  3.6401300, 38761.0, 0.0012960),  # 1965-03-01
    (38942.0,  3.7401300, 38761.0, 0.0012960),  # 1965-07-01
    (39004.0,  3.8401300, 38761.0, 0.0012960),  # 1965-09-01
    (39126.0,  4.3131700, 39126.0, 0.0025920),  # 1966-01-01
    (39887.0,  4.2131700, 39126.0, 0.0025920),  # 1968-02-01
    (41317.0, 10.0, 0.0, 0.0),  # 1972-01-01
    (41499.0, 11.0, 0.0, 0.0),  # 1972-07-01
    (41683.0, 12.0, 0.0, 0.0),  # 1973-01-01
    (42048.0, 13.0, 0.0, 0.0),  # 1974-01-01
    (42413.0, 14.0, 0.0, 0.0),  # 1975-01-01
    (42778.0, 15.0, 0.0, 0.0),  # 1976-01-01
    (43144.0, 16.0, 0.0, 0.0),  # 1977-01-01
    (43509.0, 17.0, 0.0, 0.0),  # 1978-01-01
    (43874.0, 18.0, 0.0, 0.0),  # 1979-01-01
    (44239.0, 19.0, 0.0, 0.0),  # 1980-01-01
    (44786.0, 20.0, 0.0, 0.0),  # 1981-07-01
    (45151.0, 21.0, 0.0, 0.0),  # 1982-07-01
    (45516.0, 22.0, 0.0, 0.0),  # 1983-07-01
    (46247.0, 23.0, 0.0, 0.0),  # 1985-07-01
    (47161.0, 24.0, 0.0, 0.0),  # 1988-01-01
    (47892.0, 25.0, 0.0, 0.0),  # 1990-01-01
    (48257.0, 26.0, 0.0, 0.0),  # 1991-01-01
    (48804.0, 27.0, 0.0, 0.0),  # 1992-07-01
    (49169.0, 28.0, 0.0, 0.0),  # 1993-07-01
    (49534.0, 29.0, 0.0, 0.0),  # 1994-07-01
    (50083.0, 30.0, 0.0, 0.0),  # 1996-01-01
    (50630.0, 31.0, 0.0, 0.0),  # 1997-07-01
    (51179.0, 32.0, 0.0, 0.0),  # 1999-01-01
    (53736.0, 33.0, 0.0, 0.0),  # 2006-01-01
    (54832.0, 34.0, 0.0, 0.0),  # 2009-01-01
    (56109.0, 35.0, 0.0, 0.0),  # 2012-07-01
    (57204.0, 36.0, 0.0, 0.0),  # 2015-07-01
    (57754.0, 37.0, 0.0, 0.0),  # 2017-01-01
)
# fmt: on
