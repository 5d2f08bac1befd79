"""
The `constants` module defines the mathematical, time and Earth rotation constants used by framejax.
"""

from jax.numpy import pi as PI

# Mathematical Constants
"""
Constant to convert degrees to radians. Equal to 2pi/360. Units: *rad/deg*
"""
DEG2RAD = 2.0 * PI / 360.0

"""
Constant to convert radians to degrees. Equal to 360/2pi. Units: *deg/rad*
"""
RAD2DEG = 360.0 / (PI * 2.0)

"""
Constant to convert arcseconds to radians. Equal to 2pi/(360*3600). Units: *rad/as*
"""
AS2RAD = 2.0 * PI / 360.0 / 3600.0

"""
Constant to convert radians to arcseconds. Equal to (360*3600)/(2pi). Units: *as/rad*
"""
RAD2AS = 360.0 * 3600.0 / PI / 2.0

"""
Constant to convert milliarcseconds to radians. Units: *rad/mas*
"""
MAS2RAD = AS2RAD * 1.0e-3

# Time Constants

"""
Offset between Julian Date and Modified Julian Date. Units: *days*
"""
JD_MJD_OFFSET = 2400000.5

"""
Julian Date of the J2000.0 epoch (2000-01-01 12:00:00 TT). Units: *days*
"""
JD2000 = 2451545.0

"""
Modified Julian Date of the J2000.0 epoch (2000-01-01 12:00:00 TT). Units: *days*
"""
MJD2000 = 51544.5

"""
Length of a day. Units: *s*
"""
DAYSEC = 86400.0

"""
Days per Julian century. Units: *days*
"""
DAYS_PER_CENTURY = 36525.0

"""
Offset TT - TAI, constant by definition. Units: *s*

References:

1. G. Petit and B. Luzum, *IERS Conventions (2010)*, IERS Technical Note 36, 2010
"""
TT_TAI = 32.184

"""
Rate of TCG relative to TT, L_G = 1 - d(TT)/d(TCG). Units: *dimensionless*

References:

1. IAU 2000 Resolution B1.9
"""
ELG = 6.969290134e-10

"""
Rate of TCB relative to TDB, L_B = 1 - d(TDB)/d(TCB). Units: *dimensionless*

References:

1. IAU 2006 Resolution B3
"""
ELB = 1.550519768e-8

"""
TDB - TCB offset at the 1977-01-01 reference epoch. Units: *s*
"""
TDB0 = -6.55e-5

"""
Modified Julian Date of the 1977-01-01 reference epoch of TCG and TCB. Units: *days*
"""
MJD1977 = 43144.0

"""
TT Modified Julian Date of 1977-01-01T00:00:32.184 TT, the instant at which
TT, TCG and TCB coincide. Units: *days*
"""
MJD1977_TT = MJD1977 + TT_TAI / DAYSEC

# Physical Constants

"""
Nominal angular velocity of the Earth. Units: *rad/s*

References:

1. D. Vallado, *Fundamentals of Astrodynamics and Applications (4th Ed.)*, 2010
"""
OMEGA_EARTH = 7.292115146706979e-5
