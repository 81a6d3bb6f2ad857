"""
Unit conversions between the internal physics units (ft, kt, ft/min, NM)
and the display units (m, km/h, m/min, km).

Nothing outside this module multiplies by a conversion factor.
"""

# Constants
KTS_TO_KPH = 1.852
FT_TO_M = 0.3048
NM_TO_KM = 1.852
M_TO_FT = 1 / FT_TO_M
KPH_TO_KTS = 1 / KTS_TO_KPH
FPM_TO_MPM = FT_TO_M  # ft/min to m/min


def knots_to_kph(knots):
    return knots * KTS_TO_KPH

def kph_to_knots(kph):
    return kph / KTS_TO_KPH

def feet_to_meters(feet):
    return feet * FT_TO_M

def meters_to_feet(meters):
    return meters / FT_TO_M

def nm_to_km(nm):
    return nm * NM_TO_KM

def km_to_nm(km):
    return km / NM_TO_KM

def fpm_to_mpm(fpm):
    return fpm * FPM_TO_MPM

def mpm_to_fpm(mpm):
    return mpm / FPM_TO_MPM

def fpm_to_fps(fpm):
    return fpm / 60.0
