"""Diesel Log - suivi des achats de gasoil par camion / diesel purchase records per lorry."""

__version__ = "0.1.0"
