"""JPL binary planetary ephemeris: header, mapped store, Chebyshev evaluation, bodies."""
