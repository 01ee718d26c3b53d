"""
POSBILL Core
==============
Shared kernel for the billing engines: outcomes and rejection reasons,
the event bus, the clock, settings and money primitives.
"""
