"""Preference-rating engine for picking a baby name.

Names are presented in small rounds; the names a user picks win an
ELO-style comparison against the rest of the round, and the resulting
affinity ratings drive ranking and the selection of future rounds.
"""

__version__ = "0.1.0"
