"""med1 - practice management backend.

Referral links, lead capture with reward milestones, and the profile,
upload and navigation endpoints behind the dashboard.
"""

__version__ = "0.1.0"
