"""Lead records captured from referral links."""

from med1.leads.models import LEAD_INITIAL_STATUS, Lead, LeadStatus

__all__ = ["LEAD_INITIAL_STATUS", "Lead", "LeadStatus"]
