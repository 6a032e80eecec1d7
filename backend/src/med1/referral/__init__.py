"""Referral links, reward milestones and lead registration.

A lead registered through a referral link bumps the link's counter by
one and unlocks every LEADS reward whose threshold the new count meets.
The registration service lives in `med1.referral.service`.
"""

from med1.referral.models import Page, PatientReferral, ReferralReward, RewardUnlockType

__all__ = ["Page", "PatientReferral", "ReferralReward", "RewardUnlockType"]
