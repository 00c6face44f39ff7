"""
Projects app package for the Encore crowdfunding backend.

An artist's campaign is a `Project` with priced reward `Tier` rows and a
team of `ProjectMember` users.  Funding counters on projects and tiers
are written only by the payments ledger; this app exposes them
read-only together with the contributor data project teams manage.
"""
