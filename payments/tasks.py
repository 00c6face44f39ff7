"""
Celery tasks for the payments app.

These tasks keep side effects off the webhook's critical path.  After a
contribution commits, ``send_contribution_notifications`` emails the
backer and the project's stakeholders; it is bounded by a soft time
limit and gives up (logged) when exceeded.  ``reconcile_ledger`` runs
on the beat schedule and compares every project's counters against
its contributions.
"""
from __future__ import annotations

import logging

from celery import shared_task
from celery.exceptions import SoftTimeLimitExceeded
from django.conf import settings

from projects.models import Project
from .ledger import reconcile_project
from .notifications import dispatch_contribution_emails

logger = logging.getLogger(__name__)


@shared_task(soft_time_limit=settings.NOTIFICATION_TASK_TIME_LIMIT_SECS)
def send_contribution_notifications(contribution_id: int) -> dict:
    """Email the backer and stakeholders about a recorded contribution.

    Args:
        contribution_id: Primary key of the committed ``Contribution``.

    Returns:
        The per-address results of ``dispatch_contribution_emails``, or an
        empty dict if the time limit was hit.
    """
    try:
        return dispatch_contribution_emails(contribution_id)
    except SoftTimeLimitExceeded:
        logger.error("Notification dispatch for contribution %s timed out; abandoned", contribution_id)
        return {}


@shared_task
def reconcile_ledger(project_id: int | None = None, repair: bool = False) -> dict:
    """Check funding and slot counters against the contribution ledger.

    Args:
        project_id: Limit the check to one project.  Defaults to all
            projects that are not drafts.
        repair: Overwrite drifted counters with the values derived from
            the ledger.

    Returns:
        A mapping of project id to a short summary for projects with drift.
    """
    projects = Project.objects.exclude(status=Project.STATUS_DRAFT)
    if project_id is not None:
        projects = Project.objects.filter(pk=project_id)

    drifted = {}
    for project in projects.iterator():
        report = reconcile_project(project, repair=repair)
        if report.has_drift or report.flagged_contributions:
            drifted[project.pk] = {
                "expected_funding": str(report.expected_funding),
                "recorded_funding": str(report.recorded_funding),
                "expected_backers": report.expected_backers,
                "recorded_backers": report.recorded_backers,
                "tier_drift": {str(k): list(v) for k, v in report.tier_drift.items()},
                "flagged_contributions": report.flagged_contributions,
                "repaired": report.repaired,
            }
    return drifted
