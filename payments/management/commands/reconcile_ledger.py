from django.core.management.base import BaseCommand, CommandError

from payments.ledger import reconcile_project
from projects.models import Project


class Command(BaseCommand):
    help = "Checks project funding, backer and tier slot counters against recorded contributions."

    def add_arguments(self, parser):
        parser.add_argument("--project", type=int, help="Only check this project id.")
        parser.add_argument(
            "--repair",
            action="store_true",
            help="Overwrite drifted counters with the values derived from contributions.",
        )

    def handle(self, *args, **options):
        projects = Project.objects.all().order_by("id")
        if options.get("project"):
            projects = projects.filter(pk=options["project"])
            if not projects.exists():
                raise CommandError(f"Project {options['project']} does not exist.")

        drifted = 0
        for project in projects:
            report = reconcile_project(project, repair=options["repair"])
            if report.flagged_contributions:
                ids = ", ".join(str(i) for i in report.flagged_contributions)
                self.stdout.write(self.style.WARNING(
                    f"Project {project.pk}: contributions flagged for manual review: {ids}"
                ))
            if not report.has_drift:
                continue
            drifted += 1
            self.stdout.write(self.style.ERROR(
                f"Project {project.pk} '{project.title}': funding {report.recorded_funding} "
                f"(ledger {report.expected_funding}), backers {report.recorded_backers} "
                f"(ledger {report.expected_backers})"
            ))
            for tier_id, (expected, recorded) in report.tier_drift.items():
                self.stdout.write(f" - Tier {tier_id}: claimed {recorded} (ledger {expected})")
            if report.repaired:
                self.stdout.write(self.style.SUCCESS(f" - Repaired project {project.pk}"))

        if drifted:
            self.stdout.write(f"{drifted} project(s) with drift.")
        else:
            self.stdout.write(self.style.SUCCESS("All project counters match the ledger."))
