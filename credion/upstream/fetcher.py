from typing import Optional

from credion.reports.classifier import ReportClassification
from credion.reports.models import ReportCategory
from credion.upstream.alares import AlaresClient, FetchedReport
from credion.upstream.ppsr import PpsrCloudClient


class ReportFetcher:
    """Routes a classified report request to the upstream that produces it."""

    def __init__(self, alares: Optional[AlaresClient] = None, ppsr: Optional[PpsrCloudClient] = None):
        self.alares = alares or AlaresClient()
        self.ppsr = ppsr or PpsrCloudClient()

    async def create_and_fetch(self, abn: str, classification: ReportClassification) -> FetchedReport:
        if classification.category == ReportCategory.PPSR.value:
            return await self.ppsr.create_and_fetch(abn, classification)
        return await self.alares.create_and_fetch(abn, classification)


def get_report_fetcher() -> ReportFetcher:
    return ReportFetcher()
