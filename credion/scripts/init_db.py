import asyncio
from credion.database import engine, Base

# Import all models to ensure they are registered in Base.metadata
from credion.matter.models import Matter
from credion.reports.models import Report, ReportIngestion, UserReport
from credion.asic.models import Entity, TaxDebt, AsicExtract, Address, Director, Shareholder, ShareStructure, ExtractDocument
from credion.courts.models import Case, CaseParty, CaseHearing, CaseDocument, CaseApplication, CaseJudgment, Insolvency, InsolvencyParty
from credion.ppsr.models import PpsrSearch, PpsrItem, AddressForService, Grantor, SecuredParty

async def init_models():
    async with engine.begin() as conn:
        # await conn.run_sync(Base.metadata.drop_all) # Optional: Reset DB
        await conn.run_sync(Base.metadata.create_all)
    print("Database tables created.")

if __name__ == "__main__":
    asyncio.run(init_models())
