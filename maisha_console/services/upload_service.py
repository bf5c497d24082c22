# maisha_console/services/upload_service.py
import logging
import random
import time
from dataclasses import dataclass, field

from pydantic import ValidationError

from maisha_console.core.api_client import ApiClient, ApiError
from maisha_console.repositories.member_repo import MemberRepository, parse_date
from maisha_console.schemas.member import MemberWrite
from maisha_console.services.csv_service import format_phone_for_lookup, parse_phone_csv
from maisha_console.services.member_service import info_gender_code
from maisha_console.services.scope import FormError

logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    success: int = 0
    failed: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.success + len(self.failed)


def bulk_national_id() -> str:
    return f"ID{int(time.time() * 1000)}{random.randint(0, 999)}"


class UploadService:
    """
    Bulk member import from a CSV of phone numbers.

    Each phone is looked up (local "0..." numbers as "250..."), then added
    to the selected group. Rows are independent: one failure is recorded
    and the import moves on.
    """

    def __init__(self, repo: MemberRepository):
        self.repo = repo

    async def import_members(
        self,
        api: ApiClient,
        text: str,
        group_id: int | None,
    ) -> ImportResult:
        """
        Raises:
            FormError: no group selected, or the file holds no phone numbers.
        """
        if group_id is None:
            raise FormError("Please select a group first")
        phones = parse_phone_csv(text)
        if not phones:
            raise FormError("No phone numbers found in the file")

        result = ImportResult()
        for phone in phones:
            lookup_phone = format_phone_for_lookup(phone)
            try:
                info = await self.repo.customer_info(api, lookup_phone)
                if info is None:
                    raise ApiError("No customer found")
                await self.repo.create(
                    api,
                    MemberWrite(
                        first_name=info.first_name or "Unknown",
                        last_name=info.last_name or "User",
                        birth_date=parse_date(info.birth_date[:10]),
                        gender_code=info_gender_code(info),
                        is_active=True,
                        national_id=bulk_national_id(),
                        phone=lookup_phone,
                        group_id=group_id,
                    ),
                )
                result.success += 1
            except ApiError as e:
                logger.warning("Import of %s failed: %s", phone, e.message)
                result.failed.append(phone)
            except ValidationError as e:
                logger.warning("Import of %s failed: invalid member data (%s)", phone, e)
                result.failed.append(phone)

        logger.info(
            "Bulk import into group %s: %d added, %d failed",
            group_id,
            result.success,
            len(result.failed),
        )
        return result
