"""Server <-> client record mapping."""

from datetime import date

import pytest

from maisha_console.repositories.group_repo import group_from_server
from maisha_console.repositories.member_repo import (
    PLACEHOLDER_BIRTH_DATE,
    member_from_server,
    member_to_server,
    parse_date,
)
from maisha_console.schemas.deduction import MonthlyDeduction
from maisha_console.schemas.member import (
    MemberWrite,
    gender_code,
    gender_label,
    normalize_gender_code,
)
from maisha_console.schemas.report import MyReport
from maisha_console.schemas.wallet import Wallet
from maisha_console.schemas.withdrawal import WithdrawalRequest

SERVER_MEMBER = {
    "id": 12,
    "first_name": "Aline",
    "last_name": "Uwase",
    "birth_date": "1990-04-02T00:00:00.000Z",
    "gender": "FEMALE",
    "is_active": True,
    "national_id": "1199080012345678",
    "phone": "250788000111",
    "group_id": 3,
    "created_at": "2024-05-01T10:00:00Z",
}


class TestMemberMapping:
    def test_from_server(self):
        m = member_from_server(SERVER_MEMBER)
        assert m.id == "12"
        assert m.full_name == "Aline Uwase"
        assert m.gender == "Female"
        assert m.gender_code == "FEMALE"
        assert m.birth_date == date(1990, 4, 2)
        assert m.group_id == "3"

    def test_camel_case_client_shape(self):
        dumped = member_from_server(SERVER_MEMBER).model_dump(by_alias=True)
        assert dumped["fullName"] == "Aline Uwase"
        assert dumped["genderCode"] == "FEMALE"
        assert dumped["groupId"] == "3"

    @pytest.mark.parametrize("gender", ["MALE", "FEMALE", "OTHER", "UNKNOWN", None])
    def test_round_trip_preserves_writable_fields(self, gender):
        server = {**SERVER_MEMBER, "gender": gender}
        payload = member_to_server(MemberWrite.from_member(member_from_server(server)))

        assert payload["first_name"] == server["first_name"]
        assert payload["last_name"] == server["last_name"]
        assert payload["gender"] == normalize_gender_code(gender)
        assert payload["is_active"] == server["is_active"]
        assert payload["national_id"] == server["national_id"]
        assert payload["phone"] == server["phone"]
        assert payload["group_id"] == server["group_id"]
        assert payload["birth_date"] == "1990-04-02"

    def test_label_is_used_when_no_code(self):
        payload = member_to_server(MemberWrite(gender="Male", group_id="1"))
        assert payload["gender"] == "MALE"
        assert payload["group_id"] == 1

    def test_missing_names_map_to_empty(self):
        m = member_from_server({"id": 1, "group_id": 2})
        assert m.full_name == ""
        assert m.gender == "Other"
        assert m.is_active is False


class TestGender:
    def test_bijection_on_defined_codes(self):
        for code in ("MALE", "FEMALE"):
            assert gender_code(gender_label(code)) == code

    @pytest.mark.parametrize("code", ["OTHER", "X", "", None])
    def test_other_codes_collapse(self, code):
        assert gender_label(code) == "Other"
        assert gender_code(gender_label(code)) == "OTHER"

    def test_idempotent(self):
        assert gender_label(gender_code(gender_label("X"))) == "Other"


@pytest.mark.asyncio
async def test_create_without_birth_date_sends_placeholder(api, backend):
    from maisha_console.repositories.member_repo import MemberRepository

    backend.on("POST", "/api/members", {**SERVER_MEMBER, "birth_date": "2000-01-01"})
    await MemberRepository().create(api, MemberWrite(first_name="A", last_name="B", group_id="3"))
    assert backend.body("POST", "/api/members")["birth_date"] == PLACEHOLDER_BIRTH_DATE.isoformat()


def test_group_from_server():
    g = group_from_server({"id": 5, "name": "Ikimina", "description": None, "created_at": "2024-01-02T03:04:05Z"})
    assert g.id == "5"
    assert g.description == ""
    assert g.member_count == 0
    assert g.model_dump(by_alias=True)["memberCount"] == 0


@pytest.mark.parametrize(
    "value,expected",
    [("2024-05-01", date(2024, 5, 1)), ("2024-05-01T10:00:00Z", date(2024, 5, 1)), ("", None), ("garbage", None)],
)
def test_parse_date(value, expected):
    assert parse_date(value) == expected


class TestPartialBackendRecords:
    def test_null_wallet_fields_take_defaults(self):
        wallet = Wallet.model_validate({"id": 1, "balance": None, "currency": None})
        assert wallet.member_id is None
        assert wallet.balance == 0.0
        assert wallet.currency == "RWF"

    def test_withdrawal_without_amount_or_id(self):
        w = WithdrawalRequest.model_validate({"status": None, "member": {"first_name": None}})
        assert w.id is None
        assert w.amount == 0.0
        assert w.status == "pending"
        assert w.member.first_name == ""

    def test_deduction_with_only_an_id(self):
        d = MonthlyDeduction.model_validate({"id": 4, "is_active": None})
        assert (d.name, d.amount, d.account_number, d.is_active) == ("", 0.0, "", True)

    def test_report_with_null_lists(self):
        report = MyReport.model_validate({"wallet": None, "transactions": None})
        assert report.wallet is None
        assert report.transactions == []

    def test_unknown_fields_are_kept(self):
        wallet = Wallet.model_validate({"member_id": 3, "owner": "x"})
        assert wallet.model_extra == {"owner": "x"}
