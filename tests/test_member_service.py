from datetime import datetime, timedelta, timezone

import pytest

from application.dto import MemberUpdateDTO
from application.services.member_service import MemberApplicationService
from domain.common.exceptions import (
    DomainValidationException,
    EmailAlreadyInUseException,
    MemberNotFoundException,
    NicknameHistoryNotFoundException,
)
from infrastructure.models import MemberModel, MemberNicknameModel


pytestmark = pytest.mark.asyncio


async def test_get_member_formats_birth_date(uow_factory, seed, member_factory):
    await seed(member_factory(42))
    member = await MemberApplicationService(uow_factory).get_member(42)
    assert member.member_num == 42
    assert member.member_birth_date == "1990.01.02"
    assert member.member_status == "active"


async def test_get_member_missing(uow_factory):
    with pytest.raises(MemberNotFoundException):
        await MemberApplicationService(uow_factory).get_member(404)


async def test_nickname_only_update_appends_one_history_record(uow_factory, seed, member_factory, fetch_all):
    await seed(member_factory(42))
    service = MemberApplicationService(uow_factory)

    updated = await service.update_member(42, MemberUpdateDTO(member_nickname="새닉네임"))

    assert updated.member_nickname == "새닉네임"
    assert updated.member_email == "user42@example.com"
    assert updated.member_phone == "01012345678"
    history = await fetch_all(MemberNicknameModel, member_num=42)
    assert [h.new_nickname for h in history] == ["새닉네임"]


async def test_unchanged_nickname_does_not_append_history(uow_factory, seed, member_factory, fetch_all):
    await seed(member_factory(42))
    await MemberApplicationService(uow_factory).update_member(
        42, MemberUpdateDTO(member_nickname="nick42", marketing_consent=True)
    )
    assert await fetch_all(MemberNicknameModel, member_num=42) == []
    (row,) = await fetch_all(MemberModel, member_num=42)
    assert row.marketing_consent is True


async def test_update_rejects_invalid_fields_before_any_write(uow_factory, seed, member_factory, fetch_all):
    await seed(member_factory(42))
    service = MemberApplicationService(uow_factory)

    with pytest.raises(DomainValidationException) as exc_info:
        await service.update_member(
            42, MemberUpdateDTO(member_nickname="ok", member_phone="02012345678")
        )
    assert exc_info.value.field == "member_phone"

    (row,) = await fetch_all(MemberModel, member_num=42)
    assert row.member_nickname == "nick42"
    assert await fetch_all(MemberNicknameModel, member_num=42) == []


async def test_update_rejects_non_boolean_consent(uow_factory, seed, member_factory):
    await seed(member_factory(42))
    with pytest.raises(DomainValidationException) as exc_info:
        await MemberApplicationService(uow_factory).update_member(
            42, MemberUpdateDTO(marketing_consent="yes")
        )
    assert exc_info.value.message == "marketing_consent must be true or false"


async def test_email_must_be_unique_among_other_members(uow_factory, seed, member_factory):
    await seed(member_factory(42), member_factory(7))
    service = MemberApplicationService(uow_factory)

    with pytest.raises(EmailAlreadyInUseException):
        await service.update_member(42, MemberUpdateDTO(member_email="user7@example.com"))

    # 提交自己当前的邮箱不算冲突
    same = await service.update_member(42, MemberUpdateDTO(member_email="user42@example.com"))
    assert same.member_email == "user42@example.com"


async def test_update_missing_member(uow_factory):
    with pytest.raises(MemberNotFoundException):
        await MemberApplicationService(uow_factory).update_member(
            404, MemberUpdateDTO(member_nickname="x")
        )


async def test_empty_update_returns_current_record(uow_factory, seed, member_factory):
    await seed(member_factory(42))
    member = await MemberApplicationService(uow_factory).update_member(42, MemberUpdateDTO())
    assert member.member_nickname == "nick42"


async def test_nickname_history_newest_first(uow_factory, seed, member_factory):
    now = datetime.now(timezone.utc)
    await seed(
        member_factory(42),
        MemberNicknameModel(member_num=42, new_nickname="first", change_date=now - timedelta(days=2)),
        MemberNicknameModel(member_num=42, new_nickname="third", change_date=now),
        MemberNicknameModel(member_num=42, new_nickname="second", change_date=now - timedelta(days=1)),
        MemberNicknameModel(member_num=7, new_nickname="other", change_date=now),
    )
    history = await MemberApplicationService(uow_factory).get_nickname_history(42)
    assert [h.new_nickname for h in history] == ["third", "second", "first"]


async def test_empty_nickname_history_is_not_found(uow_factory, seed, member_factory):
    await seed(member_factory(42))
    with pytest.raises(NicknameHistoryNotFoundException):
        await MemberApplicationService(uow_factory).get_nickname_history(42)


async def test_dto_timestamps_serialize_as_utc_z():
    from application.dto import NicknameHistoryDTO

    naive = NicknameHistoryDTO(new_nickname="n", change_date=datetime(2024, 5, 1, 9, 30))
    assert naive.model_dump(mode="json")["change_date"] == "2024-05-01T09:30:00Z"

    seoul = timezone(timedelta(hours=9))
    aware = NicknameHistoryDTO(new_nickname="n", change_date=datetime(2024, 5, 1, 18, 30, tzinfo=seoul))
    assert aware.model_dump_json() == '{"new_nickname":"n","change_date":"2024-05-01T09:30:00Z"}'
