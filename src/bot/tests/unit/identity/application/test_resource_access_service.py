"""Unit tests for ResourceAccessService."""

from __future__ import annotations

from unittest.mock import AsyncMock, call, create_autospec

import pytest

from identity.application.exceptions import (
    EmailAlreadyLinkedError,
    ExternalAccountAlreadyLinkedError,
    IdentityLinkNotFoundError,
)
from identity.application.observability import ResourceAccessServiceProbe
from identity.application.services import ResourceAccessService
from identity.domain import ExternalSystem, ExternalSystemNotLinkedError, IdentityLink
from identity.infrastructure import InMemoryIdentityLinkRepository
from identity.ports.exceptions import ResourceAccessError
from shared_kernel.email_address import EmailAddress

CALENDARS = ["thalys@cal", "ariadne@cal", "room-a@cal"]
ALICE = EmailAddress("a@x.com")
BOB = EmailAddress("b@x.com")


@pytest.fixture
def repository() -> InMemoryIdentityLinkRepository:
    return InMemoryIdentityLinkRepository()


@pytest.fixture
def collection_access() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def mock_probe():
    return create_autospec(ResourceAccessServiceProbe, instance=True)


@pytest.fixture
def service(repository, collection_access, mock_probe, clock) -> ResourceAccessService:
    return ResourceAccessService(
        identity_repository=repository,
        collection_access=collection_access,
        collection_ids=CALENDARS,
        probe=mock_probe,
        clock=clock,
    )


class TestGrantAccess:
    @pytest.mark.asyncio
    async def test_grants_every_calendar_and_saves_link(
        self, service, repository, collection_access, mock_probe, now
    ):
        link = await service.grant_access(ExternalSystem.SLACK, "U123", ALICE)

        assert collection_access.grant_access.await_args_list == [
            call(calendar, ALICE) for calendar in CALENDARS
        ]
        stored = await repository.find_by_email(ALICE)
        assert stored == link
        assert stored.identity_for(ExternalSystem.SLACK).user_id == "U123"
        assert stored.created_at == now
        mock_probe.identity_linked.assert_called_once_with(
            email="a@x.com", system="slack", user_id="U123"
        )

    @pytest.mark.asyncio
    async def test_repeating_same_grant_only_regrants_access(
        self, service, repository, collection_access, mock_probe
    ):
        first = await service.grant_access(ExternalSystem.SLACK, "U123", ALICE)

        second = await service.grant_access(ExternalSystem.SLACK, "U123", ALICE)

        assert second == first
        assert collection_access.grant_access.await_count == 2 * len(CALENDARS)
        mock_probe.identity_already_linked.assert_called_once_with(
            email="a@x.com", system="slack"
        )

    @pytest.mark.asyncio
    async def test_email_linked_to_other_account_is_rejected(
        self, service, collection_access
    ):
        await service.grant_access(ExternalSystem.SLACK, "U123", ALICE)
        collection_access.reset_mock()

        with pytest.raises(EmailAlreadyLinkedError):
            await service.grant_access(ExternalSystem.SLACK, "U999", ALICE)

        collection_access.grant_access.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_account_linked_to_other_email_is_rejected(self, service, repository):
        await service.grant_access(ExternalSystem.SLACK, "U123", ALICE)

        with pytest.raises(ExternalAccountAlreadyLinkedError) as exc_info:
            await service.grant_access(ExternalSystem.SLACK, "U123", BOB)

        assert exc_info.value.linked_email == "a@x.com"
        assert await repository.find_by_email(BOB) is None

    @pytest.mark.asyncio
    async def test_existing_link_without_slack_gets_linked(self, repository, service, now):
        await repository.save(IdentityLink.create(ALICE, now=now))

        link = await service.grant_access(ExternalSystem.SLACK, "U123", ALICE)

        assert link.is_linked(ExternalSystem.SLACK)

    @pytest.mark.asyncio
    async def test_failed_grant_saves_nothing(
        self, service, repository, collection_access
    ):
        collection_access.grant_access.side_effect = ResourceAccessError(
            "ariadne@cal", "forbidden"
        )

        with pytest.raises(ResourceAccessError):
            await service.grant_access(ExternalSystem.SLACK, "U123", ALICE)

        assert await repository.find_all() == []


class TestUnlinkIdentity:
    @pytest.mark.asyncio
    async def test_unlink(self, service, repository):
        await service.grant_access(ExternalSystem.SLACK, "U123", ALICE)

        await service.unlink_identity(ALICE, ExternalSystem.SLACK)

        stored = await repository.find_by_email(ALICE)
        assert not stored.is_linked(ExternalSystem.SLACK)

    @pytest.mark.asyncio
    async def test_unknown_email(self, service):
        with pytest.raises(IdentityLinkNotFoundError):
            await service.unlink_identity(ALICE, ExternalSystem.SLACK)

    @pytest.mark.asyncio
    async def test_system_not_linked(self, service, repository, now):
        await repository.save(IdentityLink.create(ALICE, now=now))

        with pytest.raises(ExternalSystemNotLinkedError):
            await service.unlink_identity(ALICE, ExternalSystem.SLACK)


@pytest.mark.asyncio
async def test_get_link(service):
    assert await service.get_link(ALICE) is None
    await service.grant_access(ExternalSystem.SLACK, "U123", ALICE)
    assert (await service.get_link(ALICE)).email == ALICE
