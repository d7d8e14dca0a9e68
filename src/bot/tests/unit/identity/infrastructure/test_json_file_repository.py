"""Unit tests for JsonFileIdentityLinkRepository."""

import json
from datetime import UTC, datetime

import pytest

from identity.domain import ExternalSystem, IdentityLink
from identity.infrastructure import JsonFileIdentityLinkRepository
from identity.ports.exceptions import IdentityLinkRepositoryError
from shared_kernel.email_address import EmailAddress

T0 = datetime(2030, 1, 7, 9, 0, tzinfo=UTC)
ALICE = EmailAddress("a@x.com")


def _linked(email: EmailAddress, user_id: str) -> IdentityLink:
    link = IdentityLink.create(email, now=T0)
    link.link(ExternalSystem.SLACK, user_id, now=T0)
    return link


@pytest.fixture
def links_file(tmp_path):
    return tmp_path / "data" / "identity_links.json"


class TestJsonFileIdentityLinkRepository:
    @pytest.mark.asyncio
    async def test_missing_file_is_empty(self, links_file):
        repository = JsonFileIdentityLinkRepository(links_file)

        assert await repository.find_all() == []
        assert not links_file.exists()

    @pytest.mark.asyncio
    async def test_save_writes_file_keyed_by_email(self, links_file):
        repository = JsonFileIdentityLinkRepository(links_file)

        await repository.save(_linked(ALICE, "U123"))

        content = json.loads(links_file.read_text())
        assert list(content) == ["a@x.com"]
        assert content["a@x.com"]["external_identities"][0] == {
            "system": "slack",
            "user_id": "U123",
            "linked_at": "2030-01-07T09:00:00Z",
        }

    @pytest.mark.asyncio
    async def test_links_survive_a_new_instance(self, links_file):
        await JsonFileIdentityLinkRepository(links_file).save(_linked(ALICE, "U123"))

        reopened = JsonFileIdentityLinkRepository(links_file)
        link = await reopened.find_by_email(ALICE)

        assert link == _linked(ALICE, "U123")
        holder = await reopened.find_by_external_user_id(ExternalSystem.SLACK, "U123")
        assert holder.email == ALICE
        assert await reopened.find_by_external_user_id(ExternalSystem.SLACK, "U9") is None

    @pytest.mark.asyncio
    async def test_returned_links_are_copies(self, links_file):
        repository = JsonFileIdentityLinkRepository(links_file)
        await repository.save(_linked(ALICE, "U123"))

        link = await repository.find_by_email(ALICE)
        link.unlink(ExternalSystem.SLACK)

        assert (await repository.find_by_email(ALICE)).is_linked(ExternalSystem.SLACK)

    @pytest.mark.asyncio
    async def test_delete(self, links_file):
        repository = JsonFileIdentityLinkRepository(links_file)
        await repository.save(_linked(ALICE, "U123"))

        assert await repository.delete(ALICE) is True
        assert await repository.delete(ALICE) is False
        assert json.loads(links_file.read_text()) == {}

    @pytest.mark.asyncio
    async def test_empty_file_is_empty(self, links_file):
        links_file.parent.mkdir(parents=True)
        links_file.write_text("")

        assert await JsonFileIdentityLinkRepository(links_file).find_all() == []

    @pytest.mark.asyncio
    async def test_corrupt_file_raises(self, links_file):
        links_file.parent.mkdir(parents=True)
        links_file.write_text("{not json")

        with pytest.raises(IdentityLinkRepositoryError, match="Corrupt"):
            await JsonFileIdentityLinkRepository(links_file).find_by_email(ALICE)

    @pytest.mark.asyncio
    async def test_invalid_email_in_file_raises(self, links_file):
        links_file.parent.mkdir(parents=True)
        links_file.write_text(
            json.dumps(
                {
                    "nobody": {
                        "email": "nobody",
                        "external_identities": [],
                        "created_at": "2030-01-07T09:00:00Z",
                        "updated_at": "2030-01-07T09:00:00Z",
                    }
                }
            )
        )

        with pytest.raises(IdentityLinkRepositoryError):
            await JsonFileIdentityLinkRepository(links_file).find_all()
