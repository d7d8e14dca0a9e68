"""Unit tests for calendar ACL based access provisioning."""

from unittest.mock import AsyncMock

import pytest

from identity.infrastructure import GoogleCalendarCollectionAccess
from identity.infrastructure.google_calendar_access import NoopCollectionAccess
from identity.ports.exceptions import ResourceAccessError
from infrastructure.google_calendar import GoogleCalendarApiError
from shared_kernel.email_address import EmailAddress


@pytest.fixture
def mock_client():
    return AsyncMock()


class TestGoogleCalendarCollectionAccess:
    @pytest.mark.asyncio
    async def test_inserts_writer_acl(self, mock_client):
        access = GoogleCalendarCollectionAccess(mock_client)

        await access.grant_access("thalys@cal", EmailAddress("a@x.com"))

        mock_client.insert_acl.assert_awaited_once_with("thalys@cal", "a@x.com", "writer")

    @pytest.mark.asyncio
    async def test_custom_role(self, mock_client):
        access = GoogleCalendarCollectionAccess(mock_client, role="reader")

        await access.grant_access("thalys@cal", EmailAddress("a@x.com"))

        mock_client.insert_acl.assert_awaited_once_with("thalys@cal", "a@x.com", "reader")

    @pytest.mark.asyncio
    async def test_api_error_becomes_resource_access_error(self, mock_client):
        mock_client.insert_acl.side_effect = GoogleCalendarApiError(
            "forbidden", status_code=403
        )
        access = GoogleCalendarCollectionAccess(mock_client)

        with pytest.raises(ResourceAccessError) as exc_info:
            await access.grant_access("thalys@cal", EmailAddress("a@x.com"))

        assert exc_info.value.collection_id == "thalys@cal"
        assert "forbidden" in str(exc_info.value)


@pytest.mark.asyncio
async def test_noop_access_grants_nothing():
    assert await NoopCollectionAccess().grant_access("c", EmailAddress("a@x.com")) is None
