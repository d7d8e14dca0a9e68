"""Unit tests for the IdentityLink aggregate."""

from datetime import UTC, datetime, timedelta

import pytest

from identity.domain import (
    ExternalIdentity,
    ExternalSystem,
    ExternalSystemAlreadyLinkedError,
    ExternalSystemNotLinkedError,
    IdentityLink,
)
from shared_kernel.email_address import EmailAddress

T0 = datetime(2030, 1, 7, 9, 0, tzinfo=UTC)


class TestIdentityLink:
    def test_create_has_no_identities(self):
        link = IdentityLink.create(EmailAddress("a@x.com"), now=T0)

        assert link.external_identities == []
        assert link.created_at == link.updated_at == T0

    def test_link_attaches_identity(self):
        link = IdentityLink.create(EmailAddress("a@x.com"), now=T0)
        later = T0 + timedelta(minutes=5)

        identity = link.link(ExternalSystem.SLACK, "U123", now=later)

        assert identity == ExternalIdentity(ExternalSystem.SLACK, "U123", later)
        assert link.identity_for(ExternalSystem.SLACK) == identity
        assert link.is_linked(ExternalSystem.SLACK)
        assert link.updated_at == later
        assert link.created_at == T0

    def test_second_identity_of_same_system_is_rejected(self):
        link = IdentityLink.create(EmailAddress("a@x.com"), now=T0)
        link.link(ExternalSystem.SLACK, "U123", now=T0)

        with pytest.raises(ExternalSystemAlreadyLinkedError) as exc_info:
            link.link(ExternalSystem.SLACK, "U999", now=T0)

        assert exc_info.value.existing_user_id == "U123"
        assert len(link.external_identities) == 1

    def test_unlink(self):
        link = IdentityLink.create(EmailAddress("a@x.com"), now=T0)
        link.link(ExternalSystem.SLACK, "U123", now=T0)

        link.unlink(ExternalSystem.SLACK, now=T0 + timedelta(hours=1))

        assert not link.is_linked(ExternalSystem.SLACK)
        assert link.updated_at == T0 + timedelta(hours=1)

    def test_unlink_when_not_linked(self):
        link = IdentityLink.create(EmailAddress("a@x.com"), now=T0)

        with pytest.raises(ExternalSystemNotLinkedError):
            link.unlink(ExternalSystem.SLACK)

    def test_empty_user_id_is_rejected(self):
        with pytest.raises(ValueError):
            ExternalIdentity(ExternalSystem.SLACK, "  ", T0)

    def test_system_is_a_string_enum(self):
        assert ExternalSystem("slack") is ExternalSystem.SLACK
        assert ExternalSystem.SLACK == "slack"
