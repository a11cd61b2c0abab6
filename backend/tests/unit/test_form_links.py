"""Tests for form link generation, validation and statistics."""
import logging

import pytest

from coupongen.errors import AlreadyUsedError, NotFoundError, RetryableStorageError, ValidationError
from coupongen.models.form_link import FormLink
from coupongen.services import form_links as form_links_module
from coupongen.schemas.coupon import SubmissionCreate
from coupongen.services.form_links import FormLinkService, LinkStatistics
from coupongen.services.submissions import SubmissionService


def _submission(token, email="anna@example.com"):
    return SubmissionCreate(
        email=email, first_name="Anna", last_name="Rossi", form_token=token
    )


class TestGenerateLinks:
    """Batch generation of single-use links."""

    def test_generate_reports_fresh_statistics(self, db_session, sample_tenant, sample_campaign):
        """Five new links are all available."""
        service = FormLinkService(db_session, sample_tenant.id)

        links = service.generate_links(sample_campaign.id, 5)
        result = service.get_links_with_stats(sample_campaign.id)

        assert len(links) == 5
        assert all(link.used_at is None for link in links)
        assert all(link.campaign_id == sample_campaign.id for link in links)
        assert all(link.tenant_id == sample_tenant.id for link in links)
        assert (result.statistics.total, result.statistics.used, result.statistics.available) == (5, 0, 5)

    def test_tokens_unique_across_batches(self, db_session, sample_tenant, sample_campaign):
        service = FormLinkService(db_session, sample_tenant.id)

        first = service.generate_links(sample_campaign.id, 50)
        second = service.generate_links(sample_campaign.id, 50)

        tokens = {link.token for link in first + second}
        assert len(tokens) == 100

    def test_token_is_not_the_row_id(self, db_session, sample_tenant, sample_campaign):
        service = FormLinkService(db_session, sample_tenant.id)

        link = service.generate_links(sample_campaign.id, 1)[0]

        assert link.token != str(link.id)
        assert len(link.token) >= 22  # >= 128 bits url-safe

    @pytest.mark.parametrize("count", [0, -3, 1001])
    def test_count_out_of_range(self, db_session, sample_tenant, sample_campaign, count):
        service = FormLinkService(db_session, sample_tenant.id)

        with pytest.raises(ValidationError):
            service.generate_links(sample_campaign.id, count)
        assert service.get_links_with_stats(sample_campaign.id).statistics.total == 0

    @pytest.mark.parametrize("count", [True, 2.5, "5"])
    def test_count_must_be_integer(self, db_session, sample_tenant, sample_campaign, count):
        service = FormLinkService(db_session, sample_tenant.id)

        with pytest.raises(ValidationError):
            service.generate_links(sample_campaign.id, count)

    def test_batch_limit_accepted(self, db_session, sample_tenant, sample_campaign):
        service = FormLinkService(db_session, sample_tenant.id)

        assert len(service.generate_links(sample_campaign.id, 1000)) == 1000

    def test_token_collision_rolls_back_batch(self, db_session, sample_tenant, sample_campaign, monkeypatch):
        """A duplicate token aborts the whole batch with a retryable error."""
        service = FormLinkService(db_session, sample_tenant.id)
        existing = service.generate_links(sample_campaign.id, 2)[0].token
        monkeypatch.setattr(form_links_module, "generate_form_token", lambda nbytes: existing)

        with pytest.raises(RetryableStorageError):
            service.generate_links(sample_campaign.id, 3)

        assert db_session.query(FormLink).count() == 2
        assert service.get_links_with_stats(sample_campaign.id).statistics.total == 2

    def test_campaign_of_other_tenant(self, db_session, sample_campaign, other_tenant):
        """A foreign campaign id is reported as not found."""
        service = FormLinkService(db_session, other_tenant.id)

        with pytest.raises(NotFoundError):
            service.generate_links(sample_campaign.id, 3)


class TestStatistics:
    """Counters derived from link rows."""

    def test_from_links_counts_used(self):
        from datetime import datetime

        links = [FormLink(token="a"), FormLink(token="b", used_at=datetime.utcnow()), FormLink(token="c")]
        stats = LinkStatistics.from_links(links)

        assert [link.is_used for link in links] == [False, True, False]
        assert (stats.total, stats.used, stats.available) == (3, 1, 2)

    def test_empty_campaign(self, db_session, sample_tenant, sample_campaign):
        result = FormLinkService(db_session, sample_tenant.id).get_links_with_stats(sample_campaign.id)

        assert result.links == []
        assert (result.statistics.total, result.statistics.used, result.statistics.available) == (0, 0, 0)

    def test_counters_follow_submissions(self, db_session, sample_tenant, sample_campaign):
        """available + used == total after every generate and submit."""
        links_service = FormLinkService(db_session, sample_tenant.id)
        submissions = SubmissionService(db_session, sample_tenant.id)

        links = links_service.generate_links(sample_campaign.id, 4)
        tokens = [link.token for link in links]
        for i, token in enumerate(tokens[:3]):
            submissions.submit_form(_submission(token, email=f"user{i}@example.com"))
            stats = links_service.get_links_with_stats(sample_campaign.id).statistics
            assert stats.used == i + 1
            assert stats.available + stats.used == stats.total == 4

        links_service.generate_links(sample_campaign.id, 2)
        stats = links_service.get_links_with_stats(sample_campaign.id).statistics
        assert (stats.total, stats.used, stats.available) == (6, 3, 3)

    def test_links_listed_only_for_own_campaign(self, db_session, sample_tenant, sample_campaign, make_campaign):
        other = make_campaign(sample_tenant, "AUTUMN2026CD", name="Autumn promo")
        service = FormLinkService(db_session, sample_tenant.id)
        service.generate_links(sample_campaign.id, 2)
        service.generate_links(other.id, 3)

        assert service.get_links_with_stats(sample_campaign.id).statistics.total == 2
        assert service.get_links_with_stats(other.id).statistics.total == 3


class TestResolveToken:
    """Public lookup of the campaign behind a token."""

    def test_unused_token_returns_campaign(self, db_session, sample_tenant, sample_campaign):
        service = FormLinkService(db_session, sample_tenant.id)
        token = service.generate_links(sample_campaign.id, 1)[0].token

        view = service.resolve_campaign_for_token(token)

        assert view.campaign_code == sample_campaign.campaign_code
        assert view.discount_type == "percent"
        assert view.discount_value == "10"
        assert view.form_token == token
        assert view.model_dump(by_alias=True)["_form_token"] == token

    def test_resolve_is_read_only(self, db_session, sample_tenant, sample_campaign):
        service = FormLinkService(db_session, sample_tenant.id)
        token = service.generate_links(sample_campaign.id, 1)[0].token

        service.resolve_campaign_for_token(token)
        service.resolve_campaign_for_token(token)

        assert service.get_links_with_stats(sample_campaign.id).statistics.used == 0

    def test_used_token(self, db_session, sample_tenant, sample_campaign):
        service = FormLinkService(db_session, sample_tenant.id)
        token = service.generate_links(sample_campaign.id, 1)[0].token
        SubmissionService(db_session, sample_tenant.id).submit_form(_submission(token))

        with pytest.raises(AlreadyUsedError):
            service.resolve_campaign_for_token(token)

    @pytest.mark.parametrize("token", ["", "does-not-exist", "x" * 64])
    def test_unknown_token(self, db_session, sample_tenant, sample_campaign, token):
        service = FormLinkService(db_session, sample_tenant.id)

        with pytest.raises(NotFoundError):
            service.resolve_campaign_for_token(token)

    def test_cross_tenant_token_looks_unknown(self, db_session, sample_tenant, sample_campaign,
                                             other_tenant, caplog):
        """Same error as an unknown token; only the log tells them apart."""
        token = FormLinkService(db_session, sample_tenant.id).generate_links(sample_campaign.id, 1)[0].token
        foreign = FormLinkService(db_session, other_tenant.id)

        with caplog.at_level(logging.WARNING, logger="coupongen.services.form_links"):
            with pytest.raises(NotFoundError) as cross:
                foreign.resolve_campaign_for_token(token)
            with pytest.raises(NotFoundError) as unknown:
                foreign.resolve_campaign_for_token("no-such-token-anywhere")

        assert cross.value.message == unknown.value.message
        messages = [r.getMessage() for r in caplog.records]
        assert any("another tenant" in m for m in messages)
        assert any("Unknown form token" in m for m in messages)
