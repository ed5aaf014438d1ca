"""Tests for the click commands, run against in-memory fakes."""

import pytest
from click.testing import CliRunner

from atelier.application.catalog_cache import CatalogCache
from atelier.application.email_content import OrderEmailComposer
from atelier.domain.model.order import OrderStatus
from atelier.domain.model.review import Review
from atelier.infrastructure.bootstrap import Container
from atelier.infrastructure.cli.main import cli
from atelier.infrastructure.config import Settings
from tests.factories import gown, placed_order, save10, scarf
from tests.fakes import (
    FakeDiscountCodeRepository,
    FakeEmailSender,
    FakeOrderRepository,
    FakeProductRepository,
    FakeReviewRepository,
    FakeTokenVerifier,
)


@pytest.fixture
def container(tmp_path):
    return Container(
        settings=Settings(data_dir=tmp_path, jwt_secret="unused"),
        catalog_cache=CatalogCache(0),
        product_repo=FakeProductRepository([gown(), scarf()]),
        order_repo=FakeOrderRepository([placed_order()]),
        discount_repo=FakeDiscountCodeRepository([save10()]),
        review_repo=FakeReviewRepository([Review("r1", "gown-1", 3)]),
        token_verifier=FakeTokenVerifier(),
        email_composer=OrderEmailComposer("Atelier", "https://shop.example.com", "help@example.com"),
        email_sender=FakeEmailSender(),
    )


@pytest.fixture
def run(container):
    runner = CliRunner()

    def invoke(*args):
        return runner.invoke(cli, list(args), obj=container)

    return invoke


class TestOrderCommands:

    def test_list(self, run):
        result = run("order", "list")
        assert result.exit_code == 0
        assert "order-1" in result.output

    def test_show(self, run):
        result = run("order", "show", "--id", "order-1")
        assert result.exit_code == 0
        assert "Silk Gown" in result.output
        assert "Order Total" in result.output

    def test_show_unknown(self, run):
        result = run("order", "show", "--id", "ghost")
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_status(self, run, container):
        result = run("order", "status", "--id", "order-1", "--to", "shipped")

        assert result.exit_code == 0
        assert "pending -> shipped" in result.output
        assert container.order_repo.get_by_id("order-1").status == OrderStatus.SHIPPED

    def test_status_rejects_unknown_value(self, run):
        result = run("order", "status", "--id", "order-1", "--to", "lost")
        assert result.exit_code == 2


class TestProductCommands:

    def test_list_by_category(self, run):
        result = run("product", "list", "--category", "accessories")
        assert "scarf-1" in result.output
        assert "gown-1" not in result.output

    def test_stock_set(self, run, container):
        result = run("stock", "set", "--product", "gown-1", "--size", "M", "--count", "7")
        assert result.exit_code == 0
        assert container.product_repo.stock_of("gown-1", "M") == 7

    def test_stock_set_untracked(self, run, container):
        result = run("stock", "set", "--product", "gown-1", "--size", "L", "--untracked")
        assert "set to untracked" in result.output
        assert container.product_repo.stock_of("gown-1", "L") is None

    def test_stock_set_needs_one_mode(self, run):
        result = run("stock", "set", "--product", "gown-1", "--size", "M")
        assert result.exit_code == 1
        assert "exactly one" in result.output

    def test_rating_recalculate(self, run, container):
        result = run("rating", "recalculate", "--product", "gown-1")
        assert "rating 3.00 from 1 reviews" in result.output
        assert container.product_repo.get_by_id("gown-1").review_count == 1


class TestDiscountCommands:

    def test_create_and_list(self, run):
        created = run("discount", "create", "--code", "vip", "--type", "fixed", "--value", "25")
        assert created.exit_code == 0
        assert "Discount code VIP created" in created.output

        listed = run("discount", "list")
        assert "VIP" in listed.output
        assert "SAVE10" in listed.output

    def test_create_duplicate(self, run):
        result = run("discount", "create", "--code", "save10", "--type", "fixed", "--value", "5")
        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_bad_amount(self, run):
        result = run("discount", "create", "--code", "x", "--type", "fixed", "--value", "lots")
        assert result.exit_code == 2
