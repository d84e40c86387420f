import pytest
from typer.testing import CliRunner

from fanportal.main import app
from fanportal.models import UserRole
from fanportal.schemas import CreateArticleRequest, GroupData
from fanportal.service import PortalService
from fanportal.storage import Storage

runner = CliRunner()


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite:///{tmp_path / 'cli.db'}"


def test_init_db(db_url):
    result = runner.invoke(app, ["--db-url", db_url, "init-db"])
    assert result.exit_code == 0
    assert "Database ready." in result.stdout


def test_grant_role_bootstraps_first_admin(db_url):
    result = runner.invoke(app, ["--db-url", db_url, "grant-role", "founder", "admin"])
    assert result.exit_code == 0

    service = PortalService(Storage(db_url))
    assert service.get_caller_user_role("founder") == UserRole.admin


def test_grant_role_rejects_unknown_role(db_url):
    result = runner.invoke(app, ["--db-url", db_url, "grant-role", "founder", "emperor"])
    assert result.exit_code == 1
    assert "Unknown role" in result.stdout


def test_homepage_lists_trending_and_latest(db_url):
    runner.invoke(app, ["--db-url", db_url, "grant-role", "founder", "admin"])
    service = PortalService(Storage(db_url))
    article_id = service.create_article("founder", CreateArticleRequest(title="Debut", content="x"))
    service.add_trending("founder", article_id, "article")
    service.add_trending("founder", 404, "rumor")

    result = runner.invoke(app, ["--db-url", db_url, "homepage"])
    assert result.exit_code == 0
    assert "Trending" in result.stdout
    assert "Debut" in result.stdout
    assert "article" in result.stdout


def test_groups_command(db_url):
    result = runner.invoke(app, ["--db-url", db_url, "groups"])
    assert result.exit_code == 0
    assert "No groups found." in result.stdout

    runner.invoke(app, ["--db-url", db_url, "grant-role", "founder", "admin"])
    service = PortalService(Storage(db_url))
    service.create_group("founder", GroupData(name="AKB48", member_count=48, base_location="Akihabara"))

    result = runner.invoke(app, ["--db-url", db_url, "groups"])
    assert result.exit_code == 0
    assert "AKB48" in result.stdout
    assert "48" in result.stdout
