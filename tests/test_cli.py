"""CLI tests for GitExtender -- all commands via Click's CliRunner.

The Click context object carries a ``client_factory`` returning a
FakeProvider, so no command touches the network.
"""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from gitextender.cli import cli
from tests.fakes import FakeProvider, ts

URL = "https://github.com/acme/shop"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def runner():
    """Create a Click test runner."""
    return CliRunner()


@pytest.fixture
def fake(provider) -> FakeProvider:
    """Provider with one fully merged, one partly merged and one open branch."""
    provider.add_branch("feature/done", "sha-done", author="Ada", when=ts(5))
    provider.add_branch("bugfix/half", "sha-half", author="Grace", when=ts(3))
    provider.add_branch("hotfix/open", "sha-open", author="Linus", when=ts(1))
    provider.add_branch("release/1.0", "sha-rel")
    for target in ("Development", "Quality", "Production"):
        provider.set_compare(target, "feature/done", ahead=0, behind=2, status="behind")
    provider.set_compare("Development", "bugfix/half", ahead=0, behind=1, status="behind")
    provider.set_compare("Quality", "hotfix/open", ahead=2, behind=0, status="ahead")
    return provider


@pytest.fixture
def invoke(runner, fake):
    """Invoke the CLI against the fake provider with a wide terminal."""

    def _invoke(*args, input=None, token="t0k3n"):
        env = {"COLUMNS": "200", "GITEXTENDER_TOKEN": token}
        return runner.invoke(
            cli,
            list(args),
            obj={"client_factory": lambda handle, config: fake},
            env=env,
            input=input,
        )

    return _invoke


# ---------------------------------------------------------------------------
# branches
# ---------------------------------------------------------------------------


class TestBranchesCommand:
    def test_table(self, invoke):
        result = invoke("branches", URL)
        assert result.exit_code == 0, result.output
        assert "feature/done" in result.output
        assert "bugfix/half" in result.output
        assert "release/1.0" not in result.output
        assert "3 branches, 1 merged into every target" in result.output

    def test_target_columns(self, invoke):
        result = invoke("--dev", "develop", "branches", URL)
        assert result.exit_code == 0, result.output
        assert "develop" in result.output
        assert "Quality" in result.output

    def test_json(self, invoke):
        result = invoke("branches", URL, "--json")
        assert result.exit_code == 0, result.output
        payload = json.loads(result.output)

        assert [b["name"] for b in payload] == ["feature/done", "bugfix/half", "hotfix/open"]
        done = payload[0]
        assert done["category"] == "feature"
        assert done["author"] == "Ada"
        assert [s["target"] for s in done["statuses"]] == [
            "Development",
            "Quality",
            "Production",
        ]
        assert all(s["is_merged"] for s in done["statuses"])
        assert "selected" not in done

    def test_category_filter(self, invoke):
        result = invoke("branches", URL, "--json", "--category", "HOTFIX")
        assert [b["name"] for b in json.loads(result.output)] == ["hotfix/open"]

    @pytest.mark.parametrize(
        "merged, expected",
        [
            ("all-merged", ["feature/done"]),
            ("any-merged", ["feature/done", "bugfix/half"]),
            ("all-unmerged", ["hotfix/open"]),
        ],
    )
    def test_merged_filter(self, invoke, merged, expected):
        result = invoke("branches", URL, "--json", "--merged", merged)
        assert [b["name"] for b in json.loads(result.output)] == expected

    def test_empty_repository(self, runner):
        result = runner.invoke(
            cli,
            ["branches", URL],
            obj={"client_factory": lambda handle, config: FakeProvider()},
        )
        assert result.exit_code == 0
        assert "No feature, bugfix or hotfix branches." in result.output

    def test_listing_failure_exits_1(self, invoke, fake):
        fake.fail("list_branches", 1)
        result = invoke("branches", URL)
        assert result.exit_code == 1
        assert "Error:" in result.output
        assert "list_branches failed" in result.output

    def test_invalid_url_exits_1(self, invoke):
        result = invoke("branches", "nope")
        assert result.exit_code == 1
        assert "Invalid repository URL format" in result.output

    def test_unsupported_provider(self, invoke):
        result = invoke("branches", "https://gitlab.com/acme/shop")
        assert result.exit_code == 1
        assert "Provider not supported yet: gitlab" in result.output


# ---------------------------------------------------------------------------
# delete
# ---------------------------------------------------------------------------


class TestDeleteCommand:
    def test_delete_with_yes(self, invoke, fake):
        result = invoke("delete", URL, "feature/done", "hotfix/open", "--yes")
        assert result.exit_code == 0, result.output
        assert fake.deleted == ["feature/done", "hotfix/open"]
        assert "Deleted 2 branch(es):" in result.output

    def test_confirmation_declined(self, invoke, fake):
        result = invoke("delete", URL, "feature/done", input="n\n")
        assert result.exit_code == 0
        assert "Cancelled." in result.output
        assert fake.deleted == []

    def test_confirmation_accepted(self, invoke, fake):
        result = invoke("delete", URL, "feature/done", input="y\n")
        assert result.exit_code == 0
        assert fake.deleted == ["feature/done"]

    def test_merged_only_skips_unmerged(self, invoke, fake):
        result = invoke(
            "delete", URL, "feature/done", "bugfix/half", "--merged-only", "--yes"
        )
        assert result.exit_code == 0, result.output
        assert fake.deleted == ["feature/done"]
        assert "Skipping bugfix/half: not merged into every target." in result.output

    def test_merged_only_nothing_left(self, invoke, fake):
        result = invoke("delete", URL, "hotfix/open", "--merged-only", "--yes")
        assert result.exit_code == 0
        assert "Nothing to delete." in result.output
        assert fake.calls_to("delete_branch") == []

    def test_partial_failure_exits_1(self, invoke, fake):
        result = invoke("delete", URL, "feature/done", "feature/ghost", "--yes")
        assert result.exit_code == 1
        assert fake.deleted == ["feature/done"]
        assert "Failed feature/ghost" in result.output

    def test_requires_token(self, invoke, fake):
        result = invoke("delete", URL, "feature/done", "--yes", token=None)
        assert result.exit_code == 1
        assert "token is required" in result.output
        assert fake.deleted == []

    def test_names_required(self, invoke):
        result = invoke("delete", URL)
        assert result.exit_code == 2


# ---------------------------------------------------------------------------
# stats / readme
# ---------------------------------------------------------------------------


class TestSummaryCommands:
    def test_stats(self, invoke, fake):
        fake.repository = {
            "description": "Online shop",
            "stargazers_count": 42,
            "language": "Python",
        }
        fake.pulls = [{"state": "open"}, {"state": "closed", "merged_at": "2024-01-01T00:00:00Z"}]
        fake.contributors = [{"login": "ada", "contributions": 12}]
        result = invoke("stats", URL)

        assert result.exit_code == 0, result.output
        assert "Online shop" in result.output
        assert "42" in result.output
        assert "1 open" in result.output
        assert "1 merged" in result.output
        assert "ada" in result.output

    def test_stats_unavailable(self, invoke, fake):
        fake.fail("get_repository")
        result = invoke("stats", URL)
        assert result.exit_code == 0
        assert "No repository statistics available." in result.output

    def test_readme(self, invoke, fake):
        fake.readme = "# Shop\n\nSells things."
        result = invoke("readme", URL)
        assert result.exit_code == 0
        assert "Sells things." in result.output

    def test_readme_missing(self, invoke):
        result = invoke("readme", URL)
        assert result.exit_code == 0
        assert "No README found." in result.output
