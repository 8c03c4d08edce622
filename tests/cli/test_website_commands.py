"""Tests for the website commands."""

from unittest.mock import patch


def add_sites(run, count, prefix="Site"):
    for i in range(count):
        result = run("add", f"{prefix} {i}", f"https://{prefix.lower()}{i}.example.com")
        assert result.exit_code == 0, result.output


class TestAdd:
    def test_add(self, run, stored):
        result = run("add", "GitHub", "github.com")

        assert result.exit_code == 0
        assert "Added GitHub" in result.output
        assert "page 1, position 1" in result.output
        website = stored()["data"]["websites"][0]
        assert website["url"] == "https://github.com/"

    def test_add_with_tag(self, run, stored):
        run("tag", "add", "Work")

        result = run("add", "GitHub", "github.com", "--tag", "work")

        assert result.exit_code == 0
        data = stored()["data"]
        assert data["websites"][0]["tagIds"] == [data["tags"][0]["id"]]

    def test_unknown_tag(self, run):
        result = run("add", "GitHub", "github.com", "--tag", "missing")
        assert result.exit_code == 2
        assert "No tag matches" in result.output

    def test_validation_failure(self, run):
        result = run("add", "GitHub", "not a url")

        assert result.exit_code == 1
        assert "Validation failed" in result.output
        assert "url" in result.output


class TestList:
    def test_empty(self, run):
        result = run("list")
        assert result.exit_code == 0
        assert "No websites yet" in result.output

    def test_pages(self, run):
        add_sites(run, 36)

        result = run("list")

        assert "Page 1 of 2" in result.output
        assert "Page 2 of 2" in result.output

    def test_single_page(self, run):
        add_sites(run, 36)

        result = run("list", "--page", "2")

        assert "Page 2 of 2" in result.output
        assert "Site 35" in result.output
        assert "Site 0 " not in result.output

    def test_page_zero_rejected(self, run):
        assert run("list", "--page", "0").exit_code == 2


class TestEdit:
    def test_rename(self, run, stored):
        run("add", "GitHub", "github.com")

        result = run("edit", "GitHub", "--name", "GH")

        assert result.exit_code == 0
        assert stored()["data"]["websites"][0]["name"] == "GH"

    def test_by_id_prefix(self, run, website_ids, stored):
        run("add", "GitHub", "github.com")
        prefix = website_ids()[0][:8]

        result = run("edit", prefix, "--url", "gitlab.com")

        assert result.exit_code == 0
        assert stored()["data"]["websites"][0]["url"] == "https://gitlab.com/"

    def test_clear_tags(self, run, stored):
        run("tag", "add", "Work")
        run("add", "GitHub", "github.com", "--tag", "Work")

        run("edit", "GitHub", "--clear-tags")

        assert stored()["data"]["websites"][0]["tagIds"] == []

    def test_nothing_to_change(self, run):
        run("add", "GitHub", "github.com")
        result = run("edit", "GitHub")
        assert "Nothing to change" in result.output

    def test_unknown_website(self, run):
        result = run("edit", "nothing", "--name", "X")
        assert result.exit_code == 2
        assert "No website matches" in result.output


class TestDelete:
    def test_force(self, run, stored):
        run("add", "GitHub", "github.com")

        result = run("delete", "GitHub", "-f")

        assert result.exit_code == 0
        assert stored()["data"]["websites"] == []

    def test_declined(self, run, stored):
        run("add", "GitHub", "github.com")

        result = run("delete", "GitHub", input="n\n")

        assert "Cancelled" in result.output
        assert len(stored()["data"]["websites"]) == 1


class TestOpen:
    def test_records_visit(self, run, stored):
        run("add", "GitHub", "github.com")

        with patch("click.launch") as launch:
            result = run("open", "GitHub")

        assert result.exit_code == 0
        launch.assert_called_once_with("https://github.com/")
        assert stored()["data"]["websites"][0]["metadata"]["visitCount"] == 1

    def test_no_launch(self, run):
        run("add", "GitHub", "github.com")

        with patch("click.launch") as launch:
            result = run("open", "GitHub", "--no-launch")

        assert "Opening GitHub" in result.output
        launch.assert_not_called()


class TestMoveAndReorder:
    """Pages and positions are 1-based on the command line."""

    def test_move(self, run, website_ids):
        add_sites(run, 3)
        first = website_ids()[0]

        result = run("move", first, "1", "3")

        assert result.exit_code == 0
        assert "to page 1" in result.output
        assert website_ids()[-1] == first

    def test_move_to_full_page(self, run, website_ids):
        add_sites(run, 36)
        last = website_ids()[-1]

        result = run("move", last, "1", "1")

        assert result.exit_code == 1
        assert "full" in result.output

    def test_move_to_missing_page(self, run, website_ids):
        add_sites(run, 2)
        result = run("move", website_ids()[0], "3", "1")
        assert result.exit_code == 1

    def test_reorder(self, run, website_ids):
        add_sites(run, 3)
        ids = website_ids()

        result = run("reorder", "1", ids[2], ids[1], ids[0])

        assert result.exit_code == 0
        assert website_ids() == [ids[2], ids[1], ids[0]]

    def test_reorder_incomplete(self, run, website_ids):
        add_sites(run, 3)
        ids = website_ids()

        result = run("reorder", "1", ids[0], ids[1])

        assert result.exit_code == 1
        assert "missing" in result.output
        assert website_ids() == ids


class TestSearch:
    def test_by_name(self, run):
        run("add", "GitHub", "github.com")
        run("add", "Reddit", "reddit.com")

        result = run("search", "git")

        assert "GitHub" in result.output
        assert "Reddit" not in result.output

    def test_by_tag(self, run):
        run("tag", "add", "Work")
        run("add", "GitHub", "github.com", "--tag", "Work")
        run("add", "GitLab", "gitlab.com")

        result = run("search", "tag:work git")

        assert "GitHub" in result.output
        assert "GitLab" not in result.output

    def test_no_matches(self, run):
        run("add", "GitHub", "github.com")
        result = run("search", "zzz")
        assert "No websites on page 1 match" in result.output
